"""
x402 Facilitator SDK
"""

from x402_osmosis.facilitator.facilitator_client import (
    FacilitatorClient,
    settle_payment,
    verify_payment,
)

__all__ = ["FacilitatorClient", "verify_payment", "settle_payment"]
