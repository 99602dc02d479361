"""
Client signers
"""

from x402_osmosis.signers.client.base import ClientSigner, SignDocBuilder
from x402_osmosis.signers.client.payment_signer import sign_payment

__all__ = ["ClientSigner", "SignDocBuilder", "sign_payment"]
