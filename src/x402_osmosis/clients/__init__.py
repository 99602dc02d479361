"""
x402 Client SDK
"""

from x402_osmosis.clients.x402_client import PaymentRequirementsFilter, X402Client
from x402_osmosis.clients.x402_http_client import X402HttpClient, decode_payment_response

__all__ = [
    "PaymentRequirementsFilter",
    "X402Client",
    "X402HttpClient",
    "decode_payment_response",
]
