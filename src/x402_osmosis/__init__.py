"""
x402-osmosis - Payment Protocol SDK for Python

Pay-per-request gating of HTTP resources with x402 v1 payments on Osmosis.
"""

__version__ = "0.1.0"

from x402_osmosis.exceptions import (
    ConfigurationError,
    InvalidPaymentPayloadError,
    PaymentHeaderDecodeError,
    SignatureCreationError,
    SignatureError,
    UnsupportedNetworkError,
    ValidationError,
    WalletNotFoundError,
    X402Error,
)
from x402_osmosis.types import (
    OSMOSIS_MAINNET,
    OSMOSIS_TESTNET,
    SCHEME_EXACT,
    X402_VERSION,
    FacilitatorConfig,
    PaymentPayload,
    PaymentRequired,
    PaymentRequirements,
    RouteConfig,
    SettleResponse,
    VerifyResponse,
)

__all__ = [
    "__version__",
    # Constants
    "X402_VERSION",
    "SCHEME_EXACT",
    "OSMOSIS_MAINNET",
    "OSMOSIS_TESTNET",
    # Types
    "RouteConfig",
    "FacilitatorConfig",
    "PaymentPayload",
    "PaymentRequirements",
    "PaymentRequired",
    "VerifyResponse",
    "SettleResponse",
    # Exceptions
    "X402Error",
    "ConfigurationError",
    "UnsupportedNetworkError",
    "ValidationError",
    "PaymentHeaderDecodeError",
    "InvalidPaymentPayloadError",
    "SignatureError",
    "WalletNotFoundError",
    "SignatureCreationError",
]
