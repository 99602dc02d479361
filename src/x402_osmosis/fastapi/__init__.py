"""
FastAPI middleware for x402 payment handling
"""

from x402_osmosis.fastapi.middleware import (
    PAYMENT_HEADER,
    PAYMENT_RESPONSE_HEADER,
    SETTLEMENT_TIME_HEADER,
    VERIFICATION_TIME_HEADER,
    PaymentErrorCode,
    X402Middleware,
    install_payment_middleware,
    parse_routes,
)

__all__ = [
    "X402Middleware",
    "PaymentErrorCode",
    "install_payment_middleware",
    "parse_routes",
    "PAYMENT_HEADER",
    "PAYMENT_RESPONSE_HEADER",
    "VERIFICATION_TIME_HEADER",
    "SETTLEMENT_TIME_HEADER",
]
