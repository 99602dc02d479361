"""
x402 custom exception hierarchy
"""


class X402Error(Exception):
    """x402 base exception"""

    pass


class ConfigurationError(X402Error):
    """Configuration-related error"""

    pass


class UnsupportedNetworkError(ConfigurationError):
    """Unsupported network"""

    pass


class ValidationError(X402Error):
    """Validation-related error"""

    pass


class PaymentHeaderDecodeError(ValidationError):
    """X-PAYMENT header could not be decoded into an envelope"""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Failed to decode payment header: {reason}")


class InvalidPaymentPayloadError(ValidationError):
    """Payment payload is missing required fields"""

    pass


class SignatureError(X402Error):
    """Signature-related error"""

    pass


class WalletNotFoundError(SignatureError):
    """No wallet available to sign the payment"""

    pass


class SignatureCreationError(SignatureError):
    """Wallet failed or declined to sign"""

    pass
