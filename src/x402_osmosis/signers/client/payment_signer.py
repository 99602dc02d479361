"""
Payment signing for the x402 exact scheme
"""

import logging
from typing import Mapping, Optional

from x402_osmosis.encoding import encode_payment_payload, validate_payment_payload
from x402_osmosis.exceptions import (
    InvalidPaymentPayloadError,
    SignatureCreationError,
    SignatureError,
    WalletNotFoundError,
)
from x402_osmosis.signers.client.base import ClientSigner, SignDocBuilder
from x402_osmosis.types import (
    SCHEME_EXACT,
    X402_VERSION,
    PaymentOptions,
    PaymentPayload,
    PaymentPayloadData,
    SignedPayment,
)

logger = logging.getLogger(__name__)


async def sign_payment(
    chain_id: str,
    options: PaymentOptions,
    signer: Optional[ClientSigner],
    builder: SignDocBuilder,
) -> SignedPayment:
    """
    Sign a payment intent and encode it for the X-PAYMENT header.

    Args:
        chain_id: Cosmos chain ID the wallet signs for
        options: Payment intent
        signer: Wallet; None when no wallet is available
        builder: Builds the sign document for the intent

    Returns:
        SignedPayment with the envelope and its header encoding

    Raises:
        WalletNotFoundError: If no wallet is available
        SignatureCreationError: If the wallet fails or declines to sign
    """
    if signer is None:
        raise WalletNotFoundError("Wallet not found")

    sign_doc = builder.build_sign_doc(options, chain_id)

    try:
        result = await signer.sign_amino(chain_id, options.from_address, sign_doc)
    except SignatureError:
        raise
    except Exception as e:
        raise SignatureCreationError(f"Wallet failed to sign payment: {e}") from e

    if not isinstance(result, Mapping) or "signed" not in result or "signature" not in result:
        raise SignatureCreationError("Wallet returned an incomplete signature")

    payment_payload = PaymentPayload(
        x402Version=X402_VERSION,
        scheme=SCHEME_EXACT,
        network=options.network,
        payload=PaymentPayloadData(signed=result["signed"], signature=result["signature"]),
    )
    if not validate_payment_payload(payment_payload):
        raise InvalidPaymentPayloadError("Signed payment payload is missing required fields")

    logger.debug(f"Signed payment for {options.to} on {options.network}")
    return SignedPayment(
        paymentPayload=payment_payload,
        paymentHeader=encode_payment_payload(payment_payload),
    )
