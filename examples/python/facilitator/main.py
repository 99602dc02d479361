"""
Mock facilitator for local development.

Checks the envelope shape and the amount/recipient of the signed MsgSend but
does not verify signatures or broadcast anything. Settlement returns a
deterministic fake transaction hash.
"""

import hashlib
from typing import Any

from fastapi import FastAPI

from x402_osmosis.encoding import DecodeError, decode_payment_header, validate_payment_payload
from x402_osmosis.logging_config import get_logger, setup_logging
from x402_osmosis.types import (
    SCHEME_EXACT,
    PaymentRequirements,
    SettleRequest,
    SettleResponse,
    VerifyRequest,
    VerifyResponse,
)

logger = get_logger(__name__)

# Hardcoded facilitator configuration
FACILITATOR_HOST = "0.0.0.0"
FACILITATOR_PORT = 3000

app = FastAPI(title="X402 Osmosis Mock Facilitator")


def _amount_paid(signed: Any, pay_to: str) -> int | None:
    """Sum the coins sent to pay_to by the MsgSend entries, None if there are none"""
    if not isinstance(signed, dict) or not isinstance(signed.get("msgs"), list):
        return None

    paid = None
    for msg in signed["msgs"]:
        if not isinstance(msg, dict):
            continue
        # amino JSON wraps the message as {"type": ..., "value": {...}}
        value = msg.get("value", msg)
        if not isinstance(value, dict) or value.get("to_address") != pay_to:
            continue
        coins = value.get("amount")
        paid = (paid or 0) + sum(
            int(coin["amount"])
            for coin in (coins if isinstance(coins, list) else [])
            if isinstance(coin, dict) and str(coin.get("amount", "")).isdigit()
        )
    return paid


def _check(payment_header: str, requirements: PaymentRequirements) -> str | None:
    """Return the reason the payment is invalid, or None"""
    envelope = decode_payment_header(payment_header)
    if isinstance(envelope, DecodeError):
        return envelope.reason
    if not validate_payment_payload(envelope):
        return "Invalid payment payload structure"
    if envelope["scheme"] != SCHEME_EXACT or envelope["network"] != requirements.network:
        return "scheme or network mismatch"

    paid = _amount_paid(envelope["payload"]["signed"], requirements.pay_to)
    if paid is None:
        return "no transfer to payTo"
    if paid < int(requirements.max_amount_required):
        return "amount below maxAmountRequired"
    return None


@app.get("/health")
async def health():
    return {"status": "healthy", "service": "mock-facilitator"}


@app.post("/verify", response_model=VerifyResponse, response_model_by_alias=True)
async def verify(request: VerifyRequest) -> VerifyResponse:
    reason = _check(request.payment_header, request.payment_requirements)
    if reason is not None:
        logger.warning(f"[facilitator] Rejecting payment: {reason}")
        return VerifyResponse(isValid=False, invalidReason=reason)
    logger.info(f"[facilitator] Payment valid for {request.payment_requirements.resource}")
    return VerifyResponse(isValid=True)


@app.post("/settle", response_model=SettleResponse, response_model_by_alias=True)
async def settle(request: SettleRequest) -> SettleResponse:
    reason = _check(request.payment_header, request.payment_requirements)
    if reason is not None:
        return SettleResponse(success=False, error=reason)

    tx_hash = hashlib.sha256(request.payment_header.encode("utf-8")).hexdigest().upper()
    logger.info(f"[facilitator] Settled {tx_hash[:10]}...")
    return SettleResponse(
        success=True,
        txHash=tx_hash,
        networkId=request.payment_requirements.network,
    )


if __name__ == "__main__":
    import uvicorn

    setup_logging()

    uvicorn.run(app, host=FACILITATOR_HOST, port=FACILITATOR_PORT, log_level="info")
