"""
Encoding utilities for x402 protocol
"""

import base64
import binascii
import json
import time
from dataclasses import dataclass
from typing import Any, TypeVar

from x402_osmosis.exceptions import PaymentHeaderDecodeError

T = TypeVar("T")


@dataclass(frozen=True)
class DecodeError:
    """Result of a failed payment header decode"""

    reason: str


def encode_base64(data: str | bytes) -> str:
    """Encode data to base64"""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return base64.b64encode(data).decode("utf-8")


def decode_base64(data: str) -> str:
    """Decode base64 to string"""
    return base64.b64decode(data, validate=True).decode("utf-8")


def encode_payment_payload(payload: Any) -> str:
    """Encode payment payload to base64 for HTTP header"""
    if hasattr(payload, "model_dump"):
        json_str = json.dumps(payload.model_dump(by_alias=True))
    else:
        json_str = json.dumps(payload)
    return encode_base64(json_str)


def decode_payment_header(encoded: str) -> dict[str, Any] | DecodeError:
    """
    Decode an X-PAYMENT header into its JSON document.

    Never raises: every failure is returned as a DecodeError.
    """
    try:
        json_str = decode_base64(encoded)
    except (binascii.Error, UnicodeDecodeError, ValueError, TypeError) as e:
        return DecodeError(f"invalid base64: {e}")

    try:
        data = json.loads(json_str)
    except ValueError as e:
        return DecodeError(f"invalid JSON: {e}")

    if not isinstance(data, dict):
        return DecodeError("payment header is not a JSON object")
    return data


def decode_payment_payload(encoded: str, model_class: type[T] | None = None) -> T | dict[str, Any]:
    """Decode payment payload from base64 HTTP header

    Raises:
        PaymentHeaderDecodeError: If the header is not base64-encoded JSON
    """
    data = decode_payment_header(encoded)
    if isinstance(data, DecodeError):
        raise PaymentHeaderDecodeError(data.reason)
    if model_class is not None:
        return model_class(**data)
    return data


def validate_payment_payload(payload: Any) -> bool:
    """
    Check the envelope shape.

    Requires non-empty x402Version, scheme, network, payload.signed and
    payload.signature. Signatures are not checked here.
    """
    if hasattr(payload, "model_dump"):
        payload = payload.model_dump(by_alias=True)
    if not isinstance(payload, dict):
        return False

    inner = payload.get("payload")
    if not isinstance(inner, dict):
        return False

    return all(
        _present(value)
        for value in (
            payload.get("x402Version"),
            payload.get("scheme"),
            payload.get("network"),
            inner.get("signed"),
            inner.get("signature"),
        )
    )


def _present(value: Any) -> bool:
    if isinstance(value, (str, dict, list)):
        return bool(value)
    return value is not None and value is not False and value != 0


def create_payment_response_header(
    tx_hash: str | None,
    network_id: str | None,
    timestamp: int | None = None,
) -> str:
    """Encode the X-Payment-Response header value"""
    response = {
        "txHash": tx_hash,
        "network": network_id,
        "timestamp": timestamp if timestamp is not None else int(time.time() * 1000),
    }
    return encode_base64(json.dumps(response))
