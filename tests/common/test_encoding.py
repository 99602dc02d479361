"""
Tests for the payment envelope codec.
"""

import base64
import json

import pytest

from x402_osmosis.encoding import (
    DecodeError,
    create_payment_response_header,
    decode_base64,
    decode_payment_header,
    decode_payment_payload,
    encode_payment_payload,
    validate_payment_payload,
)
from x402_osmosis.exceptions import PaymentHeaderDecodeError
from x402_osmosis.types import PaymentPayload


def test_decode_payment_header_returns_document(envelope, payment_header):
    assert decode_payment_header(payment_header) == envelope


def test_encode_decode_encode_is_stable(envelope):
    encoded = encode_payment_payload(envelope)
    decoded = decode_payment_header(encoded)
    assert encode_payment_payload(decoded) == encoded


def test_encode_model_uses_wire_aliases(envelope):
    payload = PaymentPayload(**envelope)
    decoded = json.loads(decode_base64(encode_payment_payload(payload)))
    assert decoded["x402Version"] == 1
    assert decoded["payload"]["signature"] == envelope["payload"]["signature"]


@pytest.mark.parametrize(
    "header",
    [
        "",
        "not base64!!",
        base64.b64encode(b"not json").decode(),
        base64.b64encode(b"[1, 2, 3]").decode(),
        base64.b64encode(b"\xff\xfe\xfd").decode(),
        "eyJ4NDAyVmVyc2lvbiI6",
    ],
)
def test_decode_payment_header_never_raises(header):
    result = decode_payment_header(header)
    assert isinstance(result, DecodeError)
    assert result.reason


def test_decode_payment_payload_raises_typed_error():
    with pytest.raises(PaymentHeaderDecodeError) as exc_info:
        decode_payment_payload("%%%")
    assert "invalid base64" in exc_info.value.reason


def test_decode_payment_payload_into_model(payment_header):
    payload = decode_payment_payload(payment_header, PaymentPayload)
    assert payload.scheme == "exact"
    assert payload.network == "osmo-test"


def test_validate_accepts_complete_envelope(envelope):
    assert validate_payment_payload(envelope) is True
    assert validate_payment_payload(PaymentPayload(**envelope)) is True


@pytest.mark.parametrize("missing", ["signed", "signature"])
def test_validate_rejects_missing_payload_field(envelope, missing):
    del envelope["payload"][missing]
    assert validate_payment_payload(envelope) is False


@pytest.mark.parametrize("field", ["x402Version", "scheme", "network"])
def test_validate_rejects_empty_top_level_field(envelope, field):
    envelope[field] = 0 if field == "x402Version" else ""
    assert validate_payment_payload(envelope) is False


def test_validate_rejects_non_documents():
    assert validate_payment_payload(None) is False
    assert validate_payment_payload(DecodeError("bad")) is False
    assert validate_payment_payload({"x402Version": 1, "scheme": "exact"}) is False


def test_create_payment_response_header():
    header = create_payment_response_header("0xdead", "osmo-test", timestamp=1700000000000)
    assert json.loads(decode_base64(header)) == {
        "txHash": "0xdead",
        "network": "osmo-test",
        "timestamp": 1700000000000,
    }


def test_create_payment_response_header_uses_current_time():
    decoded = json.loads(decode_base64(create_payment_response_header("0xdead", "osmo-test")))
    assert isinstance(decoded["timestamp"], int)
    assert decoded["timestamp"] > 1_600_000_000_000
