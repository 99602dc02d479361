"""
Pytest configuration and fixtures
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from x402_osmosis.encoding import encode_payment_payload
from x402_osmosis.types import PaymentRequirements, SettleResponse, VerifyResponse

RECIPIENT = "osmo1abcrecipient0000000000000000000000000"
PAYER = "osmo1payer000000000000000000000000000000000"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def recipient_address():
    return RECIPIENT


@pytest.fixture
def payment_requirements():
    return PaymentRequirements(
        scheme="exact",
        network="osmo-test",
        maxAmountRequired="1000",
        resource="http://testserver/premium",
        description="Access to protected resource",
        mimeType="application/json",
        payTo=RECIPIENT,
        maxTimeoutSeconds=300,
    )


@pytest.fixture
def envelope():
    """Structurally valid payment envelope"""
    return {
        "x402Version": 1,
        "scheme": "exact",
        "network": "osmo-test",
        "payload": {
            "signed": {
                "chain_id": "osmo-test-5",
                "account_number": "42",
                "sequence": "7",
                "fee": {"amount": [], "gas": "0"},
                "msgs": [
                    {
                        "type": "cosmos-sdk/MsgSend",
                        "value": {
                            "from_address": PAYER,
                            "to_address": RECIPIENT,
                            "amount": [{"denom": "uosmo", "amount": "1000"}],
                        },
                    }
                ],
                "memo": "",
            },
            "signature": {
                "pub_key": {"type": "tendermint/PubKeySecp256k1", "value": "A0pubkey"},
                "signature": "c2lnbmF0dXJl",
            },
        },
    }


@pytest.fixture
def payment_header(envelope):
    return encode_payment_payload(envelope)


@pytest.fixture
def mock_facilitator():
    """Facilitator client stub that accepts and settles every payment"""
    facilitator = MagicMock()
    facilitator.verify = AsyncMock(return_value=VerifyResponse(isValid=True, invalidReason=None))
    facilitator.settle = AsyncMock(
        return_value=SettleResponse(
            success=True, error=None, txHash="0xdead", networkId="osmo-test"
        )
    )
    return facilitator
