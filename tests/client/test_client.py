"""
Tests for X402Client and X402HttpClient.
"""

from typing import Any

import httpx
import pytest
from fastapi import FastAPI

from x402_osmosis.clients import (
    PaymentRequirementsFilter,
    X402Client,
    X402HttpClient,
    decode_payment_response,
)
from x402_osmosis.encoding import decode_payment_header
from x402_osmosis.exceptions import UnsupportedNetworkError, WalletNotFoundError
from x402_osmosis.fastapi import X402Middleware
from x402_osmosis.server import X402Server
from x402_osmosis.signers.client import ClientSigner, SignDocBuilder
from x402_osmosis.types import PaymentOptions, PaymentRequirements, SettleResponse

PAYER = "osmo1payer000000000000000000000000000000000"


class MsgSendBuilder(SignDocBuilder):
    def build_sign_doc(self, options: PaymentOptions, chain_id: str) -> dict[str, Any]:
        return {
            "chain_id": chain_id,
            "memo": options.memo,
            "msgs": [
                {
                    "from_address": options.from_address,
                    "to_address": options.to,
                    "amount": [c.model_dump() for c in options.coin],
                }
            ],
        }


class EchoWallet(ClientSigner):
    def get_address(self) -> str:
        return PAYER

    async def sign_amino(self, chain_id, signer, sign_doc):
        return {"signed": sign_doc, "signature": {"signature": "c2ln"}}


def _requirements(network="osmo-test", scheme="exact", extra=None, amount="1000"):
    return PaymentRequirements(
        scheme=scheme,
        network=network,
        maxAmountRequired=amount,
        resource="http://testserver/premium",
        description="Access to protected resource",
        mimeType="application/json",
        payTo="osmo1merchant",
        maxTimeoutSeconds=300,
        extra=extra,
    )


def test_select_first_supported_requirement():
    client = X402Client(EchoWallet(), MsgSendBuilder())
    accepts = [
        _requirements(network="cosmoshub"),
        _requirements(scheme="upto"),
        _requirements(network="osmosis"),
        _requirements(network="osmo-test"),
    ]

    assert client.select_payment_requirements(accepts).network == "osmosis"
    selected = client.select_payment_requirements(
        accepts, filters=PaymentRequirementsFilter(network="osmo-test")
    )
    assert selected.network == "osmo-test"


def test_select_without_supported_requirement():
    client = X402Client(EchoWallet(), MsgSendBuilder())

    with pytest.raises(UnsupportedNetworkError):
        client.select_payment_requirements([_requirements(network="cosmoshub")])


def test_create_payment_options():
    client = X402Client(EchoWallet(), MsgSendBuilder(), memo="order-42")

    options = client.create_payment_options(_requirements(amount="2500"))

    assert options.from_address == PAYER
    assert options.to == "osmo1merchant"
    assert [c.model_dump() for c in options.coin] == [{"denom": "uosmo", "amount": "2500"}]
    assert options.memo == "order-42"
    assert options.network == "osmo-test"


def test_create_payment_options_denom_override():
    client = X402Client(EchoWallet(), MsgSendBuilder())

    options = client.create_payment_options(_requirements(extra={"denom": "ibc/USDC"}))

    assert options.coin[0].denom == "ibc/USDC"


def test_create_payment_options_without_wallet():
    client = X402Client(None, MsgSendBuilder())

    with pytest.raises(WalletNotFoundError):
        client.create_payment_options(_requirements())


@pytest.mark.anyio
async def test_handle_payment_signs_for_chain():
    client = X402Client(EchoWallet(), MsgSendBuilder())

    signed = await client.handle_payment([_requirements(network="osmosis")])

    envelope = decode_payment_header(signed.payment_header)
    assert envelope["network"] == "osmosis"
    assert envelope["payload"]["signed"]["chain_id"] == "osmosis-1"


@pytest.mark.anyio
async def test_handle_payment_custom_selector():
    client = X402Client(EchoWallet(), MsgSendBuilder())
    accepts = [_requirements(network="osmosis"), _requirements(network="osmo-test")]

    signed = await client.handle_payment(accepts, selector=lambda options: options[-1])

    assert signed.payment_payload.network == "osmo-test"


def _paywalled_app(facilitator, recipient_address):
    app = FastAPI()
    app.add_middleware(
        X402Middleware,
        recipient_address=recipient_address,
        routes={"/premium": {"price": "1000"}},
        server=X402Server(facilitator),
    )

    @app.get("/premium")
    async def premium():
        return {"data": "premium content"}

    return app


@pytest.mark.anyio
async def test_http_client_pays_and_retries(mock_facilitator, recipient_address):
    app = _paywalled_app(mock_facilitator, recipient_address)
    x402_client = X402Client(EchoWallet(), MsgSendBuilder())

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as http_client:
        response = await X402HttpClient(http_client, x402_client).get("/premium")

    assert response.status_code == 200
    assert response.json() == {"data": "premium content"}

    payment_response = decode_payment_response(response)
    assert payment_response.tx_hash == "0xdead"
    assert payment_response.network == "osmo-test"

    header, requirements = mock_facilitator.verify.await_args.args
    envelope = decode_payment_header(header)
    assert envelope["payload"]["signed"]["msgs"][0]["to_address"] == recipient_address
    assert requirements.pay_to == recipient_address


@pytest.mark.anyio
async def test_http_client_returns_settlement_failure(mock_facilitator, recipient_address):
    mock_facilitator.settle.return_value = SettleResponse(success=False, error="rejected")
    app = _paywalled_app(mock_facilitator, recipient_address)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as http_client:
        client = X402HttpClient(http_client, X402Client(EchoWallet(), MsgSendBuilder()))
        response = await client.get("/premium")

    assert response.status_code == 402
    assert response.json() == {"error": "Payment settlement failed", "message": "rejected"}
    assert decode_payment_response(response) is None
    assert mock_facilitator.verify.await_count == 1


@pytest.mark.anyio
async def test_http_client_passes_through_non_402():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"ok": True})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http_client:
        client = X402HttpClient(http_client, X402Client(EchoWallet(), MsgSendBuilder()))
        response = await client.get("http://api.example/free")

    assert response.status_code == 200
