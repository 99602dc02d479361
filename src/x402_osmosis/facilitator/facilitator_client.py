"""
FacilitatorClient - Client for communicating with facilitator service
"""

import logging
from typing import Any, Mapping, Optional

import httpx

from x402_osmosis.config import resolve_facilitator_url
from x402_osmosis.encoding import decode_payment_header, validate_payment_payload
from x402_osmosis.types import (
    X402_VERSION,
    FacilitatorConfig,
    PaymentRequirements,
    SettleRequest,
    SettleResponse,
    VerifyRequest,
    VerifyResponse,
)

logger = logging.getLogger(__name__)

VERIFY_CONNECTION_ERROR = "Failed to connect to facilitator"
SETTLE_CONNECTION_ERROR = "Failed to settle payment"
INVALID_PAYLOAD_STRUCTURE = "Invalid payment payload structure"


class FacilitatorClient:
    """
    Client for communicating with facilitator service.

    Each call is a single POST with no retries. Transport failures and
    malformed responses are reported as negative results instead of raised.
    """

    def __init__(
        self,
        config: FacilitatorConfig,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize facilitator client.

        Args:
            config: Facilitator base URL, endpoint paths and headers
            timeout: HTTP timeout in seconds
            transport: Custom httpx transport (e.g. httpx.MockTransport)
        """
        self._config = config
        self._timeout = timeout
        self._transport = transport

    @property
    def config(self) -> FacilitatorConfig:
        return self._config

    async def verify(
        self,
        payment_header: str,
        requirements: PaymentRequirements,
    ) -> VerifyResponse:
        """
        Verify payment (without executing on-chain transaction).

        Args:
            payment_header: Raw X-PAYMENT header value
            requirements: Payment requirements

        Returns:
            VerifyResponse
        """
        request_body = VerifyRequest(
            x402Version=X402_VERSION,
            paymentHeader=payment_header,
            paymentRequirements=requirements,
        )
        try:
            data = await self._post(self._config.verify_url, request_body.model_dump(by_alias=True))
            return VerifyResponse.model_validate(data)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error(f"[x402] Verification failed: {e}")
            result = VerifyResponse(isValid=False, invalidReason=VERIFY_CONNECTION_ERROR)
            result._facilitator_unreachable = True
            return result

    async def settle(
        self,
        payment_header: str,
        requirements: PaymentRequirements,
    ) -> SettleResponse:
        """
        Execute payment settlement.

        Args:
            payment_header: Raw X-PAYMENT header value
            requirements: Payment requirements

        Returns:
            SettleResponse with txHash on success
        """
        request_body = SettleRequest(
            x402Version=X402_VERSION,
            paymentHeader=payment_header,
            paymentRequirements=requirements,
        )
        try:
            data = await self._post(self._config.settle_url, request_body.model_dump(by_alias=True))
            return SettleResponse.model_validate(data)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
            logger.error(f"[x402] Settlement failed: {e}")
            result = SettleResponse(success=False, error=SETTLE_CONNECTION_ERROR)
            result._facilitator_unreachable = True
            return result

    async def _post(self, url: str, body: dict[str, Any]) -> Any:
        async with httpx.AsyncClient(
            headers=self._config.headers or {},
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(url, json=body)
        if response.is_error:
            logger.warning(f"[x402] Facilitator {url} returned HTTP {response.status_code}")
        return response.json()


async def verify_payment(
    payment_header: str,
    requirements: PaymentRequirements,
    facilitator_url: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> VerifyResponse:
    """
    Verify payment against a facilitator mounted under /api/facilitator.

    The header is checked for a well-formed envelope before any network call.
    """
    envelope = decode_payment_header(payment_header)
    if not validate_payment_payload(envelope):
        return VerifyResponse(isValid=False, invalidReason=INVALID_PAYLOAD_STRUCTURE)

    base_url = resolve_facilitator_url(facilitator_url, env, purpose="verify")
    client = FacilitatorClient(FacilitatorConfig.api_routes(base_url), transport=transport)
    return await client.verify(payment_header, requirements)


async def settle_payment(
    payment_header: str,
    requirements: PaymentRequirements,
    facilitator_url: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SettleResponse:
    """Settle payment via a facilitator mounted under /api/facilitator"""
    base_url = resolve_facilitator_url(facilitator_url, env, purpose="settle")
    client = FacilitatorClient(FacilitatorConfig.api_routes(base_url), transport=transport)
    return await client.settle(payment_header, requirements)
