"""
X402HttpClient - HTTP client adapter with automatic 402 payment handling
"""

import logging
from typing import Any

import httpx

from x402_osmosis.clients.x402_client import PaymentRequirementsSelector, X402Client
from x402_osmosis.encoding import decode_payment_payload
from x402_osmosis.types import PaymentRequired, PaymentResponseHeader, SignedPayment

logger = logging.getLogger(__name__)


PAYMENT_HEADER = "X-PAYMENT"
PAYMENT_RESPONSE_HEADER = "X-Payment-Response"


class X402HttpClient:
    """
    HTTP client adapter with automatic 402 payment handling.

    Wraps httpx.AsyncClient to automatically handle 402 Payment Required responses.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        x402_client: X402Client,
        selector: PaymentRequirementsSelector | None = None,
    ) -> None:
        """
        Initialize HTTP client adapter.

        Args:
            http_client: httpx.AsyncClient instance
            x402_client: X402Client instance
            selector: Custom payment requirements selector (optional)
        """
        self._http_client = http_client
        self._x402_client = x402_client
        self._selector = selector

    async def request_with_payment(
        self,
        method: str,
        url: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make HTTP request with automatic 402 payment handling.

        Flow:
            1. Send original request
            2. If 402, parse PaymentRequired from the body
            3. Sign a payment for the selected requirements
            4. Retry once with the X-PAYMENT header
        """
        logger.info(f"Making {method} request to {url}")
        response = await self._http_client.request(method, url, **kwargs)
        logger.info(f"Received response: status={response.status_code}")

        if response.status_code != 402:
            return response

        payment_required = self._parse_payment_required(response)
        if payment_required is None:
            logger.error("Failed to parse PaymentRequired from 402 response")
            return response

        logger.info(f"Parsed PaymentRequired with {len(payment_required.accepts)} payment options")
        signed_payment = await self._x402_client.handle_payment(
            payment_required.accepts, self._selector
        )
        return await self._retry_with_payment(method, url, signed_payment, kwargs)

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET request with payment handling"""
        return await self.request_with_payment("GET", url, **kwargs)

    async def post(self, url: str, **kwargs: Any) -> httpx.Response:
        """POST request with payment handling"""
        return await self.request_with_payment("POST", url, **kwargs)

    def _parse_payment_required(self, response: httpx.Response) -> PaymentRequired | None:
        """Parse PaymentRequired from 402 response body"""
        try:
            body = response.json()
        except ValueError as e:
            logger.warning(f"402 response body is not JSON: {e}")
            return None

        if not isinstance(body, dict) or not isinstance(body.get("accepts"), list):
            # Settlement failures also answer 402, without accepts
            logger.warning(f"402 response has no payment requirements: {body}")
            return None

        try:
            return PaymentRequired.model_validate(body)
        except ValueError as e:
            logger.error(f"Failed to parse PaymentRequired from body: {e}")
            return None

    async def _retry_with_payment(
        self,
        method: str,
        url: str,
        signed_payment: SignedPayment,
        kwargs: dict[str, Any],
    ) -> httpx.Response:
        """Retry request with payment header"""
        headers = dict(kwargs.get("headers") or {})
        headers[PAYMENT_HEADER] = signed_payment.payment_header
        kwargs["headers"] = headers

        response = await self._http_client.request(method, url, **kwargs)
        logger.info(f"Payment retry response: status={response.status_code}")
        if response.status_code >= 400:
            logger.error(f"Payment retry failed with body: {response.text[:500]}")
        return response


def decode_payment_response(response: httpx.Response) -> PaymentResponseHeader | None:
    """Decode the X-Payment-Response header of an admitted response"""
    header_value = response.headers.get(PAYMENT_RESPONSE_HEADER)
    if not header_value:
        return None
    return decode_payment_payload(header_value, PaymentResponseHeader)
