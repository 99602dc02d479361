"""
X402Server - Core payment server for x402 protocol
"""

import time
from dataclasses import dataclass
from typing import Generic, TypeVar

from x402_osmosis.facilitator.facilitator_client import FacilitatorClient
from x402_osmosis.types import (
    SCHEME_EXACT,
    X402_VERSION,
    PaymentRequired,
    PaymentRequirements,
    RouteConfig,
    SettleResponse,
    VerifyResponse,
)

R = TypeVar("R")


@dataclass
class TimedResult(Generic[R]):
    """Facilitator result with the wall-clock duration of the call"""

    result: R
    elapsed_ms: int


class X402Server:
    """
    Core payment server for x402 protocol.

    Builds payment requirements and coordinates verify/settle with the facilitator.
    """

    def __init__(self, facilitator: FacilitatorClient, scheme: str = SCHEME_EXACT) -> None:
        """
        Initialize X402Server.

        Args:
            facilitator: Facilitator client used for verify and settle
            scheme: The payment scheme this server accepts
        """
        self._facilitator = facilitator
        self._scheme = scheme

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def facilitator(self) -> FacilitatorClient:
        return self._facilitator

    def build_payment_requirements(
        self,
        route: RouteConfig,
        resource_url: str,
        pay_to: str,
    ) -> PaymentRequirements:
        """Build payment requirements from route configuration.

        Args:
            route: Route configuration
            resource_url: Absolute URL of the protected resource
            pay_to: Recipient address

        Returns:
            PaymentRequirements
        """
        return PaymentRequirements(
            scheme=self._scheme,
            network=route.resolved_network,
            maxAmountRequired=route.price,
            resource=resource_url,
            description=route.resolved_description,
            mimeType=route.resolved_mime_type,
            outputSchema=route.resolved_output_schema,
            payTo=pay_to,
            maxTimeoutSeconds=route.resolved_max_timeout_seconds,
            extra=route.extra,
        )

    def create_payment_required_response(
        self,
        requirements: list[PaymentRequirements],
    ) -> PaymentRequired:
        """Create 402 Payment Required response"""
        return PaymentRequired(x402Version=X402_VERSION, accepts=requirements)

    async def verify_payment(
        self,
        payment_header: str,
        requirements: PaymentRequirements,
    ) -> TimedResult[VerifyResponse]:
        """
        Verify payment with the facilitator.

        Args:
            payment_header: Raw X-PAYMENT header value
            requirements: Payment requirements built for this request

        Returns:
            TimedResult wrapping the VerifyResponse
        """
        started = _now_ms()
        result = await self._facilitator.verify(payment_header, requirements)
        return TimedResult(result=result, elapsed_ms=_now_ms() - started)

    async def settle_payment(
        self,
        payment_header: str,
        requirements: PaymentRequirements,
    ) -> TimedResult[SettleResponse]:
        """
        Execute payment settlement.

        Args:
            payment_header: Raw X-PAYMENT header value
            requirements: Payment requirements built for this request

        Returns:
            TimedResult wrapping the SettleResponse
        """
        started = _now_ms()
        result = await self._facilitator.settle(payment_header, requirements)
        return TimedResult(result=result, elapsed_ms=_now_ms() - started)


def _now_ms() -> int:
    return int(time.time() * 1000)
