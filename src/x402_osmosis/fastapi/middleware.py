"""
FastAPI middleware for x402 payment processing
"""

import logging
from enum import Enum
from typing import Any, Mapping, Optional

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from x402_osmosis.encoding import create_payment_response_header, decode_payment_payload
from x402_osmosis.exceptions import ConfigurationError
from x402_osmosis.facilitator import FacilitatorClient
from x402_osmosis.server import X402Server
from x402_osmosis.types import X402_VERSION, FacilitatorConfig, RouteConfig

logger = logging.getLogger(__name__)

PAYMENT_HEADER = "X-PAYMENT"
PAYMENT_RESPONSE_HEADER = "X-Payment-Response"
VERIFICATION_TIME_HEADER = "X-Verification-Time"
SETTLEMENT_TIME_HEADER = "X-Settlement-Time"


class PaymentErrorCode(str, Enum):
    """Reasons a request is rejected by the payment gate"""

    MISSING_RECIPIENT = "missing_recipient"
    UNSUPPORTED_VERSION = "unsupported_version"
    UNSUPPORTED_SCHEME = "unsupported_scheme"
    VERIFICATION_FAILED = "verification_failed"
    VERIFIER_UNREACHABLE = "verifier_unreachable"
    SETTLEMENT_FAILED = "settlement_failed"
    SETTLER_UNREACHABLE = "settler_unreachable"
    PROCESSING_FAILED = "processing_failed"


# code -> (status, error)
_REJECTIONS: dict[PaymentErrorCode, tuple[int, str]] = {
    PaymentErrorCode.MISSING_RECIPIENT: (500, "Server configuration error"),
    PaymentErrorCode.UNSUPPORTED_VERSION: (400, "Unsupported x402 version"),
    PaymentErrorCode.UNSUPPORTED_SCHEME: (400, "Unsupported payment scheme"),
    PaymentErrorCode.VERIFICATION_FAILED: (403, "Payment verification failed"),
    PaymentErrorCode.VERIFIER_UNREACHABLE: (403, "Payment verification failed"),
    PaymentErrorCode.SETTLEMENT_FAILED: (402, "Payment settlement failed"),
    PaymentErrorCode.SETTLER_UNREACHABLE: (402, "Payment settlement failed"),
    PaymentErrorCode.PROCESSING_FAILED: (500, "Payment processing failed"),
}


def parse_routes(routes: Mapping[str, RouteConfig | Mapping[str, Any]]) -> dict[str, RouteConfig]:
    """
    Validate the route table.

    Args:
        routes: Map of exact request path to route configuration

    Returns:
        Map of path to RouteConfig

    Raises:
        ConfigurationError: If a path or route entry is invalid
    """
    parsed: dict[str, RouteConfig] = {}
    for path, config in routes.items():
        if not isinstance(path, str) or not path.startswith("/"):
            raise ConfigurationError(f"Route path must start with '/': {path!r}")
        try:
            parsed[path] = (
                config if isinstance(config, RouteConfig) else RouteConfig.model_validate(config)
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid route configuration for {path}: {e}") from e
    return parsed


class X402Middleware(BaseHTTPMiddleware):
    """
    ASGI middleware that gates configured paths behind x402 payments.

    Usage:
        app = FastAPI()
        app.add_middleware(
            X402Middleware,
            recipient_address="osmo1...",
            routes={"/premium": {"price": "1000", "network": "osmo-test"}},
            facilitator=FacilitatorConfig(url="http://localhost:3000/api/facilitator"),
        )

    Per request: unmatched paths pass through; a matched path without an
    X-PAYMENT header gets a 402 challenge; otherwise the envelope is checked,
    verified and settled before the request reaches the endpoint.
    """

    def __init__(
        self,
        app: ASGIApp,
        recipient_address: Optional[str],
        routes: Mapping[str, RouteConfig | Mapping[str, Any]],
        facilitator: Optional[FacilitatorConfig] = None,
        server: Optional[X402Server] = None,
    ) -> None:
        """
        Args:
            app: The ASGI application
            recipient_address: Address payments are made to
            routes: Map of exact request path to route configuration
            facilitator: Facilitator location (ignored when server is given)
            server: Preconfigured X402Server
        """
        super().__init__(app)
        if server is None:
            if facilitator is None:
                raise ConfigurationError("facilitator or server is required")
            server = X402Server(FacilitatorClient(facilitator))
        self._server = server
        self._recipient_address = recipient_address
        self._routes = parse_routes(routes)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        route = self._routes.get(request.url.path)
        if route is None:
            return await call_next(request)

        if not self._recipient_address:
            logger.error("[x402] No recipient configured")
            return self._reject(PaymentErrorCode.MISSING_RECIPIENT)

        requirements = self._server.build_payment_requirements(
            route, str(request.url), self._recipient_address
        )

        payment_header = request.headers.get(PAYMENT_HEADER)
        if not payment_header:
            payment_required = self._server.create_payment_required_response([requirements])
            response_data = payment_required.model_dump(by_alias=True)
            if response_data.get("error") is None:
                response_data.pop("error", None)
            return JSONResponse(content=response_data, status_code=402)

        try:
            envelope = decode_payment_payload(payment_header)

            version = envelope.get("x402Version")
            if isinstance(version, bool) or version != X402_VERSION:
                return self._reject(PaymentErrorCode.UNSUPPORTED_VERSION)

            if envelope.get("scheme") != self._server.scheme:
                return self._reject(PaymentErrorCode.UNSUPPORTED_SCHEME)

            logger.info("[x402] Verifying payment...")
            verification = await self._server.verify_payment(payment_header, requirements)
            if not verification.result.is_valid:
                code = (
                    PaymentErrorCode.VERIFIER_UNREACHABLE
                    if verification.result.facilitator_unreachable
                    else PaymentErrorCode.VERIFICATION_FAILED
                )
                return self._reject(code, verification.result.invalid_reason)

            logger.info("[x402] Settling payment...")
            settlement = await self._server.settle_payment(payment_header, requirements)
            if not settlement.result.success:
                code = (
                    PaymentErrorCode.SETTLER_UNREACHABLE
                    if settlement.result.facilitator_unreachable
                    else PaymentErrorCode.SETTLEMENT_FAILED
                )
                return self._reject(code, settlement.result.error)
        except Exception as e:
            logger.exception(f"[x402] Error: {e}")
            return self._reject(PaymentErrorCode.PROCESSING_FAILED, str(e))

        tx_hash = settlement.result.tx_hash or ""
        logger.info(f"[x402] Payment complete | Tx: {tx_hash[:10]}...")

        response = await call_next(request)
        response.headers[PAYMENT_RESPONSE_HEADER] = create_payment_response_header(
            settlement.result.tx_hash, settlement.result.network_id
        )
        response.headers[VERIFICATION_TIME_HEADER] = str(verification.elapsed_ms)
        response.headers[SETTLEMENT_TIME_HEADER] = str(settlement.elapsed_ms)
        return response

    @staticmethod
    def _reject(code: PaymentErrorCode, message: Optional[str] = None) -> JSONResponse:
        status_code, error = _REJECTIONS[code]
        detail = f": {message}" if message else ""
        logger.warning(f"[x402] Rejected ({code.value}): {error}{detail}")
        content: dict[str, Any] = {"error": error}
        if message is not None:
            content["message"] = message
        return JSONResponse(content=content, status_code=status_code)


def install_payment_middleware(
    app: FastAPI,
    recipient_address: Optional[str],
    routes: Mapping[str, RouteConfig | Mapping[str, Any]],
    facilitator: FacilitatorConfig,
) -> None:
    """
    Validate the route table and add X402Middleware to the app.

    Starlette builds middleware lazily on the first request, so route errors
    are raised here instead.

    Raises:
        ConfigurationError: If the route table is invalid
    """
    app.add_middleware(
        X402Middleware,
        recipient_address=recipient_address,
        routes=parse_routes(routes),
        facilitator=facilitator,
    )
