"""
Type definitions for x402 protocol
"""

import re
from typing import Any, Optional

from pydantic import (
    BaseModel,
    Field,
    PrivateAttr,
    StrictBool,
    StrictStr,
    field_validator,
    model_validator,
)

# Protocol version
X402_VERSION = 1

# Osmosis networks
SCHEME_EXACT = "exact"
OSMOSIS_MAINNET = "osmosis"
OSMOSIS_TESTNET = "osmo-test"

# Route defaults
DEFAULT_DESCRIPTION = "Access to protected resource"
DEFAULT_MIME_TYPE = "application/json"
DEFAULT_MAX_TIMEOUT_SECONDS = 300

_ATOMIC_AMOUNT = re.compile(r"^[0-9]+$")

_ROUTE_OPTION_KEYS = (
    "description",
    "mimeType",
    "mime_type",
    "outputSchema",
    "output_schema",
    "maxTimeoutSeconds",
    "max_timeout_seconds",
)


class RouteOptions(BaseModel):
    """Descriptive options of a protected route"""

    description: Optional[str] = None
    mime_type: Optional[str] = Field(None, alias="mimeType")
    output_schema: Optional[dict[str, Any]] = Field(None, alias="outputSchema")
    max_timeout_seconds: Optional[int] = Field(None, alias="maxTimeoutSeconds", gt=0)

    class Config:
        populate_by_name = True


class RouteConfig(BaseModel):
    """
    Payment configuration of a single protected path.

    Accepts both the nested form ``{"price": ..., "config": {"description": ...}}``
    and the flat form ``{"price": ..., "description": ...}``.
    """

    price: str
    network: Optional[str] = None
    config: Optional[RouteOptions] = None
    extra: Optional[dict[str, Any]] = None

    class Config:
        populate_by_name = True

    @model_validator(mode="before")
    @classmethod
    def _lift_flat_options(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        flat = {k: data[k] for k in _ROUTE_OPTION_KEYS if k in data}
        if not flat:
            return data
        data = {k: v for k, v in data.items() if k not in flat}
        nested = data.get("config") or {}
        if isinstance(nested, RouteOptions):
            nested = nested.model_dump(by_alias=True, exclude_none=True)
        data["config"] = {**flat, **nested}
        return data

    @field_validator("price")
    @classmethod
    def _validate_price(cls, v: str) -> str:
        if not _ATOMIC_AMOUNT.match(v):
            raise ValueError("price must be a decimal string in atomic units")
        return v

    @property
    def resolved_network(self) -> str:
        return self.network or OSMOSIS_TESTNET

    @property
    def resolved_description(self) -> str:
        return (self.config and self.config.description) or DEFAULT_DESCRIPTION

    @property
    def resolved_mime_type(self) -> str:
        return (self.config and self.config.mime_type) or DEFAULT_MIME_TYPE

    @property
    def resolved_output_schema(self) -> Optional[dict[str, Any]]:
        return self.config.output_schema if self.config else None

    @property
    def resolved_max_timeout_seconds(self) -> int:
        return (self.config and self.config.max_timeout_seconds) or DEFAULT_MAX_TIMEOUT_SECONDS


class FacilitatorConfig(BaseModel):
    """Facilitator location and endpoint paths"""

    url: str
    verify_path: str = Field("/verify", alias="verifyPath")
    settle_path: str = Field("/settle", alias="settlePath")
    headers: Optional[dict[str, str]] = None

    class Config:
        populate_by_name = True

    @classmethod
    def api_routes(cls, url: str, headers: Optional[dict[str, str]] = None) -> "FacilitatorConfig":
        """Facilitator mounted under ``/api/facilitator`` of a web app"""
        return cls(
            url=url,
            verifyPath="/api/facilitator/verify",
            settlePath="/api/facilitator/settle",
            headers=headers,
        )

    @property
    def verify_url(self) -> str:
        return self.url.rstrip("/") + self.verify_path

    @property
    def settle_url(self) -> str:
        return self.url.rstrip("/") + self.settle_path


class PaymentRequirements(BaseModel):
    """Payment requirements from server"""

    scheme: str
    network: str
    max_amount_required: str = Field(alias="maxAmountRequired")
    resource: str
    description: str
    mime_type: str = Field(alias="mimeType")
    output_schema: Optional[dict[str, Any]] = Field(None, alias="outputSchema")
    pay_to: str = Field(alias="payTo")
    max_timeout_seconds: int = Field(alias="maxTimeoutSeconds")
    extra: Optional[dict[str, Any]] = None

    class Config:
        populate_by_name = True


class PaymentRequired(BaseModel):
    """Payment required response (402)"""

    x402_version: int = Field(alias="x402Version")
    accepts: list[PaymentRequirements]
    error: Optional[str] = None

    class Config:
        populate_by_name = True


class PaymentPayloadData(BaseModel):
    """Signed document and the signature over it"""

    signed: Any
    signature: Any


class PaymentPayload(BaseModel):
    """Payment payload sent by client in the X-PAYMENT header"""

    x402_version: int = Field(alias="x402Version")
    scheme: str
    network: str
    payload: PaymentPayloadData

    class Config:
        populate_by_name = True


class VerifyRequest(BaseModel):
    """Facilitator /verify request body"""

    x402_version: int = Field(X402_VERSION, alias="x402Version")
    payment_header: str = Field(alias="paymentHeader")
    payment_requirements: PaymentRequirements = Field(alias="paymentRequirements")

    class Config:
        populate_by_name = True


class SettleRequest(VerifyRequest):
    """Facilitator /settle request body"""


class VerifyResponse(BaseModel):
    """Verification response from facilitator"""

    is_valid: StrictBool = Field(alias="isValid")
    invalid_reason: Optional[StrictStr] = Field(None, alias="invalidReason")

    _facilitator_unreachable: bool = PrivateAttr(default=False)

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _check_reason(self) -> "VerifyResponse":
        if self.is_valid and self.invalid_reason is not None:
            raise ValueError("invalidReason must be null when isValid is true")
        if not self.is_valid and not self.invalid_reason:
            raise ValueError("invalidReason is required when isValid is false")
        return self

    @property
    def facilitator_unreachable(self) -> bool:
        """True when the result was synthesised after a transport failure"""
        return self._facilitator_unreachable


class SettleResponse(BaseModel):
    """Settlement response from facilitator"""

    success: StrictBool
    error: Optional[StrictStr] = None
    tx_hash: Optional[StrictStr] = Field(None, alias="txHash")
    network_id: Optional[StrictStr] = Field(None, alias="networkId")

    _facilitator_unreachable: bool = PrivateAttr(default=False)

    class Config:
        populate_by_name = True

    @model_validator(mode="after")
    def _check_outcome(self) -> "SettleResponse":
        if self.success:
            if self.error is not None:
                raise ValueError("error must be null when success is true")
            if not self.tx_hash or not self.network_id:
                raise ValueError("txHash and networkId are required when success is true")
        else:
            if not self.error:
                raise ValueError("error is required when success is false")
            if self.tx_hash is not None or self.network_id is not None:
                raise ValueError("txHash and networkId must be null when success is false")
        return self

    @property
    def facilitator_unreachable(self) -> bool:
        """True when the result was synthesised after a transport failure"""
        return self._facilitator_unreachable


class PaymentResponseHeader(BaseModel):
    """X-Payment-Response header content"""

    tx_hash: str = Field(alias="txHash")
    network: str
    timestamp: int

    class Config:
        populate_by_name = True


class Coin(BaseModel):
    """Cosmos SDK coin"""

    denom: str
    amount: str


class PaymentOptions(BaseModel):
    """Payment intent the client signs"""

    from_address: str = Field(alias="from")
    to: str
    coin: list[Coin]
    memo: str = ""
    network: str

    class Config:
        populate_by_name = True


class SignedPayment(BaseModel):
    """Signed payment payload and its header encoding"""

    payment_payload: PaymentPayload = Field(alias="paymentPayload")
    payment_header: str = Field(alias="paymentHeader")

    class Config:
        populate_by_name = True
