"""
X402Client - Core payment client for x402 protocol
"""

import logging
from typing import Callable, Optional

from x402_osmosis.config import NetworkConfig
from x402_osmosis.exceptions import UnsupportedNetworkError, WalletNotFoundError
from x402_osmosis.signers.client import ClientSigner, SignDocBuilder, sign_payment
from x402_osmosis.types import (
    SCHEME_EXACT,
    Coin,
    PaymentOptions,
    PaymentRequirements,
    SignedPayment,
)

logger = logging.getLogger(__name__)

PaymentRequirementsSelector = Callable[[list[PaymentRequirements]], PaymentRequirements]


class PaymentRequirementsFilter:
    """Filter options for selecting payment requirements"""

    def __init__(
        self,
        scheme: str | None = None,
        network: str | None = None,
    ):
        self.scheme = scheme
        self.network = network


class X402Client:
    """
    Core payment client for x402 protocol.

    Turns the server's payment requirements into a signed X-PAYMENT envelope.
    """

    def __init__(
        self,
        signer: Optional[ClientSigner],
        builder: SignDocBuilder,
        memo: str = "",
    ) -> None:
        """
        Initialize X402Client.

        Args:
            signer: Wallet used to sign payments; None when no wallet is available
            builder: Builds the chain-specific sign document
            memo: Memo attached to every payment
        """
        self._signer = signer
        self._builder = builder
        self._memo = memo

    def select_payment_requirements(
        self,
        accepts: list[PaymentRequirements],
        filters: PaymentRequirementsFilter | None = None,
    ) -> PaymentRequirements:
        """
        Select the first exact-scheme requirement on a supported network.

        Raises:
            UnsupportedNetworkError: No supported payment requirements found
        """
        candidates = [
            r
            for r in accepts
            if r.scheme == SCHEME_EXACT and NetworkConfig.is_supported(r.network)
        ]
        if filters:
            if filters.scheme:
                candidates = [r for r in candidates if r.scheme == filters.scheme]
            if filters.network:
                candidates = [r for r in candidates if r.network == filters.network]

        if not candidates:
            logger.error("No supported payment requirements found")
            raise UnsupportedNetworkError("No supported payment requirements found")

        selected = candidates[0]
        logger.info(
            "Selected payment requirement: network=%s, scheme=%s, amount=%s",
            selected.network,
            selected.scheme,
            selected.max_amount_required,
        )
        return selected

    def create_payment_options(self, requirements: PaymentRequirements) -> PaymentOptions:
        """Build the payment intent for the given requirements"""
        if self._signer is None:
            raise WalletNotFoundError("Wallet not found")

        denom = (requirements.extra or {}).get("denom") or NetworkConfig.get_denom(
            requirements.network
        )
        return PaymentOptions(
            **{"from": self._signer.get_address()},
            to=requirements.pay_to,
            coin=[Coin(denom=denom, amount=requirements.max_amount_required)],
            memo=self._memo,
            network=requirements.network,
        )

    async def create_payment(self, requirements: PaymentRequirements) -> SignedPayment:
        """
        Sign a payment satisfying the given requirements.

        Returns:
            SignedPayment
        """
        options = self.create_payment_options(requirements)
        chain_id = NetworkConfig.get_chain_id(requirements.network)
        logger.info(f"Signing payment of {options.coin[0].amount} on {chain_id}")
        return await sign_payment(chain_id, options, self._signer, self._builder)

    async def handle_payment(
        self,
        accepts: list[PaymentRequirements],
        selector: PaymentRequirementsSelector | None = None,
    ) -> SignedPayment:
        """
        Handle payment required response.

        Args:
            accepts: Available payment requirements
            selector: Optional custom selector

        Returns:
            SignedPayment
        """
        if selector:
            requirements = selector(accepts)
        else:
            requirements = self.select_payment_requirements(accepts)

        return await self.create_payment(requirements)
