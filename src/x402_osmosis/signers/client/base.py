"""
Client signer base interfaces
"""

from abc import ABC, abstractmethod
from typing import Any

from x402_osmosis.types import PaymentOptions


class ClientSigner(ABC):
    """
    Abstract base class for client wallets.

    Wraps an external wallet that holds the keys and signs amino documents.
    """

    @abstractmethod
    def get_address(self) -> str:
        """Get the signer's account address"""
        pass

    @abstractmethod
    async def sign_amino(
        self,
        chain_id: str,
        signer: str,
        sign_doc: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Sign an amino sign document.

        Args:
            chain_id: Cosmos chain ID
            signer: Address of the signing account
            sign_doc: Document to sign

        Returns:
            Dict with ``signed`` (the document actually signed) and ``signature``
        """
        pass


class SignDocBuilder(ABC):
    """
    Builds the chain-specific document a wallet signs for a payment intent.
    """

    @abstractmethod
    def build_sign_doc(self, options: PaymentOptions, chain_id: str) -> dict[str, Any]:
        """
        Args:
            options: Payment intent
            chain_id: Cosmos chain ID

        Returns:
            Sign document
        """
        pass
