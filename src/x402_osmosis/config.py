"""
X402 Network Configuration
Centralized configuration for Osmosis networks and facilitator endpoints
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Literal, Mapping, Optional

from dotenv import dotenv_values

from x402_osmosis.exceptions import UnsupportedNetworkError
from x402_osmosis.types import OSMOSIS_MAINNET, OSMOSIS_TESTNET

DEFAULT_FACILITATOR_URL = "http://localhost:3000"

FACILITATOR_URL_ENV = "FACILITATOR_URL"
SITE_URL_ENV = "SITE_URL"
PAY_TO_ADDRESS_ENV = "PAY_TO_ADDRESS"


class NetworkConfig:
    """Network configuration for chain IDs and fee denominations"""

    OSMOSIS_MAINNET = OSMOSIS_MAINNET
    OSMOSIS_TESTNET = OSMOSIS_TESTNET

    # Cosmos chain IDs
    CHAIN_IDS: Dict[str, str] = {
        "osmosis": "osmosis-1",
        "osmo-test": "osmo-test-5",
    }

    # Native denominations used to express prices
    DENOMS: Dict[str, str] = {
        "osmosis": "uosmo",
        "osmo-test": "uosmo",
    }

    @classmethod
    def get_chain_id(cls, network: str) -> str:
        """Get chain ID for network

        Args:
            network: Network identifier (e.g., "osmosis", "osmo-test")

        Returns:
            Cosmos chain ID

        Raises:
            UnsupportedNetworkError: If network is not supported
        """
        chain_id = cls.CHAIN_IDS.get(network)
        if chain_id is None:
            raise UnsupportedNetworkError(f"Unsupported network: {network}")
        return chain_id

    @classmethod
    def get_denom(cls, network: str) -> str:
        """Get the native denomination for network

        Raises:
            UnsupportedNetworkError: If network is not supported
        """
        denom = cls.DENOMS.get(network)
        if denom is None:
            raise UnsupportedNetworkError(f"Unsupported network: {network}")
        return denom

    @classmethod
    def is_supported(cls, network: str) -> bool:
        return network in cls.CHAIN_IDS


def resolve_facilitator_url(
    explicit: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    *,
    purpose: Literal["verify", "settle"] = "verify",
) -> str:
    """
    Resolve the facilitator base URL.

    Order: explicit value, FACILITATOR_URL, SITE_URL (settlement only),
    then the local default. Empty strings count as unset.

    Args:
        explicit: URL passed by the caller
        env: Environment mapping (defaults to os.environ)
        purpose: Which facilitator call the URL is for

    Returns:
        Base URL without a trailing slash
    """
    env = os.environ if env is None else env
    candidates = [explicit, env.get(FACILITATOR_URL_ENV)]
    if purpose == "settle":
        candidates.append(env.get(SITE_URL_ENV))

    for candidate in candidates:
        if candidate:
            return candidate.rstrip("/")
    return DEFAULT_FACILITATOR_URL


@dataclass(frozen=True)
class Settings:
    """Resource server settings"""

    recipient_address: Optional[str]
    facilitator_url: str


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[str | Path] = None,
) -> Settings:
    """
    Load resource server settings.

    Values from ``env`` take precedence over the ``.env`` file.

    Args:
        env: Environment mapping (defaults to os.environ)
        env_file: Optional path to a .env file

    Returns:
        Settings
    """
    merged: dict[str, str] = {}
    if env_file is not None:
        merged.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    merged.update(os.environ if env is None else env)

    return Settings(
        recipient_address=merged.get(PAY_TO_ADDRESS_ENV) or None,
        facilitator_url=resolve_facilitator_url(env=merged),
    )
