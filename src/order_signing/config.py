"""Verifier configuration."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, TypedDict

from .utils import DEFAULT_DOMAIN_NAME, DEFAULT_DOMAIN_VERSION, normalize_address

ENV_PREFIX = "ORDER_SIGNING_"


class VerifierConfig(TypedDict, total=False):
    """Configuration of an order verifier."""

    chain_id: int
    """Chain ID of the deployment. Default: 1 (Ethereum mainnet)"""

    settlement_contract: str
    """Address of the settlement contract (the EIP-712 verifying contract). Required."""

    name: str
    """EIP-712 domain name. Default: Gnosis Protocol"""

    version: str
    """EIP-712 domain version. Default: v2"""


@dataclass
class ResolvedVerifierConfig:
    """Resolved verifier configuration with all defaults applied."""

    chain_id: int
    settlement_contract: str
    name: str
    version: str


def resolve_config(config: VerifierConfig) -> ResolvedVerifierConfig:
    """Apply defaults and validate a verifier configuration.

    Raises:
        ValueError: If the settlement contract is missing or invalid
    """
    settlement_contract = config.get("settlement_contract")
    if not settlement_contract:
        raise ValueError("settlement_contract is required.")

    return ResolvedVerifierConfig(
        chain_id=int(config.get("chain_id", 1)),
        settlement_contract=normalize_address(settlement_contract, "settlement_contract"),
        name=config.get("name", DEFAULT_DOMAIN_NAME),
        version=config.get("version", DEFAULT_DOMAIN_VERSION),
    )


def load_config_from_env(environ: Optional[Mapping[str, str]] = None) -> VerifierConfig:
    """Read a verifier configuration from ``ORDER_SIGNING_*`` variables.

    Recognized variables: ``ORDER_SIGNING_CHAIN_ID``,
    ``ORDER_SIGNING_SETTLEMENT_CONTRACT``, ``ORDER_SIGNING_DOMAIN_NAME`` and
    ``ORDER_SIGNING_DOMAIN_VERSION``. Unset variables are left out so that
    defaults apply.
    """
    environ = os.environ if environ is None else environ
    config: VerifierConfig = {}

    chain_id = environ.get(f"{ENV_PREFIX}CHAIN_ID")
    if chain_id:
        try:
            config["chain_id"] = int(chain_id, 0)
        except ValueError:
            raise ValueError(f"Invalid {ENV_PREFIX}CHAIN_ID: {chain_id!r}") from None

    settlement_contract = environ.get(f"{ENV_PREFIX}SETTLEMENT_CONTRACT")
    if settlement_contract:
        config["settlement_contract"] = settlement_contract

    name = environ.get(f"{ENV_PREFIX}DOMAIN_NAME")
    if name:
        config["name"] = name

    version = environ.get(f"{ENV_PREFIX}DOMAIN_VERSION")
    if version:
        config["version"] = version

    return config
