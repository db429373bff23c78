"""EIP-712 hashing for orders.

Reproduces the structured hashing that signing clients perform with
``eth_account.messages.encode_typed_data``:

    digest = keccak256(0x1901 ‖ domainSeparator ‖ keccak256(typeHash ‖ encodeData(order)))
"""

from typing import TypedDict

from eth_abi import encode
from eth_utils import keccak

from ..utils import DEFAULT_DOMAIN_NAME, DEFAULT_DOMAIN_VERSION, normalize_address
from .codec import encode_order
from .types import EIP712_DOMAIN_TYPES, ORDER_TYPES, Order


def encode_type(primary_type: str, fields: list) -> str:
    """Build the EIP-712 type string, e.g. ``Order(address sellToken,...)``."""
    members = ",".join(f"{field['type']} {field['name']}" for field in fields)
    return f"{primary_type}({members})"


DOMAIN_TYPE_HASH = keccak(text=encode_type("EIP712Domain", EIP712_DOMAIN_TYPES))
ORDER_TYPE_HASH = keccak(text=encode_type("Order", ORDER_TYPES["Order"]))

EIP191_PREFIX = b"\x19\x01"


class EIP712Domain(TypedDict):
    """EIP-712 domain of the settlement contract."""

    name: str
    version: str
    chainId: int
    verifyingContract: str


def create_eip712_domain(
    chain_id: int,
    verifying_contract: str,
    name: str = DEFAULT_DOMAIN_NAME,
    version: str = DEFAULT_DOMAIN_VERSION,
) -> EIP712Domain:
    """Create the EIP-712 domain for a settlement contract deployment.

    Args:
        chain_id: Chain ID of the deployment
        verifying_contract: Address of the settlement contract
        name: Protocol name
        version: Protocol version

    Returns:
        EIP-712 domain dictionary

    Raises:
        ValueError: If the contract address or chain id is invalid
    """
    if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id < 0:
        raise ValueError(f"Invalid chain_id: {chain_id!r}")

    return {
        "name": name,
        "version": version,
        "chainId": chain_id,
        "verifyingContract": normalize_address(verifying_contract, "verifying_contract"),
    }


def hash_domain(domain: EIP712Domain) -> bytes:
    """Compute the 32-byte separator of an EIP-712 domain."""
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                DOMAIN_TYPE_HASH,
                keccak(text=domain["name"]),
                keccak(text=domain["version"]),
                domain["chainId"],
                domain["verifyingContract"],
            ],
        )
    )


def domain_separator(
    chain_id: int,
    verifying_contract: str,
    name: str = DEFAULT_DOMAIN_NAME,
    version: str = DEFAULT_DOMAIN_VERSION,
) -> bytes:
    """Compute the domain separator of a deployment.

    The separator differs for every (chain id, contract address) pair, which
    keeps a signature for one deployment from being replayed on another.
    """
    return hash_domain(create_eip712_domain(chain_id, verifying_contract, name, version))


def hash_order_struct(order: Order) -> bytes:
    """Compute the EIP-712 struct hash of an order."""
    return keccak(ORDER_TYPE_HASH + encode_order(order))


def hash_typed_data(separator: bytes, struct_hash: bytes) -> bytes:
    """Combine a domain separator and struct hash into the signing digest."""
    if len(separator) != 32:
        raise ValueError(f"Invalid domain separator: {separator!r}")
    return keccak(EIP191_PREFIX + separator + struct_hash)


def hash_order(separator: bytes, order: Order) -> bytes:
    """Compute the 32-byte digest of an order under a domain separator.

    Args:
        separator: Domain separator of the deployment
        order: Order to hash

    Returns:
        The order digest that owners sign
    """
    return hash_typed_data(separator, hash_order_struct(order))
