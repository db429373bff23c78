"""Order UID computation.

An order UID is the 56-byte concatenation digest(32) ‖ owner(20) ‖ validTo(4).
No hashing is involved, so the UID of an order can be rebuilt from any copy of
those three values.
"""

from dataclasses import dataclass
from typing import Union

from eth_utils import to_checksum_address

from ..utils import ADDRESS_SIZE, UINT32_MAX, address_bytes

ORDER_UID_LENGTH = 56

_DIGEST_SIZE = 32


@dataclass(frozen=True)
class OrderUidParams:
    """Components of an order UID."""

    order_digest: bytes
    owner: str
    valid_to: int


def compute_order_uid(order_digest: bytes, owner: Union[str, bytes], valid_to: int) -> bytes:
    """Compute the UID of an order.

    Args:
        order_digest: 32-byte EIP-712 digest of the order
        owner: Owner address as a hex string, 20 raw bytes, or a 32-byte ABI
            word (only its low 20 bytes are used)
        valid_to: Order expiry (uint32)

    Returns:
        56-byte order UID

    Raises:
        ValueError: If any component has the wrong width
    """
    if not isinstance(order_digest, (bytes, bytearray)) or len(order_digest) != _DIGEST_SIZE:
        raise ValueError(f"Invalid order_digest: {order_digest!r}")
    if isinstance(valid_to, bool) or not isinstance(valid_to, int) or not 0 <= valid_to <= UINT32_MAX:
        raise ValueError(f"Invalid valid_to: {valid_to!r}")

    return bytes(order_digest) + address_bytes(owner) + valid_to.to_bytes(4, "big")


def extract_order_uid_params(order_uid: bytes) -> OrderUidParams:
    """Split an order UID back into digest, owner and expiry.

    Raises:
        ValueError: If the UID is not exactly 56 bytes
    """
    if len(order_uid) != ORDER_UID_LENGTH:
        raise ValueError(f"Invalid order_uid length: {len(order_uid)}")

    owner_end = _DIGEST_SIZE + ADDRESS_SIZE
    return OrderUidParams(
        order_digest=bytes(order_uid[:_DIGEST_SIZE]),
        owner=to_checksum_address(order_uid[_DIGEST_SIZE:owner_end]),
        valid_to=int.from_bytes(order_uid[owner_end:], "big"),
    )
