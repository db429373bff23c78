"""Utility functions and protocol constants for order signing."""

from typing import Union

from eth_utils import is_address, to_canonical_address, to_checksum_address

# Zero address
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Receiver value meaning "send proceeds to the order owner"
RECEIVER_SAME_AS_OWNER = ZERO_ADDRESS

# Default EIP-712 domain of the settlement contract
DEFAULT_DOMAIN_NAME = "Gnosis Protocol"
DEFAULT_DOMAIN_VERSION = "v2"

WORD_SIZE = 32
ADDRESS_SIZE = 20

UINT32_MAX = 2**32 - 1
UINT256_MAX = 2**256 - 1


def normalize_address(address: Union[str, bytes], field: str = "address") -> str:
    """Normalize an address to its checksum string form.

    Args:
        address: Hex string or 20 raw bytes
        field: Field name used in the error message

    Returns:
        Checksum address string

    Raises:
        ValueError: If the value is not an address
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) != ADDRESS_SIZE:
            raise ValueError(f"Invalid {field}: {address!r}")
        return to_checksum_address(bytes(address))
    if not is_address(address):
        raise ValueError(f"Invalid {field}: {address!r}")
    return to_checksum_address(address)


def address_bytes(address: Union[str, bytes]) -> bytes:
    """Return the 20 raw bytes of an address.

    A 32-byte ABI word is accepted too; only its low 20 bytes are kept so that
    the 12 high-order padding bytes never reach the result.
    """
    if isinstance(address, (bytes, bytearray)):
        if len(address) == WORD_SIZE:
            return bytes(address[WORD_SIZE - ADDRESS_SIZE:])
        if len(address) == ADDRESS_SIZE:
            return bytes(address)
        raise ValueError(f"Invalid address: {address!r}")
    return to_canonical_address(normalize_address(address))


def to_bytes32(value: Union[str, bytes], field: str = "bytes32") -> bytes:
    """Convert a hex string or bytes to exactly 32 bytes."""
    if isinstance(value, str):
        try:
            value = bytes.fromhex(value[2:] if value.startswith("0x") else value)
        except ValueError:
            raise ValueError(f"Invalid {field}: {value!r}") from None
    if not isinstance(value, (bytes, bytearray)) or len(value) != WORD_SIZE:
        raise ValueError(f"Invalid {field}: {value!r}")
    return bytes(value)


def hex_to_bytes(value: Union[str, bytes]) -> bytes:
    """Accept signatures and payloads as hex strings (with or without 0x) or bytes."""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    return bytes.fromhex(value[2:] if value.startswith("0x") else value)


def read_word(data: bytes, offset: int) -> bytes:
    """Read one 32-byte word at a fixed offset.

    Raises:
        IndexError: If the buffer is too short
    """
    if offset < 0 or offset + WORD_SIZE > len(data):
        raise IndexError(f"word at offset {offset} out of bounds ({len(data)} bytes)")
    return bytes(data[offset:offset + WORD_SIZE])


def word_to_uint(word: bytes, bits: int = 256) -> int:
    """Interpret a word as an unsigned integer masked to ``bits`` bits."""
    return int.from_bytes(word, "big") & ((1 << bits) - 1)


def word_to_address(word: bytes) -> str:
    """Extract the address held in the low 20 bytes of a word."""
    return to_checksum_address(word[WORD_SIZE - ADDRESS_SIZE:])
