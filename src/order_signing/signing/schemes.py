"""Signing schemes and signature containers."""

from dataclasses import dataclass
from enum import IntEnum
from typing import Union

from ..errors import InvalidScheme, MalformedSignature
from ..utils import ADDRESS_SIZE, address_bytes, hex_to_bytes


class SigningScheme(IntEnum):
    """Supported order signing schemes."""

    EIP712 = 0
    """ECDSA signature over the EIP-712 digest."""

    ETHSIGN = 1
    """ECDSA signature over the ``eth_sign`` wrapped digest."""

    EIP1271 = 2
    """Smart contract signature, checked by the contract itself."""

    PRESIGN = 3
    """Owner attested the order with a separate on-chain action."""


ECDSA_SCHEMES = (SigningScheme.EIP712, SigningScheme.ETHSIGN)


def parse_signing_scheme(tag: Union[int, SigningScheme]) -> SigningScheme:
    """Convert a raw scheme tag into a ``SigningScheme``.

    Raises:
        InvalidScheme: If the tag is not a supported scheme
    """
    if isinstance(tag, bool):
        raise InvalidScheme(f"invalid signing scheme: {tag!r}")
    try:
        return SigningScheme(tag)
    except (ValueError, TypeError):
        raise InvalidScheme(f"invalid signing scheme: {tag!r}") from None


@dataclass(frozen=True)
class Signature:
    """An order signature together with its scheme."""

    scheme: SigningScheme
    data: bytes
    """Scheme specific payload (65 byte r‖s‖v, verifier‖bytes or owner)."""

    def hex(self) -> str:
        return "0x" + self.data.hex()


def coerce_payload(signature: Union[str, bytes]) -> bytes:
    """Accept a signature payload as hex string or bytes.

    Raises:
        MalformedSignature: If the payload is not valid hex
    """
    try:
        return hex_to_bytes(signature)
    except (ValueError, AttributeError):
        raise MalformedSignature(f"signature is not valid hex: {signature!r}") from None


def presign_signature(owner: str) -> Signature:
    """Build the signature of a pre-signed order, which is its owner address."""
    return Signature(scheme=SigningScheme.PRESIGN, data=address_bytes(owner))


def decode_presign_owner(payload: bytes) -> bytes:
    """Extract the owner from a pre-sign payload.

    Raises:
        MalformedSignature: If the payload is not exactly one address
    """
    if len(payload) != ADDRESS_SIZE:
        raise MalformedSignature("malformed presignature")
    return payload
