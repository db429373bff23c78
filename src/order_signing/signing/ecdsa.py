"""ECDSA signer recovery for the EIP-712 and eth_sign schemes."""

import logging
from typing import Tuple

from eth_keys import keys
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import keccak

from ..errors import InvalidSignature, MalformedSignature
from ..utils import ZERO_ADDRESS

logger = logging.getLogger(__name__)

ECDSA_SIGNATURE_LENGTH = 65

ETH_SIGN_PREFIX = b"\x19Ethereum Signed Message:\n32"


def split_signature(payload: bytes) -> Tuple[int, int, int]:
    """Split a packed ``r ‖ s ‖ v`` signature.

    Returns:
        Tuple of (r, s, v)

    Raises:
        MalformedSignature: If the payload is not 65 bytes or ``v`` is not 27 or 28
    """
    if len(payload) != ECDSA_SIGNATURE_LENGTH:
        raise MalformedSignature("malformed ecdsa signature")

    r = int.from_bytes(payload[:32], "big")
    s = int.from_bytes(payload[32:64], "big")
    v = payload[64]
    if v not in (27, 28):
        raise MalformedSignature(f"invalid ecdsa signature v value: {v}")
    return r, s, v


def ethsign_message_hash(order_digest: bytes) -> bytes:
    """Wrap a digest the way ``eth_sign`` does before signing."""
    return keccak(ETH_SIGN_PREFIX + order_digest)


def ecdsa_recover(message_hash: bytes, payload: bytes) -> str:
    """Recover the signer of a raw 32-byte message hash.

    Raises:
        MalformedSignature: If the payload does not have the r‖s‖v shape
        InvalidSignature: If no public key can be recovered, or it maps to the
            zero address
    """
    r, s, v = split_signature(payload)

    try:
        signature = keys.Signature(vrs=(v - 27, r, s))
        public_key = signature.recover_public_key_from_msg_hash(message_hash)
    except (BadSignature, ValidationError, ValueError) as e:
        raise InvalidSignature(f"invalid ecdsa signature: {e}") from None

    signer = public_key.to_checksum_address()
    if signer == ZERO_ADDRESS:
        raise InvalidSignature("invalid ecdsa signature")

    logger.debug("Recovered ECDSA signer %s", signer)
    return signer


def recover_eip712_signer(order_digest: bytes, payload: bytes) -> str:
    """Recover the signer of an EIP-712 order signature."""
    return ecdsa_recover(order_digest, payload)


def recover_ethsign_signer(order_digest: bytes, payload: bytes) -> str:
    """Recover the signer of an ``eth_sign`` order signature."""
    return ecdsa_recover(ethsign_message_hash(order_digest), payload)
