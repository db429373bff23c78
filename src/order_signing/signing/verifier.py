"""Order signer recovery across all signing schemes.

Each scheme maps to one recovery function taking the order digest, the raw
payload and the verification backend, and returning the owner address.
"""

import logging
from typing import Callable, Dict, Optional, Union

from eth_utils import to_checksum_address

from ..errors import InvalidSignature
from ..utils import normalize_address
from .contracts import VerificationBackend
from .ecdsa import recover_eip712_signer, recover_ethsign_signer
from .eip1271 import verify_eip1271_signature
from .schemes import SigningScheme, coerce_payload, decode_presign_owner, parse_signing_scheme

logger = logging.getLogger(__name__)

Recoverer = Callable[[bytes, bytes, Optional[VerificationBackend]], str]


def _recover_eip712(order_digest: bytes, payload: bytes, backend: Optional[VerificationBackend]) -> str:
    return recover_eip712_signer(order_digest, payload)


def _recover_ethsign(order_digest: bytes, payload: bytes, backend: Optional[VerificationBackend]) -> str:
    return recover_ethsign_signer(order_digest, payload)


def _recover_presign(order_digest: bytes, payload: bytes, backend: Optional[VerificationBackend]) -> str:
    # Ownership is attested on-chain separately; the payload only names the owner.
    return to_checksum_address(decode_presign_owner(payload))


_RECOVERERS: Dict[SigningScheme, Recoverer] = {
    SigningScheme.EIP712: _recover_eip712,
    SigningScheme.ETHSIGN: _recover_ethsign,
    SigningScheme.EIP1271: verify_eip1271_signature,
    SigningScheme.PRESIGN: _recover_presign,
}


def recover_order_signer(
    order_digest: bytes,
    scheme: Union[int, SigningScheme],
    signature: Union[str, bytes],
    backend: Optional[VerificationBackend] = None,
) -> str:
    """Recover the owner of an order from its signature.

    Args:
        order_digest: EIP-712 digest of the order
        scheme: Signing scheme tag
        signature: Scheme specific payload, as bytes or hex string
        backend: Execution environment for EIP-1271 verifiers

    Returns:
        Checksum address of the order owner

    Raises:
        InvalidScheme: If the scheme tag is unknown
        MalformedSignature: If the payload has the wrong shape for the scheme
        InvalidSignature: If an ECDSA signature does not recover a signer
        InvalidDelegatedVerification: If an EIP-1271 verifier rejects the order
    """
    scheme = parse_signing_scheme(scheme)
    if len(order_digest) != 32:
        raise ValueError(f"Invalid order_digest: {order_digest!r}")

    owner = _RECOVERERS[scheme](bytes(order_digest), coerce_payload(signature), backend)
    logger.debug("Recovered owner %s for %s signature", owner, scheme.name)
    return owner


def verify_order_signature(
    order_digest: bytes,
    scheme: Union[int, SigningScheme],
    signature: Union[str, bytes],
    expected_owner: str,
    backend: Optional[VerificationBackend] = None,
) -> str:
    """Check that a signature was produced by ``expected_owner``.

    Returns:
        The owner address

    Raises:
        InvalidSignature: If the signature recovers a different owner, plus
            everything ``recover_order_signer`` raises
    """
    expected = normalize_address(expected_owner, "expected_owner")
    owner = recover_order_signer(order_digest, scheme, signature, backend)
    if owner != expected:
        raise InvalidSignature(f"signature recovers {owner}, expected {expected}")
    return owner
