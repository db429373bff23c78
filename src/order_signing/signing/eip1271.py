"""EIP-1271 smart contract signatures.

The signature payload is ``verifier(20) ‖ signature``. The verifier contract is
asked ``isValidSignature(orderDigest, signature)`` through a static call, and
the order is owned by the verifier when it answers with the magic value.

The call must not be able to change state. A verifier that behaves differently
depending on whether it may write state (for example, answering "valid" only
once per state change) would otherwise be able to get an order accepted in
one context and rejected in another.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Union

from eth_abi import decode, encode
from eth_abi.exceptions import DecodingError
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from ..errors import InvalidDelegatedVerification, MalformedSignature
from ..utils import ADDRESS_SIZE, address_bytes, hex_to_bytes
from .contracts import Contract, ContractRevert, StaticCallViolation, VerificationBackend
from .schemes import Signature, SigningScheme

logger = logging.getLogger(__name__)

IS_VALID_SIGNATURE_SELECTOR = function_signature_to_4byte_selector("isValidSignature(bytes32,bytes)")

# Return value of a successful isValidSignature call
EIP1271_MAGIC_VALUE = bytes.fromhex("1626ba7e")


@dataclass(frozen=True)
class Eip1271SignatureData:
    """Decoded EIP-1271 signature payload."""

    verifier: str
    """Address of the contract that validates the signature (and owns the order)."""

    signature: bytes
    """Opaque bytes interpreted by the verifier."""


def encode_eip1271_signature_data(verifier: str, signature: Union[str, bytes] = b"") -> bytes:
    """Pack a verifier address and its signature bytes into a payload."""
    return address_bytes(verifier) + hex_to_bytes(signature)


def decode_eip1271_signature_data(payload: bytes) -> Eip1271SignatureData:
    """Split an EIP-1271 payload into verifier and signature bytes.

    Raises:
        MalformedSignature: If the payload is shorter than an address
    """
    if len(payload) < ADDRESS_SIZE:
        raise MalformedSignature("malformed eip1271 signature")
    return Eip1271SignatureData(
        verifier=to_checksum_address(payload[:ADDRESS_SIZE]),
        signature=bytes(payload[ADDRESS_SIZE:]),
    )


def eip1271_signature(verifier: str, signature: Union[str, bytes] = b"") -> Signature:
    """Build an EIP-1271 ``Signature``."""
    return Signature(
        scheme=SigningScheme.EIP1271,
        data=encode_eip1271_signature_data(verifier, signature),
    )


def encode_is_valid_signature_call(order_digest: bytes, signature: bytes) -> bytes:
    """ABI encode an ``isValidSignature(bytes32,bytes)`` call."""
    return IS_VALID_SIGNATURE_SELECTOR + encode(["bytes32", "bytes"], [order_digest, signature])


def is_magic_value(return_data: bytes) -> bool:
    """Whether ABI encoded ``bytes4`` return data holds the magic value.

    The return data must be at least one word, start with the magic value and
    have a zero padded remainder.
    """
    if len(return_data) < 32:
        return False
    return return_data[:4] == EIP1271_MAGIC_VALUE and not any(return_data[4:32])


def verify_eip1271_signature(
    order_digest: bytes,
    payload: bytes,
    backend: Optional[VerificationBackend],
) -> str:
    """Verify an EIP-1271 signature and return the verifier as owner.

    Args:
        order_digest: Digest of the order being verified
        payload: ``verifier ‖ signature`` payload
        backend: Environment that executes the verifier

    Returns:
        Checksum address of the verifier

    Raises:
        MalformedSignature: If the payload is shorter than an address
        InvalidDelegatedVerification: If the verifier is not a contract, reverts,
            modifies state, fails in any other way, or does not return the
            magic value
    """
    data = decode_eip1271_signature_data(payload)

    if backend is None:
        raise InvalidDelegatedVerification("no backend configured for eip1271 verification")
    if not backend.is_contract(data.verifier):
        raise InvalidDelegatedVerification(f"eip1271 verifier {data.verifier} is not a contract")

    call_data = encode_is_valid_signature_call(order_digest, data.signature)
    try:
        return_data = backend.static_call(data.verifier, call_data)
    except StaticCallViolation as e:
        logger.warning("EIP-1271 verifier %s modified state: %s", data.verifier, e)
        raise InvalidDelegatedVerification(f"eip1271 verifier {data.verifier} modified state") from e
    except ContractRevert as e:
        logger.warning("EIP-1271 verifier %s reverted: %s", data.verifier, e)
        raise InvalidDelegatedVerification(f"eip1271 verifier {data.verifier} reverted") from e
    except Exception as e:
        logger.warning("EIP-1271 call to %s failed: %s", data.verifier, e)
        raise InvalidDelegatedVerification(f"eip1271 verifier {data.verifier} call failed") from e

    if not is_magic_value(return_data):
        raise InvalidDelegatedVerification("invalid eip1271 signature")

    logger.debug("EIP-1271 verifier %s accepted order %s", data.verifier, order_digest.hex())
    return data.verifier


class Eip1271Verifier(Contract):
    """Base class for Python contracts implementing ``isValidSignature``.

    Subclasses implement ``is_valid_signature``. Their state is ``self.storage``
    and their instance attributes; verification always runs as a static call,
    so any change to either fails it. Errors raised by ``is_valid_signature``,
    and return values that are not ``bytes4``, revert the call.
    """

    def handle_call(self, data: bytes) -> bytes:
        if data[:4] != IS_VALID_SIGNATURE_SELECTOR:
            raise ContractRevert(f"unknown selector 0x{data[:4].hex()}")
        try:
            order_digest, signature = decode(["bytes32", "bytes"], data[4:])
        except DecodingError as e:
            raise ContractRevert(f"invalid call data: {e}") from None
        try:
            return encode(["bytes4"], [self.is_valid_signature(order_digest, signature)])
        except ContractRevert:
            raise
        except Exception as e:
            raise ContractRevert(f"isValidSignature failed: {e!r}") from e

    def is_valid_signature(self, order_digest: bytes, signature: bytes) -> bytes:
        """Return ``EIP1271_MAGIC_VALUE`` to accept the signature."""
        raise NotImplementedError
