"""Order signature schemes, signing, and signer recovery."""

from .schemes import (
    SigningScheme,
    ECDSA_SCHEMES,
    Signature,
    parse_signing_scheme,
    presign_signature,
)
from .ecdsa import ECDSA_SIGNATURE_LENGTH, ethsign_message_hash, split_signature
from .contracts import (
    Contract,
    ContractRegistry,
    ContractRevert,
    StaticCallViolation,
    VerificationBackend,
)
from .eip1271 import (
    EIP1271_MAGIC_VALUE,
    IS_VALID_SIGNATURE_SELECTOR,
    Eip1271SignatureData,
    Eip1271Verifier,
    eip1271_signature,
    encode_eip1271_signature_data,
    decode_eip1271_signature_data,
)
from .signer import sign_order
from .verifier import recover_order_signer, verify_order_signature

__all__ = [
    # Schemes
    "SigningScheme",
    "ECDSA_SCHEMES",
    "Signature",
    "parse_signing_scheme",
    "presign_signature",
    # ECDSA
    "ECDSA_SIGNATURE_LENGTH",
    "ethsign_message_hash",
    "split_signature",
    # Contracts
    "Contract",
    "ContractRegistry",
    "ContractRevert",
    "StaticCallViolation",
    "VerificationBackend",
    # EIP-1271
    "EIP1271_MAGIC_VALUE",
    "IS_VALID_SIGNATURE_SELECTOR",
    "Eip1271SignatureData",
    "Eip1271Verifier",
    "eip1271_signature",
    "encode_eip1271_signature_data",
    "decode_eip1271_signature_data",
    # Signing and recovery
    "sign_order",
    "recover_order_signer",
    "verify_order_signature",
]
