"""Order data model, struct codec, EIP-712 hashing and UIDs."""

from .types import Order, OrderKind, ORDER_TYPES, EIP712_DOMAIN_TYPES, order_to_message
from .codec import (
    ORDER_ENCODED_SIZE,
    KIND_SELL,
    KIND_BUY,
    encode_order,
    decode_order,
)
from .hashing import (
    DOMAIN_TYPE_HASH,
    ORDER_TYPE_HASH,
    EIP712Domain,
    create_eip712_domain,
    hash_domain,
    domain_separator,
    hash_order_struct,
    hash_order,
)
from .uid import ORDER_UID_LENGTH, OrderUidParams, compute_order_uid, extract_order_uid_params

__all__ = [
    # Types
    "Order",
    "OrderKind",
    "ORDER_TYPES",
    "EIP712_DOMAIN_TYPES",
    "order_to_message",
    # Codec
    "ORDER_ENCODED_SIZE",
    "KIND_SELL",
    "KIND_BUY",
    "encode_order",
    "decode_order",
    # Hashing
    "DOMAIN_TYPE_HASH",
    "ORDER_TYPE_HASH",
    "EIP712Domain",
    "create_eip712_domain",
    "hash_domain",
    "domain_separator",
    "hash_order_struct",
    "hash_order",
    # UID
    "ORDER_UID_LENGTH",
    "OrderUidParams",
    "compute_order_uid",
    "extract_order_uid_params",
]
