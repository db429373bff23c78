"""Fixed-layout order struct codec.

An encoded order is ten 32-byte words, one per field, in EIP-712 field order.
``kind`` is stored as the keccak hash of its string value, which is how the
``string`` member is encoded for struct hashing. The encoding is therefore
exactly the struct hash preimage minus the leading type hash.

Decoding reads every field from its fixed offset and masks it to the field's
declared width. Bytes outside of that width (ABI padding) are ignored, so dirty
padding in the source buffer cannot change the decoded order, its hash, or its
UID.
"""

from eth_abi import encode
from eth_utils import keccak

from ..errors import OrderDecodingError
from ..utils import WORD_SIZE, read_word, word_to_address, word_to_uint
from .types import Order, OrderKind

ORDER_ABI_TYPES = [
    "address",  # sellToken
    "address",  # buyToken
    "address",  # receiver
    "uint256",  # sellAmount
    "uint256",  # buyAmount
    "uint32",  # validTo
    "bytes32",  # appData
    "uint256",  # feeAmount
    "bytes32",  # kind
    "bool",  # partiallyFillable
]

ORDER_ENCODED_SIZE = len(ORDER_ABI_TYPES) * WORD_SIZE

KIND_SELL = keccak(text=OrderKind.SELL.value)
KIND_BUY = keccak(text=OrderKind.BUY.value)

_KIND_BY_HASH = {KIND_SELL: OrderKind.SELL, KIND_BUY: OrderKind.BUY}
_HASH_BY_KIND = {kind: kind_hash for kind_hash, kind in _KIND_BY_HASH.items()}


def kind_hash(kind: OrderKind) -> bytes:
    """Return the 32-byte hash an order kind is encoded as."""
    return _HASH_BY_KIND[OrderKind(kind)]


def encode_order(order: Order) -> bytes:
    """Encode an order into its canonical 320-byte layout."""
    return encode(
        ORDER_ABI_TYPES,
        [
            order.sell_token,
            order.buy_token,
            order.receiver,
            order.sell_amount,
            order.buy_amount,
            order.valid_to,
            order.app_data,
            order.fee_amount,
            kind_hash(order.kind),
            order.partially_fillable,
        ],
    )


def decode_order(data: bytes, offset: int = 0) -> Order:
    """Decode an order from ``data`` starting at ``offset``.

    Args:
        data: Buffer holding the encoded order, possibly inside a larger payload
        offset: Byte offset of the first order word

    Returns:
        The decoded order

    Raises:
        OrderDecodingError: If the buffer is too short or a field has no valid value
    """
    try:
        words = [read_word(data, offset + i * WORD_SIZE) for i in range(len(ORDER_ABI_TYPES))]
    except IndexError as e:
        raise OrderDecodingError(f"encoded order truncated: {e}") from None

    kind = _KIND_BY_HASH.get(words[8])
    if kind is None:
        raise OrderDecodingError(f"unknown order kind: 0x{words[8].hex()}")

    return Order(
        sell_token=word_to_address(words[0]),
        buy_token=word_to_address(words[1]),
        receiver=word_to_address(words[2]),
        sell_amount=word_to_uint(words[3]),
        buy_amount=word_to_uint(words[4]),
        valid_to=word_to_uint(words[5], 32),
        app_data=words[6],
        fee_amount=word_to_uint(words[7]),
        kind=kind,
        partially_fillable=decode_bool(words[9]),
    )


def decode_bool(word: bytes) -> bool:
    """Decode a boolean from the low byte of a word.

    Raises:
        OrderDecodingError: If the low byte is neither 0 nor 1
    """
    value = word[-1]
    if value > 1:
        raise OrderDecodingError(f"invalid boolean value: {value}")
    return value == 1
