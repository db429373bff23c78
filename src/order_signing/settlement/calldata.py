"""ABI codec for ``(address[] tokens, Trade trade)`` call data.

Encoding uses ``eth_abi``. Decoding is done by hand from fixed offsets so that
every value is masked to its declared width: the 12 padding bytes of an
address word, or the 28 high bytes of a ``uint32`` word, may hold anything
without changing the decoded tokens or trade. ``eth_abi`` would instead reject
such call data, while the settlement contract accepts it.
"""

from typing import List, Sequence, Tuple

from eth_abi import encode

from ..errors import OrderDecodingError
from ..utils import WORD_SIZE, read_word, word_to_address, word_to_uint
from .trade import Trade

TRADE_ABI_TYPE = "(uint256,uint256,address,uint256,uint256,uint32,bytes32,uint256,uint256,uint256,uint256,bytes)"

_TRADE_HEAD_WORDS = 12

# Upper bound for lengths and offsets read from call data
_MAX_LENGTH = 2**32


def encode_settlement_call(tokens: Sequence[str], trade: Trade, selector: bytes = b"") -> bytes:
    """ABI encode a token list and a trade, optionally prefixed by a selector."""
    return selector + encode(
        ["address[]", TRADE_ABI_TYPE],
        [
            list(tokens),
            (
                trade.sell_token_index,
                trade.buy_token_index,
                trade.receiver,
                trade.sell_amount,
                trade.buy_amount,
                trade.valid_to,
                trade.app_data,
                trade.fee_amount,
                trade.flags,
                trade.executed_amount,
                trade.fee_discount,
                trade.signature,
            ),
        ],
    )


def decode_settlement_call(data: bytes, offset: int = 0) -> Tuple[List[str], Trade]:
    """Decode call data produced by ``encode_settlement_call``.

    Args:
        data: Call data
        offset: Start of the ABI encoded arguments (4 when a selector is present)

    Returns:
        Tuple of (tokens, trade)

    Raises:
        OrderDecodingError: If the call data is truncated or has invalid offsets
    """
    try:
        tokens_start = offset + _read_length(data, offset)
        trade_start = offset + _read_length(data, offset + WORD_SIZE)

        num_tokens = _read_length(data, tokens_start)
        tokens = [
            word_to_address(read_word(data, tokens_start + (i + 1) * WORD_SIZE))
            for i in range(num_tokens)
        ]

        head = [read_word(data, trade_start + i * WORD_SIZE) for i in range(_TRADE_HEAD_WORDS)]
        signature_start = trade_start + _read_length(data, trade_start + 11 * WORD_SIZE)
        signature_length = _read_length(data, signature_start)
        signature_data_start = signature_start + WORD_SIZE
        if signature_data_start + signature_length > len(data):
            raise IndexError("signature out of bounds")
        signature = bytes(data[signature_data_start:signature_data_start + signature_length])
    except IndexError as e:
        raise OrderDecodingError(f"invalid settlement call data: {e}") from None

    trade = Trade(
        sell_token_index=word_to_uint(head[0]),
        buy_token_index=word_to_uint(head[1]),
        receiver=word_to_address(head[2]),
        sell_amount=word_to_uint(head[3]),
        buy_amount=word_to_uint(head[4]),
        valid_to=word_to_uint(head[5], 32),
        app_data=head[6],
        fee_amount=word_to_uint(head[7]),
        flags=word_to_uint(head[8]),
        executed_amount=word_to_uint(head[9]),
        fee_discount=word_to_uint(head[10]),
        signature=signature,
    )
    return tokens, trade


def _read_length(data: bytes, offset: int) -> int:
    value = word_to_uint(read_word(data, offset))
    if value >= _MAX_LENGTH:
        raise OrderDecodingError(f"invalid length or offset {value} at {offset}")
    return value
