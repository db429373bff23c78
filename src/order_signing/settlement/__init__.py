"""Settlement trades: encoding, call data, and order recovery."""

from .trade import (
    Trade,
    TradeFlags,
    RecoveredTrade,
    PresignatureLookup,
    encode_trade_flags,
    decode_trade_flags,
    order_from_trade,
    decode_trade,
    decode_trades,
)
from .encoder import SettlementEncoder, TradeExecution
from .calldata import TRADE_ABI_TYPE, encode_settlement_call, decode_settlement_call

__all__ = [
    "Trade",
    "TradeFlags",
    "RecoveredTrade",
    "PresignatureLookup",
    "encode_trade_flags",
    "decode_trade_flags",
    "order_from_trade",
    "decode_trade",
    "decode_trades",
    "SettlementEncoder",
    "TradeExecution",
    "TRADE_ABI_TYPE",
    "encode_settlement_call",
    "decode_settlement_call",
]
