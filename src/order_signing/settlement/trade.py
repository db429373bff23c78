"""Trade records and order recovery from trades.

A trade is the compact form of a signed order inside a settlement: tokens are
referenced by index into a token list shared by the whole batch, and order
kind, fill type and signing scheme are packed into ``flags``.

Trade flags:
- bit 0: order kind (0 = sell, 1 = buy)
- bit 1: fill type (0 = fill-or-kill, 1 = partially fillable)
- bits 2 and up: signing scheme tag
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, NamedTuple, Optional, Sequence, Union

from ..errors import IndexOutOfRange, InvalidSignature
from ..order.hashing import hash_order
from ..order.types import Order, OrderKind
from ..order.uid import compute_order_uid
from ..signing.contracts import VerificationBackend
from ..signing.schemes import SigningScheme, parse_signing_scheme
from ..signing.verifier import recover_order_signer
from ..utils import normalize_address

logger = logging.getLogger(__name__)

# Lookup answering whether ``owner`` pre-signed the order with ``order_uid``
PresignatureLookup = Callable[[bytes, str], bool]

_KIND_FLAG = 0x01
_PARTIALLY_FILLABLE_FLAG = 0x02
_SCHEME_SHIFT = 2


class TradeFlags(NamedTuple):
    """Decoded trade flags."""

    kind: OrderKind
    partially_fillable: bool
    signing_scheme: SigningScheme


def encode_trade_flags(
    kind: OrderKind,
    partially_fillable: bool,
    signing_scheme: Union[int, SigningScheme],
) -> int:
    """Pack order kind, fill type and signing scheme into trade flags."""
    flags = _KIND_FLAG if OrderKind(kind) == OrderKind.BUY else 0
    if partially_fillable:
        flags |= _PARTIALLY_FILLABLE_FLAG
    return flags | (int(parse_signing_scheme(signing_scheme)) << _SCHEME_SHIFT)


def decode_trade_flags(flags: int) -> TradeFlags:
    """Unpack trade flags.

    Raises:
        InvalidScheme: If the scheme bits do not name a supported scheme
    """
    return TradeFlags(
        kind=OrderKind.BUY if flags & _KIND_FLAG else OrderKind.SELL,
        partially_fillable=bool(flags & _PARTIALLY_FILLABLE_FLAG),
        signing_scheme=parse_signing_scheme(flags >> _SCHEME_SHIFT),
    )


@dataclass(frozen=True)
class Trade:
    """A signed order as it appears in a settlement."""

    sell_token_index: int
    buy_token_index: int
    receiver: str
    sell_amount: int
    buy_amount: int
    valid_to: int
    app_data: bytes
    fee_amount: int
    flags: int
    executed_amount: int
    """Amount executed for partially fillable orders."""

    fee_discount: int
    """Fee discount granted by the settlement."""

    signature: bytes
    """Signature payload for the scheme encoded in ``flags``."""


@dataclass(frozen=True)
class RecoveredTrade:
    """Order, owner and UID recovered from a trade."""

    order: Order
    owner: str
    uid: bytes
    executed_amount: int
    fee_discount: int


def resolve_token(tokens: Sequence[str], index: int) -> str:
    """Look up a token by index.

    Raises:
        IndexOutOfRange: If the index is outside of the token list
    """
    if not 0 <= index < len(tokens):
        raise IndexOutOfRange(f"token index {index} out of range for {len(tokens)} tokens")
    return tokens[index]


def order_from_trade(tokens: Sequence[str], trade: Trade) -> Order:
    """Rebuild the full order a trade refers to.

    Raises:
        IndexOutOfRange: If a token index is outside of the token list
        InvalidScheme: If the flags hold an unknown signing scheme
    """
    flags = decode_trade_flags(trade.flags)
    return Order(
        sell_token=resolve_token(tokens, trade.sell_token_index),
        buy_token=resolve_token(tokens, trade.buy_token_index),
        receiver=trade.receiver,
        sell_amount=trade.sell_amount,
        buy_amount=trade.buy_amount,
        valid_to=trade.valid_to,
        app_data=trade.app_data,
        fee_amount=trade.fee_amount,
        kind=flags.kind,
        partially_fillable=flags.partially_fillable,
    )


def decode_trade(
    domain_separator: bytes,
    tokens: Sequence[str],
    trade: Trade,
    backend: Optional[VerificationBackend] = None,
    presignatures: Optional[PresignatureLookup] = None,
) -> RecoveredTrade:
    """Recover the order, owner and UID of a trade.

    Args:
        domain_separator: Domain separator of the settlement contract
        tokens: Token list of the settlement
        trade: Trade to decode
        backend: Execution environment for EIP-1271 verifiers
        presignatures: Lookup for pre-signed orders; when omitted pre-signed
            owners are taken as given

    Returns:
        The recovered trade

    Raises:
        IndexOutOfRange: If a token index is outside of the token list
        InvalidScheme, MalformedSignature, InvalidSignature,
        InvalidDelegatedVerification: If the signature does not verify
    """
    order = order_from_trade(tokens, trade)
    scheme = decode_trade_flags(trade.flags).signing_scheme

    order_digest = hash_order(domain_separator, order)
    owner = recover_order_signer(order_digest, scheme, trade.signature, backend)
    uid = compute_order_uid(order_digest, owner, order.valid_to)

    if scheme == SigningScheme.PRESIGN and presignatures is not None:
        if not presignatures(uid, owner):
            raise InvalidSignature(f"order 0x{uid.hex()} not presigned by {owner}")

    logger.debug("Recovered trade for order 0x%s owned by %s", uid.hex(), owner)
    return RecoveredTrade(
        order=order,
        owner=owner,
        uid=uid,
        executed_amount=trade.executed_amount,
        fee_discount=trade.fee_discount,
    )


def decode_trades(
    domain_separator: bytes,
    tokens: Sequence[str],
    trades: Sequence[Trade],
    backend: Optional[VerificationBackend] = None,
    presignatures: Optional[PresignatureLookup] = None,
) -> List[RecoveredTrade]:
    """Decode every trade of a settlement; the first failure is raised."""
    tokens = [normalize_address(token, "token") for token in tokens]
    return [decode_trade(domain_separator, tokens, trade, backend, presignatures) for trade in trades]
