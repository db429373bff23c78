"""Order Types.

The order is the off-chain signed trade intent that the settlement contract
verifies. Field order here is the field order of the EIP-712 ``Order`` type.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..utils import (
    RECEIVER_SAME_AS_OWNER,
    UINT32_MAX,
    UINT256_MAX,
    normalize_address,
    to_bytes32,
)


class OrderKind(str, Enum):
    """Order kind, hashed as an EIP-712 ``string``."""

    SELL = "sell"
    BUY = "buy"


@dataclass(frozen=True)
class Order:
    """A trade intent signed by its owner."""

    sell_token: str
    """Address of the token being sold."""

    buy_token: str
    """Address of the token being bought."""

    receiver: str
    """Receiver of the bought tokens. The zero address means the owner."""

    sell_amount: int
    """Amount of sell token, in atoms (uint256)."""

    buy_amount: int
    """Amount of buy token, in atoms (uint256)."""

    valid_to: int
    """Unix timestamp in seconds until which the order is valid (uint32)."""

    app_data: bytes
    """Opaque 32-byte application tag."""

    fee_amount: int
    """Fee paid in sell token, in atoms (uint256)."""

    kind: OrderKind
    """Whether the order is a sell or a buy order."""

    partially_fillable: bool
    """Whether the order may be executed in several trades."""

    def __post_init__(self) -> None:
        for field in ("sell_token", "buy_token", "receiver"):
            object.__setattr__(self, field, normalize_address(getattr(self, field), field))

        for field in ("sell_amount", "buy_amount", "fee_amount"):
            _check_uint(field, getattr(self, field), UINT256_MAX)
        _check_uint("valid_to", self.valid_to, UINT32_MAX)

        object.__setattr__(self, "app_data", to_bytes32(self.app_data, "app_data"))

        try:
            object.__setattr__(self, "kind", OrderKind(self.kind))
        except ValueError:
            raise ValueError(f"Invalid kind: {self.kind!r}") from None

        if not isinstance(self.partially_fillable, bool):
            raise ValueError(f"Invalid partially_fillable: {self.partially_fillable!r}")

    def actual_receiver(self, owner: str) -> str:
        """Address that receives the bought tokens when ``owner`` signed the order."""
        if self.receiver == RECEIVER_SAME_AS_OWNER:
            return normalize_address(owner, "owner")
        return self.receiver


def _check_uint(field: str, value: Union[int, bool], maximum: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= maximum:
        raise ValueError(f"Invalid {field}: {value!r}")


# EIP-712 types for orders
ORDER_TYPES = {
    "Order": [
        {"name": "sellToken", "type": "address"},
        {"name": "buyToken", "type": "address"},
        {"name": "receiver", "type": "address"},
        {"name": "sellAmount", "type": "uint256"},
        {"name": "buyAmount", "type": "uint256"},
        {"name": "validTo", "type": "uint32"},
        {"name": "appData", "type": "bytes32"},
        {"name": "feeAmount", "type": "uint256"},
        {"name": "kind", "type": "string"},
        {"name": "partiallyFillable", "type": "bool"},
    ],
}

EIP712_DOMAIN_TYPES = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]


def order_to_message(order: Order) -> dict:
    """Convert an order to the EIP-712 message dict used by ``eth_account``."""
    return {
        "sellToken": order.sell_token,
        "buyToken": order.buy_token,
        "receiver": order.receiver,
        "sellAmount": order.sell_amount,
        "buyAmount": order.buy_amount,
        "validTo": order.valid_to,
        "appData": order.app_data,
        "feeAmount": order.fee_amount,
        "kind": order.kind.value,
        "partiallyFillable": order.partially_fillable,
    }
