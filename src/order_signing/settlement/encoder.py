"""Settlement encoder.

Builds the shared token list and the compact trades of a settlement from full
orders and their signatures.

Example usage:
    ```python
    encoder = SettlementEncoder(create_eip712_domain(1, SETTLEMENT_CONTRACT))
    encoder.sign_encode_trade(order, private_key, SigningScheme.EIP712)
    recovered = decode_trade(
        hash_domain(encoder.domain), encoder.tokens, encoder.trades[0]
    )
    ```
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Union

from ..order.hashing import EIP712Domain
from ..order.types import Order
from ..signing.schemes import Signature, SigningScheme
from ..signing.signer import sign_order
from ..utils import normalize_address
from .trade import Trade, encode_trade_flags


@dataclass(frozen=True)
class TradeExecution:
    """Execution parameters attached to a trade."""

    executed_amount: int = 0
    fee_discount: int = 0


class SettlementEncoder:
    """Accumulates the tokens and trades of a single settlement."""

    def __init__(self, domain: EIP712Domain):
        """Initialize the encoder.

        Args:
            domain: EIP-712 domain of the settlement contract, used for signing
        """
        self.domain = domain
        self._tokens: List[str] = []
        self._token_indices: Dict[str, int] = {}
        self._trades: List[Trade] = []

    @property
    def tokens(self) -> List[str]:
        """Token list referenced by the encoded trades."""
        return list(self._tokens)

    @property
    def trades(self) -> List[Trade]:
        return list(self._trades)

    def token_index(self, token: str) -> int:
        """Return the index of a token, appending it to the list if new."""
        token = normalize_address(token, "token")
        index = self._token_indices.get(token)
        if index is None:
            index = len(self._tokens)
            self._tokens.append(token)
            self._token_indices[token] = index
        return index

    def encode_trade(
        self,
        order: Order,
        signature: Signature,
        execution: Optional[TradeExecution] = None,
    ) -> Trade:
        """Append a trade for an already signed order.

        Args:
            order: Order being traded
            signature: Signature of the order owner
            execution: Executed amount and fee discount (defaults to zero)

        Returns:
            The encoded trade
        """
        execution = execution or TradeExecution()
        trade = Trade(
            sell_token_index=self.token_index(order.sell_token),
            buy_token_index=self.token_index(order.buy_token),
            receiver=order.receiver,
            sell_amount=order.sell_amount,
            buy_amount=order.buy_amount,
            valid_to=order.valid_to,
            app_data=order.app_data,
            fee_amount=order.fee_amount,
            flags=encode_trade_flags(order.kind, order.partially_fillable, signature.scheme),
            executed_amount=execution.executed_amount,
            fee_discount=execution.fee_discount,
            signature=signature.data,
        )
        self._trades.append(trade)
        return trade

    def sign_encode_trade(
        self,
        order: Order,
        private_key: str,
        scheme: Union[int, SigningScheme] = SigningScheme.EIP712,
        execution: Optional[TradeExecution] = None,
    ) -> Trade:
        """Sign an order with an ECDSA scheme and append its trade."""
        signature = sign_order(self.domain, order, private_key, scheme)
        return self.encode_trade(order, signature, execution)
