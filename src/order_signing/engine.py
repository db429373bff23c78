"""Order verifier bound to one settlement contract deployment.

Wraps the stateless functions of this package with a resolved domain so that
callers verifying many trades for the same deployment do not pass the domain
separator around.

Example:
    ```python
    verifier = OrderVerifier({
        "chain_id": 1,
        "settlement_contract": "0x...",
    })

    recovered = verifier.recover_order_from_trade(tokens, trade)
    print(recovered.owner, recovered.uid.hex())
    ```
"""

import logging
from typing import List, Optional, Sequence, Union

from .config import ResolvedVerifierConfig, VerifierConfig, load_config_from_env, resolve_config
from .order.hashing import EIP712Domain, create_eip712_domain, hash_domain, hash_order
from .order.types import Order
from .order.uid import compute_order_uid
from .settlement.calldata import decode_settlement_call
from .settlement.trade import PresignatureLookup, RecoveredTrade, Trade, decode_trade, decode_trades
from .signing.contracts import VerificationBackend
from .signing.schemes import SigningScheme
from .signing.verifier import recover_order_signer

logger = logging.getLogger(__name__)


class OrderVerifier:
    """Verifies signed orders and trades for a single deployment."""

    def __init__(
        self,
        config: Optional[VerifierConfig] = None,
        backend: Optional[VerificationBackend] = None,
        presignatures: Optional[PresignatureLookup] = None,
    ):
        """Initialize the verifier.

        Args:
            config: Verifier configuration; read from the environment when omitted
            backend: Execution environment for EIP-1271 verifiers
            presignatures: Lookup for pre-signed orders
        """
        if config is None:
            config = load_config_from_env()
        self._config = resolve_config(config)
        self._backend = backend
        self._presignatures = presignatures

        self._domain = create_eip712_domain(
            self._config.chain_id,
            self._config.settlement_contract,
            self._config.name,
            self._config.version,
        )
        self._domain_separator = hash_domain(self._domain)
        logger.info(
            "Order verifier for %s on chain %d, domain separator 0x%s",
            self._config.settlement_contract,
            self._config.chain_id,
            self._domain_separator.hex(),
        )

    def get_config(self) -> ResolvedVerifierConfig:
        """Get the verifier configuration."""
        return self._config

    @property
    def domain(self) -> EIP712Domain:
        return dict(self._domain)

    @property
    def domain_separator(self) -> bytes:
        return self._domain_separator

    def order_digest(self, order: Order) -> bytes:
        """Compute the EIP-712 digest of an order for this deployment."""
        return hash_order(self._domain_separator, order)

    def recover_order_signer(
        self,
        order: Order,
        scheme: Union[int, SigningScheme],
        signature: Union[str, bytes],
    ) -> str:
        """Recover the owner of a signed order."""
        return recover_order_signer(self.order_digest(order), scheme, signature, self._backend)

    def order_uid(self, order: Order, owner: str) -> bytes:
        """Compute the UID of an order owned by ``owner``."""
        return compute_order_uid(self.order_digest(order), owner, order.valid_to)

    def recover_order_from_trade(self, tokens: Sequence[str], trade: Trade) -> RecoveredTrade:
        """Recover order, owner and UID from a settlement trade."""
        return decode_trade(self._domain_separator, tokens, trade, self._backend, self._presignatures)

    def recover_orders_from_trades(self, tokens: Sequence[str], trades: Sequence[Trade]) -> List[RecoveredTrade]:
        return decode_trades(self._domain_separator, tokens, trades, self._backend, self._presignatures)

    def recover_order_from_call(self, data: bytes, offset: int = 0) -> RecoveredTrade:
        """Decode ``(tokens, trade)`` call data and recover its order.

        Args:
            data: ABI encoded call data
            offset: Start of the encoded arguments (4 when a selector is present)
        """
        tokens, trade = decode_settlement_call(data, offset)
        return self.recover_order_from_trade(tokens, trade)
