"""Order Signing and Verification.

This package verifies off-chain signed orders of a batch auction settlement
contract.

Key components:
- EIP-712 domain separator and order hashing
- Fixed-layout order codec and padding-insensitive call data decoding
- Signer recovery for EIP712, ETHSIGN, EIP1271 and PRESIGN signatures
- Order UIDs (digest ‖ owner ‖ validTo)
- Trade decoding against a settlement's token list

Example usage:
    ```python
    from order_signing import (
        Order,
        OrderKind,
        SettlementEncoder,
        SigningScheme,
        ZERO_ADDRESS,
        create_eip712_domain,
        decode_trade,
        hash_domain,
    )

    domain = create_eip712_domain(chain_id=1, verifying_contract="0x...")

    order = Order(
        sell_token="0x...",
        buy_token="0x...",
        receiver=ZERO_ADDRESS,
        sell_amount=10**18,
        buy_amount=2000 * 10**6,
        valid_to=0xFFFFFFFF,
        app_data=bytes(32),
        fee_amount=10**15,
        kind=OrderKind.SELL,
        partially_fillable=False,
    )

    # Sign and encode a trade
    encoder = SettlementEncoder(domain)
    encoder.sign_encode_trade(order, private_key="0x...", scheme=SigningScheme.EIP712)

    # Recover order, owner and UID
    recovered = decode_trade(hash_domain(domain), encoder.tokens, encoder.trades[0])
    ```
"""

from .errors import (
    OrderSigningError,
    InvalidScheme,
    MalformedSignature,
    InvalidSignature,
    InvalidDelegatedVerification,
    IndexOutOfRange,
    OrderDecodingError,
)
from .order import (
    Order,
    OrderKind,
    ORDER_TYPES,
    ORDER_TYPE_HASH,
    ORDER_UID_LENGTH,
    OrderUidParams,
    EIP712Domain,
    create_eip712_domain,
    hash_domain,
    domain_separator,
    encode_order,
    decode_order,
    hash_order_struct,
    hash_order,
    compute_order_uid,
    extract_order_uid_params,
)
from .signing import (
    SigningScheme,
    Signature,
    ContractRegistry,
    ContractRevert,
    StaticCallViolation,
    VerificationBackend,
    EIP1271_MAGIC_VALUE,
    Eip1271Verifier,
    eip1271_signature,
    encode_eip1271_signature_data,
    decode_eip1271_signature_data,
    presign_signature,
    sign_order,
    recover_order_signer,
    verify_order_signature,
)
from .settlement import (
    Trade,
    RecoveredTrade,
    SettlementEncoder,
    TradeExecution,
    encode_trade_flags,
    decode_trade_flags,
    decode_trade,
    decode_trades,
    encode_settlement_call,
    decode_settlement_call,
)
from .config import VerifierConfig, ResolvedVerifierConfig, load_config_from_env
from .engine import OrderVerifier
from .utils import ZERO_ADDRESS, RECEIVER_SAME_AS_OWNER

__version__ = "0.1.0"

__all__ = [
    # Errors
    "OrderSigningError",
    "InvalidScheme",
    "MalformedSignature",
    "InvalidSignature",
    "InvalidDelegatedVerification",
    "IndexOutOfRange",
    "OrderDecodingError",
    # Orders
    "Order",
    "OrderKind",
    "ORDER_TYPES",
    "ORDER_TYPE_HASH",
    "ORDER_UID_LENGTH",
    "OrderUidParams",
    "EIP712Domain",
    "create_eip712_domain",
    "hash_domain",
    "domain_separator",
    "encode_order",
    "decode_order",
    "hash_order_struct",
    "hash_order",
    "compute_order_uid",
    "extract_order_uid_params",
    # Signing
    "SigningScheme",
    "Signature",
    "ContractRegistry",
    "ContractRevert",
    "StaticCallViolation",
    "VerificationBackend",
    "EIP1271_MAGIC_VALUE",
    "Eip1271Verifier",
    "eip1271_signature",
    "encode_eip1271_signature_data",
    "decode_eip1271_signature_data",
    "presign_signature",
    "sign_order",
    "recover_order_signer",
    "verify_order_signature",
    # Settlement
    "Trade",
    "RecoveredTrade",
    "SettlementEncoder",
    "TradeExecution",
    "encode_trade_flags",
    "decode_trade_flags",
    "decode_trade",
    "decode_trades",
    "encode_settlement_call",
    "decode_settlement_call",
    # Config
    "VerifierConfig",
    "ResolvedVerifierConfig",
    "load_config_from_env",
    "OrderVerifier",
    # Utils
    "ZERO_ADDRESS",
    "RECEIVER_SAME_AS_OWNER",
]
