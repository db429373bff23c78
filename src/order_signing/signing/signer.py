"""Order signing for ECDSA owners.

Provides the client side of the EIP712 and ETHSIGN schemes using
``eth_account``.
"""

from typing import Union

from eth_account import Account
from eth_account.messages import encode_defunct

from ..order.hashing import EIP712Domain, hash_domain, hash_order
from ..order.types import ORDER_TYPES, Order, order_to_message
from .schemes import ECDSA_SCHEMES, Signature, SigningScheme


def sign_order(
    domain: EIP712Domain,
    order: Order,
    private_key: str,
    scheme: Union[int, SigningScheme] = SigningScheme.EIP712,
) -> Signature:
    """Sign an order with a private key.

    Args:
        domain: EIP-712 domain of the settlement contract
        order: Order to sign
        private_key: Private key (hex string with or without 0x prefix)
        scheme: ``SigningScheme.EIP712`` or ``SigningScheme.ETHSIGN``

    Returns:
        Signature holding the 65-byte packed r‖s‖v payload

    Raises:
        ValueError: If the scheme is not an ECDSA scheme
    """
    if scheme not in ECDSA_SCHEMES:
        raise ValueError(f"Invalid scheme for ECDSA signing: {scheme!r}")
    scheme = SigningScheme(scheme)

    account = Account.from_key(private_key)
    if scheme == SigningScheme.EIP712:
        signed_message = account.sign_typed_data(
            domain_data=dict(domain),
            message_types=ORDER_TYPES,
            message_data=order_to_message(order),
        )
    else:
        order_digest = hash_order(hash_domain(domain), order)
        signed_message = account.sign_message(encode_defunct(primitive=order_digest))

    return Signature(scheme=scheme, data=bytes(signed_message.signature))
