"""Sign an order and recover it from a settlement trade.

This example signs an order with a private key, encodes it as a settlement
trade, and recovers its owner and UID the way the settlement contract does.

Prerequisites:
1. pip install -e ".[examples]"
2. Set environment variables (or put them in a .env file):
   - ORDER_SIGNING_PRIVATE_KEY
   - ORDER_SIGNING_SETTLEMENT_CONTRACT
   - ORDER_SIGNING_CHAIN_ID (optional, default 1)

Usage:
    python verify_trade.py
"""

import os
import time

from dotenv import load_dotenv

load_dotenv()


def main():
    from order_signing import (
        ZERO_ADDRESS,
        Order,
        OrderKind,
        OrderVerifier,
        SettlementEncoder,
        SigningScheme,
    )

    private_key = os.environ.get("ORDER_SIGNING_PRIVATE_KEY")
    if not private_key or not os.environ.get("ORDER_SIGNING_SETTLEMENT_CONTRACT"):
        print("Missing ORDER_SIGNING_PRIVATE_KEY or ORDER_SIGNING_SETTLEMENT_CONTRACT.")
        return

    verifier = OrderVerifier()
    config = verifier.get_config()

    print("=" * 60)
    print("  ORDER SIGNING AND VERIFICATION")
    print("=" * 60)
    print(f"  Chain ID:          {config.chain_id}")
    print(f"  Settlement:        {config.settlement_contract}")
    print(f"  Domain separator:  0x{verifier.domain_separator.hex()}")

    order = Order(
        sell_token="0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",  # WETH
        buy_token="0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",  # USDC
        receiver=ZERO_ADDRESS,
        sell_amount=10**18,
        buy_amount=2000 * 10**6,
        valid_to=int(time.time()) + 3600,
        app_data=bytes(32),
        fee_amount=10**15,
        kind=OrderKind.SELL,
        partially_fillable=False,
    )

    encoder = SettlementEncoder(verifier.domain)
    for scheme in (SigningScheme.EIP712, SigningScheme.ETHSIGN):
        encoder.sign_encode_trade(order, private_key, scheme)

    for trade, recovered in zip(encoder.trades, verifier.recover_orders_from_trades(encoder.tokens, encoder.trades)):
        print()
        print(f"  Signature:  0x{trade.signature.hex()[:20]}...")
        print(f"  Owner:      {recovered.owner}")
        print(f"  Order UID:  0x{recovered.uid.hex()}")


if __name__ == "__main__":
    main()
