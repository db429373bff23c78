"""Shared fixtures for order signing tests."""

import pytest
from eth_account import Account

from order_signing import (
    ContractRegistry,
    Order,
    OrderKind,
    create_eip712_domain,
    hash_domain,
)

# Test wallets (DO NOT use in production)
TRADER_KEYS = ["0x" + "ab" * 32, "0x" + "cd" * 32]

SETTLEMENT_CONTRACT = "0x9008d19f58aabd9ed0d60971565aa8510560ab41"
CHAIN_ID = 31337


def fill_address(byte: int) -> str:
    return "0x" + bytes([byte]).hex() * 20


def fill_uint(bits: int, byte: int) -> int:
    return int.from_bytes(bytes([byte]) * (bits // 8), "big")


@pytest.fixture
def traders():
    return [Account.from_key(key) for key in TRADER_KEYS]


@pytest.fixture
def domain():
    return create_eip712_domain(CHAIN_ID, SETTLEMENT_CONTRACT)


@pytest.fixture
def separator(domain):
    return hash_domain(domain)


@pytest.fixture
def registry():
    return ContractRegistry()


@pytest.fixture
def sample_order():
    return Order(
        sell_token=fill_address(0x01),
        buy_token=fill_address(0x02),
        receiver=fill_address(0x03),
        sell_amount=42 * 10**18,
        buy_amount=1337 * 10**16,
        valid_to=0xFFFFFFFF,
        app_data=bytes(32),
        fee_amount=10**18,
        kind=OrderKind.SELL,
        partially_fillable=False,
    )


@pytest.fixture
def full_width_order():
    """Order using every byte of every field, each with a different value."""
    return Order(
        sell_token=fill_address(0x01),
        buy_token=fill_address(0x02),
        receiver=fill_address(0x03),
        sell_amount=fill_uint(256, 0x04),
        buy_amount=fill_uint(256, 0x05),
        valid_to=fill_uint(32, 0x06),
        app_data=bytes([0x07]) * 32,
        fee_amount=fill_uint(256, 0x08),
        kind=OrderKind.BUY,
        partially_fillable=True,
    )
