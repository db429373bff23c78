"""Tests for trade encoding and order recovery from trades."""

import dataclasses

import pytest
from eth_abi import decode
from eth_utils import function_signature_to_4byte_selector

from order_signing import (
    EIP1271_MAGIC_VALUE,
    IndexOutOfRange,
    InvalidScheme,
    InvalidSignature,
    MalformedSignature,
    OrderDecodingError,
    OrderKind,
    SettlementEncoder,
    SigningScheme,
    TradeExecution,
    compute_order_uid,
    decode_settlement_call,
    decode_trade,
    decode_trade_flags,
    decode_trades,
    eip1271_signature,
    encode_settlement_call,
    encode_trade_flags,
    hash_order,
    presign_signature,
)
from order_signing.settlement import TRADE_ABI_TYPE
from order_signing.signing import Eip1271Verifier

RECOVER_SELECTOR = function_signature_to_4byte_selector(
    f"recoverOrderFromTrade(address[],{TRADE_ABI_TYPE})"
)


class AlwaysValidVerifier(Eip1271Verifier):
    def is_valid_signature(self, order_digest, signature):
        return EIP1271_MAGIC_VALUE


class TestTradeFlags:
    """Tests for trade flag packing."""

    @pytest.mark.parametrize("kind", list(OrderKind))
    @pytest.mark.parametrize("partially_fillable", [False, True])
    @pytest.mark.parametrize("scheme", list(SigningScheme))
    def test_round_trip(self, kind, partially_fillable, scheme):
        """Test that flags unpack to what was packed."""
        flags = decode_trade_flags(encode_trade_flags(kind, partially_fillable, scheme))

        assert flags.kind == kind
        assert flags.partially_fillable == partially_fillable
        assert flags.signing_scheme == scheme

    def test_bit_layout(self):
        """Test the position of each flag."""
        assert encode_trade_flags(OrderKind.SELL, False, SigningScheme.EIP712) == 0b0000
        assert encode_trade_flags(OrderKind.BUY, False, SigningScheme.EIP712) == 0b0001
        assert encode_trade_flags(OrderKind.SELL, True, SigningScheme.EIP712) == 0b0010
        assert encode_trade_flags(OrderKind.SELL, False, SigningScheme.ETHSIGN) == 0b0100
        assert encode_trade_flags(OrderKind.SELL, False, SigningScheme.EIP1271) == 0b1000
        assert encode_trade_flags(OrderKind.BUY, True, SigningScheme.PRESIGN) == 0b1111

    def test_invalid_scheme_bits(self):
        """Test that scheme bits beyond the known schemes are rejected."""
        with pytest.raises(InvalidScheme):
            decode_trade_flags(42 << 2)


class TestDecodeTrade:
    """Tests for recovering orders from trades."""

    def test_round_trip_order(self, domain, separator, full_width_order, traders):
        """Test that the decoded order equals the encoded one."""
        encoder = SettlementEncoder(domain)
        execution = TradeExecution(
            executed_amount=int.from_bytes(b"\x09" * 32, "big"),
            fee_discount=int.from_bytes(b"\x0a" * 32, "big"),
        )
        encoder.sign_encode_trade(full_width_order, traders[0].key, SigningScheme.EIP712, execution)

        recovered = decode_trade(separator, encoder.tokens, encoder.trades[0])

        assert recovered.order == full_width_order
        assert recovered.executed_amount == execution.executed_amount
        assert recovered.fee_discount == execution.fee_discount

    def test_computes_order_uid(self, domain, separator, sample_order, traders):
        """Test that the UID matches one computed independently."""
        encoder = SettlementEncoder(domain)
        encoder.sign_encode_trade(sample_order, traders[0].key, SigningScheme.EIP712)

        recovered = decode_trade(separator, encoder.tokens, encoder.trades[0])

        assert encoder.tokens == [sample_order.sell_token, sample_order.buy_token]
        assert recovered.owner == traders[0].address
        assert recovered.uid == compute_order_uid(
            hash_order(separator, sample_order), traders[0].address, sample_order.valid_to
        )

    def test_recovers_owner_for_all_schemes(self, domain, separator, sample_order, traders, registry):
        """Test owner recovery for every signing scheme."""
        verifier = registry.deploy(AlwaysValidVerifier())

        encoder = SettlementEncoder(domain)
        encoder.sign_encode_trade(sample_order, traders[0].key, SigningScheme.EIP712)
        encoder.sign_encode_trade(sample_order, traders[1].key, SigningScheme.ETHSIGN)
        encoder.encode_trade(sample_order, eip1271_signature(verifier, b""))
        encoder.encode_trade(sample_order, presign_signature(traders[1].address))

        owners = [traders[0].address, traders[1].address, verifier, traders[1].address]
        recovered = decode_trades(separator, encoder.tokens, encoder.trades, backend=registry)

        assert [trade.owner for trade in recovered] == owners
        assert all(trade.order == sample_order for trade in recovered)
        assert len(encoder.tokens) == 2

    def test_shared_token_list(self, domain, separator, sample_order, traders):
        """Test that trades reference tokens by index in a shared list."""
        reversed_order = dataclasses.replace(
            sample_order, sell_token=sample_order.buy_token, buy_token=sample_order.sell_token
        )
        encoder = SettlementEncoder(domain)
        first = encoder.sign_encode_trade(sample_order, traders[0].key)
        second = encoder.sign_encode_trade(reversed_order, traders[0].key)

        assert (first.sell_token_index, first.buy_token_index) == (0, 1)
        assert (second.sell_token_index, second.buy_token_index) == (1, 0)
        assert decode_trade(separator, encoder.tokens, second).order == reversed_order

    @pytest.mark.parametrize("field", ["sell_token_index", "buy_token_index"])
    def test_index_out_of_range(self, domain, separator, sample_order, traders, field):
        """Test that token indices beyond the list are rejected."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)

        with pytest.raises(IndexOutOfRange):
            decode_trade(separator, encoder.tokens, dataclasses.replace(trade, **{field: 2}))

    def test_tampered_trade_does_not_verify(self, domain, separator, sample_order, traders):
        """Test that changing a signed field changes the recovered owner."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)
        tampered = dataclasses.replace(trade, buy_amount=trade.buy_amount - 1)

        try:
            recovered = decode_trade(separator, encoder.tokens, tampered)
        except InvalidSignature:
            return
        assert recovered.owner != traders[0].address

    def test_malformed_signature(self, domain, separator, sample_order, traders):
        """Test that signature errors surface from trade decoding."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)

        with pytest.raises(MalformedSignature):
            decode_trade(separator, encoder.tokens, dataclasses.replace(trade, signature=b""))

    def test_invalid_scheme_flags(self, domain, separator, sample_order, traders):
        """Test that trades with unknown scheme bits are rejected."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)

        with pytest.raises(InvalidScheme):
            decode_trade(separator, encoder.tokens, dataclasses.replace(trade, flags=trade.flags | (42 << 2)))

    def test_presignature_lookup(self, domain, separator, sample_order, traders):
        """Test that pre-signed trades consult the presignature lookup."""
        encoder = SettlementEncoder(domain)
        trade = encoder.encode_trade(sample_order, presign_signature(traders[0].address))
        expected_uid = compute_order_uid(
            hash_order(separator, sample_order), traders[0].address, sample_order.valid_to
        )
        presigned = {(expected_uid, traders[0].address)}

        def lookup(uid, owner):
            return (uid, owner) in presigned

        recovered = decode_trade(separator, encoder.tokens, trade, presignatures=lookup)
        assert recovered.uid == expected_uid

        other = encoder.encode_trade(sample_order, presign_signature(traders[1].address))
        with pytest.raises(InvalidSignature, match="not presigned"):
            decode_trade(separator, encoder.tokens, other, presignatures=lookup)


class TestSettlementCallData:
    """Tests for the (tokens, trade) call data codec."""

    def test_round_trip(self, domain, full_width_order, traders):
        """Test that decoded call data equals what was encoded."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(full_width_order, traders[0].key, SigningScheme.ETHSIGN)

        tokens, decoded = decode_settlement_call(encode_settlement_call(encoder.tokens, trade))

        assert tokens == encoder.tokens
        assert decoded == trade

    def test_matches_abi_layout(self, domain, sample_order, traders):
        """Test that the encoding is standard ABI."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)

        data = encode_settlement_call(encoder.tokens, trade)
        tokens, trade_tuple = decode(["address[]", TRADE_ABI_TYPE], data)

        assert [token.lower() for token in tokens] == [token.lower() for token in encoder.tokens]
        assert trade_tuple[-1] == trade.signature

    def test_dirty_padding_does_not_change_uid(self, domain, separator, sample_order, traders):
        """Test that corrupting padding bytes of call data keeps the UID.

        Call data layout:
         -  4 bytes: selector
         - 32 bytes: offset of the token array
         - 32 bytes: offset of the trade
         - 32 bytes: token array length
         - 32 bytes: first token address
        """
        from order_signing import OrderVerifier

        verifier = OrderVerifier({"chain_id": domain["chainId"], "settlement_contract": domain["verifyingContract"]})
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)
        expected = decode_trade(separator, encoder.tokens, trade)

        data = bytearray(encode_settlement_call(encoder.tokens, trade, RECOVER_SELECTOR))

        assert int.from_bytes(data[4 + 2 * 32:4 + 3 * 32], "big") == 2
        start_token_word = 4 + 3 * 32
        first_token_word = data[start_token_word:start_token_word + 32]
        assert first_token_word[:12] == bytes(12)
        assert "0x" + first_token_word[12:].hex() == encoder.tokens[0].lower()

        for i in range(start_token_word, start_token_word + 12):
            data[i] = 42

        # receiver and validTo words of the trade head
        trade_start = 4 + int.from_bytes(data[4 + 32:4 + 64], "big")
        receiver_word = trade_start + 2 * 32
        valid_to_word = trade_start + 5 * 32
        data[receiver_word:receiver_word + 12] = b"\x2a" * 12
        data[valid_to_word:valid_to_word + 28] = b"\x2a" * 28

        recovered = verifier.recover_order_from_call(bytes(data), offset=4)

        assert recovered.order == sample_order
        assert recovered.owner == traders[0].address
        assert recovered.uid == expected.uid

    def test_truncated(self, domain, sample_order, traders):
        """Test that truncated call data is rejected."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)
        data = encode_settlement_call(encoder.tokens, trade)

        with pytest.raises(OrderDecodingError):
            decode_settlement_call(data[:-40])
        with pytest.raises(OrderDecodingError):
            decode_settlement_call(data[:100])

    def test_invalid_offset(self, domain, sample_order, traders):
        """Test that absurd offsets are rejected."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)
        data = bytearray(encode_settlement_call(encoder.tokens, trade))
        data[32:64] = b"\xff" * 32

        with pytest.raises(OrderDecodingError, match="invalid length or offset"):
            decode_settlement_call(bytes(data))

    def test_dirty_signature_offset(self, domain, sample_order, traders):
        """Test that a signature offset with high bits set is rejected rather than masked."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)
        data = bytearray(encode_settlement_call(encoder.tokens, trade))
        trade_start = int.from_bytes(data[32:64], "big")
        data[trade_start + 11 * 32] = 0x01

        with pytest.raises(OrderDecodingError, match="invalid length or offset"):
            decode_settlement_call(bytes(data))
