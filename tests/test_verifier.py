"""Tests for verifier configuration and the OrderVerifier facade."""

import pytest
from eth_utils import to_checksum_address

from order_signing import (
    EIP1271_MAGIC_VALUE,
    ContractRegistry,
    Eip1271Verifier,
    InvalidSignature,
    OrderVerifier,
    SettlementEncoder,
    SigningScheme,
    compute_order_uid,
    domain_separator,
    eip1271_signature,
    encode_settlement_call,
    extract_order_uid_params,
    hash_order,
    load_config_from_env,
    presign_signature,
)
from order_signing.config import resolve_config

SETTLEMENT_CONTRACT = "0x9008d19f58aabd9ed0d60971565aa8510560ab41"


class AlwaysValidVerifier(Eip1271Verifier):
    def is_valid_signature(self, order_digest, signature):
        return EIP1271_MAGIC_VALUE


class TestConfig:
    """Tests for verifier configuration."""

    def test_defaults(self):
        """Test that defaults are applied."""
        config = resolve_config({"settlement_contract": SETTLEMENT_CONTRACT.lower()})

        assert config.chain_id == 1
        assert config.settlement_contract == to_checksum_address(SETTLEMENT_CONTRACT)
        assert config.name == "Gnosis Protocol"
        assert config.version == "v2"

    def test_missing_settlement_contract(self):
        """Test that the settlement contract is required."""
        with pytest.raises(ValueError, match="settlement_contract is required"):
            resolve_config({"chain_id": 1})

    def test_invalid_settlement_contract(self):
        """Test that invalid contract addresses raise errors."""
        with pytest.raises(ValueError, match="Invalid settlement_contract"):
            resolve_config({"settlement_contract": "invalid"})

    def test_load_from_env(self):
        """Test reading configuration from environment variables."""
        config = load_config_from_env(
            {
                "ORDER_SIGNING_CHAIN_ID": "0x64",
                "ORDER_SIGNING_SETTLEMENT_CONTRACT": SETTLEMENT_CONTRACT,
                "ORDER_SIGNING_DOMAIN_VERSION": "v3",
            }
        )

        assert config == {
            "chain_id": 100,
            "settlement_contract": SETTLEMENT_CONTRACT,
            "version": "v3",
        }

    def test_load_from_env_invalid_chain_id(self):
        """Test that non-numeric chain ids raise errors."""
        with pytest.raises(ValueError, match="Invalid ORDER_SIGNING_CHAIN_ID"):
            load_config_from_env({"ORDER_SIGNING_CHAIN_ID": "mainnet"})

    def test_verifier_from_process_env(self, monkeypatch):
        """Test that the verifier falls back to the process environment."""
        monkeypatch.setenv("ORDER_SIGNING_CHAIN_ID", "5")
        monkeypatch.setenv("ORDER_SIGNING_SETTLEMENT_CONTRACT", SETTLEMENT_CONTRACT)

        verifier = OrderVerifier()

        assert verifier.get_config().chain_id == 5
        assert verifier.domain_separator == domain_separator(5, SETTLEMENT_CONTRACT)


class TestOrderVerifier:
    """Tests for the deployment-bound verifier."""

    @pytest.fixture
    def verifier(self, domain, registry):
        return OrderVerifier(
            {"chain_id": domain["chainId"], "settlement_contract": domain["verifyingContract"]},
            backend=registry,
        )

    def test_domain(self, verifier, domain, separator):
        """Test the verifier's domain and separator."""
        assert verifier.domain == domain
        assert verifier.domain_separator == separator

    def test_order_digest(self, verifier, separator, sample_order):
        """Test that digests use the deployment's separator."""
        assert verifier.order_digest(sample_order) == hash_order(separator, sample_order)

    def test_recover_order_signer(self, verifier, domain, sample_order, traders, registry):
        """Test owner recovery through the verifier."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key, SigningScheme.ETHSIGN)
        contract = registry.deploy(AlwaysValidVerifier())

        assert verifier.recover_order_signer(sample_order, SigningScheme.ETHSIGN, trade.signature) == (
            traders[0].address
        )
        signature = eip1271_signature(contract)
        assert verifier.recover_order_signer(sample_order, signature.scheme, signature.data) == contract

    def test_other_deployment_rejects_signature(self, domain, sample_order, traders):
        """Test that a signature for one deployment does not verify for another."""
        encoder = SettlementEncoder(domain)
        trade = encoder.sign_encode_trade(sample_order, traders[0].key)
        other = OrderVerifier({"chain_id": domain["chainId"] + 1, "settlement_contract": SETTLEMENT_CONTRACT})

        try:
            recovered = other.recover_order_from_trade(encoder.tokens, trade)
        except InvalidSignature:
            return
        assert recovered.owner != traders[0].address

    def test_presignatures(self, domain, sample_order, traders):
        """Test that the verifier passes its presignature lookup on."""
        encoder = SettlementEncoder(domain)
        trade = encoder.encode_trade(sample_order, presign_signature(traders[0].address))
        verifier = OrderVerifier(
            {"chain_id": domain["chainId"], "settlement_contract": domain["verifyingContract"]},
            presignatures=lambda uid, owner: False,
        )

        with pytest.raises(InvalidSignature, match="not presigned"):
            verifier.recover_order_from_trade(encoder.tokens, trade)


class TestIntegration:
    """Integration tests for the full flow."""

    def test_full_verification_flow(self, domain, sample_order, traders):
        """Test the complete flow: sign -> encode -> call data -> recover -> uid."""
        verifier = OrderVerifier(
            {"chain_id": domain["chainId"], "settlement_contract": domain["verifyingContract"]},
            backend=ContractRegistry(),
        )

        # 1. Sign and encode trades
        encoder = SettlementEncoder(verifier.domain)
        encoder.sign_encode_trade(sample_order, traders[0].key, SigningScheme.EIP712)
        encoder.sign_encode_trade(sample_order, traders[1].key, SigningScheme.ETHSIGN)

        # 2. Recover from trades
        recovered = verifier.recover_orders_from_trades(encoder.tokens, encoder.trades)
        assert [trade.owner for trade in recovered] == [traders[0].address, traders[1].address]

        # 3. Same order, different owners: different UIDs
        assert recovered[0].uid != recovered[1].uid

        # 4. Recover from call data
        data = encode_settlement_call(encoder.tokens, encoder.trades[0])
        from_call = verifier.recover_order_from_call(data)
        assert from_call == recovered[0]

        # 5. UID matches its components
        params = extract_order_uid_params(from_call.uid)
        assert params.order_digest == verifier.order_digest(sample_order)
        assert params.owner == traders[0].address
        assert params.valid_to == sample_order.valid_to
        assert from_call.uid == compute_order_uid(params.order_digest, params.owner, params.valid_to)
        assert verifier.order_uid(sample_order, traders[0].address) == from_call.uid
