"""
Tests for config.py

Адреса контрактов, токены и значения по умолчанию.
"""

import pytest
from web3 import Web3

from config import (
    CHAINS,
    DEFAULT_DEADLINE_MINUTES,
    DEFAULT_FEE_TIER,
    DEFAULT_RANGE_PERCENT,
    DEFAULT_SLIPPAGE,
    DEFAULT_TICK_LOWER,
    DEFAULT_TICK_UPPER,
    FEE_TIERS,
    PRESET_RANGES,
    SEPOLIA,
    TOKENS,
    find_token,
    get_chain_config,
    get_token,
)
from metaswap.contracts import PoolManager, PositionManager, SwapRouter
from metaswap.math.ticks import FEE_TO_TICK_SPACING, get_tick_spacing, validate_tick_range


# ============================================================
# Chain
# ============================================================

class TestChainConfig:

    def test_sepolia_registered(self):
        assert get_chain_config(11155111) is SEPOLIA
        assert CHAINS[SEPOLIA.chain_id] is SEPOLIA

    def test_unsupported_chain(self):
        with pytest.raises(ValueError, match="Unsupported chain"):
            get_chain_config(56)

    def test_addresses_match_contract_wrappers(self):
        assert SEPOLIA.pool_manager == PoolManager.POOL_MANAGER_ADDRESSES[SEPOLIA.chain_id]
        assert SEPOLIA.position_manager == PositionManager.POSITION_MANAGER_ADDRESSES[SEPOLIA.chain_id]
        assert SEPOLIA.swap_router == SwapRouter.SWAP_ROUTER_ADDRESSES[SEPOLIA.chain_id]

    def test_rpc_url_set(self):
        assert SEPOLIA.rpc_url.startswith("http")


# ============================================================
# Tokens
# ============================================================

class TestTokens:

    def test_four_test_tokens(self):
        assert [t.symbol for t in TOKENS] == ["MNA", "MNB", "MNC", "MND"]

    @pytest.mark.parametrize("token", TOKENS, ids=lambda t: t.symbol)
    def test_token_addresses_valid(self, token):
        assert Web3.is_address(token.address.lower())
        assert token.decimals == 18

    def test_find_token_case_insensitive(self):
        token = find_token("0x4798388E3ADE569570DF626040F07DF71135C48E".lower())
        assert token.symbol == "MNA"

    def test_find_token_unknown(self):
        assert find_token("0x0000000000000000000000000000000000000001") is None

    def test_get_token(self):
        assert get_token("MND").address == "0x7af86B1034AC4C925Ef5C3F637D1092310d83F03"
        assert get_token("USDT") is None


# ============================================================
# Defaults
# ============================================================

class TestDefaults:

    def test_values(self):
        assert DEFAULT_SLIPPAGE == 0.5
        assert DEFAULT_DEADLINE_MINUTES == 20
        assert DEFAULT_FEE_TIER == 3000
        assert DEFAULT_RANGE_PERCENT == 10

    def test_fee_tiers_have_tick_spacing(self):
        assert set(FEE_TIERS) == set(FEE_TO_TICK_SPACING)
        assert DEFAULT_FEE_TIER in FEE_TIERS

    @pytest.mark.parametrize("fee", sorted(FEE_TIERS))
    def test_default_full_range_valid_for_every_fee(self, fee):
        assert validate_tick_range(DEFAULT_TICK_LOWER, DEFAULT_TICK_UPPER, get_tick_spacing(fee)) is None

    def test_preset_ranges(self):
        assert PRESET_RANGES == {"Narrow": 5, "Medium": 10, "Wide": 25, "Very Wide": 50}
