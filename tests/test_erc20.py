"""
Tests for ERC20 helpers.

Баланс, allowance, проверка approve и кодирование approve.
"""

import pytest
from unittest.mock import MagicMock
from eth_abi import decode
from web3 import Web3

from metaswap.contracts.abis import ERC20_ABI
from metaswap.contracts.erc20 import MAX_UINT256, ERC20Token, TokenInfo


TOKEN = "0x1111111111111111111111111111111111111111"
OWNER = "0x1234567890123456789012345678901234567890"
ROUTER = "0x2222222222222222222222222222222222222222"


def make_token(mock_w3, allowance=0):
    token = ERC20Token(mock_w3, TOKEN)
    token.contract = MagicMock()
    functions = token.contract.functions
    functions.name.return_value.call.return_value = "MetaNode Token A"
    functions.symbol.return_value.call.return_value = "MNA"
    functions.decimals.return_value.call.return_value = 18
    functions.totalSupply.return_value.call.return_value = 10 ** 27
    functions.balanceOf.return_value.call.return_value = 5 * 10 ** 18
    functions.allowance.return_value.call.return_value = allowance
    return token


# ============================================================
# Reads
# ============================================================

class TestERC20Reads:

    def test_contract_uses_erc20_abi(self, mock_w3):
        ERC20Token(mock_w3, TOKEN)
        mock_w3.eth.contract.assert_called_once_with(address=TOKEN, abi=ERC20_ABI)

    def test_info(self, mock_w3):
        token = make_token(mock_w3)
        assert token.info() == TokenInfo(
            address=TOKEN,
            name="MetaNode Token A",
            symbol="MNA",
            decimals=18,
            total_supply=10 ** 27,
        )

    def test_balance_of(self, mock_w3):
        token = make_token(mock_w3)
        assert token.balance_of(OWNER) == 5 * 10 ** 18
        token.contract.functions.balanceOf.assert_called_once_with(OWNER)

    def test_allowance_checksums_addresses(self, mock_w3):
        token = make_token(mock_w3, allowance=123)
        assert token.allowance(OWNER.upper().replace("0X", "0x"), ROUTER) == 123
        token.contract.functions.allowance.assert_called_once_with(
            Web3.to_checksum_address(OWNER), Web3.to_checksum_address(ROUTER)
        )

    @pytest.mark.parametrize(
        "allowance, amount, expected",
        [(0, 1, True), (999, 1000, True), (1000, 1000, False), (MAX_UINT256, 10 ** 30, False)],
        ids=["none", "short", "exact", "unlimited"],
    )
    def test_needs_approval(self, mock_w3, allowance, amount, expected):
        token = make_token(mock_w3, allowance=allowance)
        assert token.needs_approval(OWNER, ROUTER, amount) is expected


# ============================================================
# approve encoding
# ============================================================

class TestEncodeApprove:

    def test_default_amount_is_unlimited(self, real_w3):
        token = ERC20Token(real_w3, TOKEN)

        raw = bytes.fromhex(token.encode_approve(ROUTER)[2:])

        assert raw[:4] == Web3.keccak(text="approve(address,uint256)")[:4]
        assert decode(["address", "uint256"], raw[4:]) == (ROUTER, MAX_UINT256)

    def test_explicit_amount(self, real_w3):
        token = ERC20Token(real_w3, TOKEN)
        raw = bytes.fromhex(token.encode_approve(ROUTER, 10 ** 18)[2:])
        assert decode(["address", "uint256"], raw[4:]) == (ROUTER, 10 ** 18)
