"""
Shared fixtures for all tests.
"""

import pytest
from unittest.mock import MagicMock
from web3 import Web3


class MockWeb3:
    """Переиспользуемый мок Web3 для тестов."""

    def __init__(self, chain_id: int = 11155111):
        self.eth = MagicMock()
        self.eth.chain_id = chain_id
        self.eth.block_number = 6_000_000
        self.eth.contract = MagicMock()


@pytest.fixture
def mock_w3():
    """Мок Web3 instance."""
    return MockWeb3()


@pytest.fixture
def real_w3():
    """Web3 без провайдера: только для кодирования calldata."""
    return Web3()


# Тестовые адреса
TOKEN_A = "0x1111111111111111111111111111111111111111"
TOKEN_B = "0x9999999999999999999999999999999999999999"
USER = "0x1234567890123456789012345678901234567890"
