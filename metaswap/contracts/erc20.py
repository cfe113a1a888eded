"""
ERC20 helpers

Чтение баланса / allowance и кодирование approve для токенов,
которые тратят SwapRouter и PositionManager.
"""

import logging
from dataclasses import dataclass

from web3 import Web3
from web3.contract import Contract

from .abis import ERC20_ABI

logger = logging.getLogger(__name__)

MAX_UINT256 = 2 ** 256 - 1


@dataclass
class TokenInfo:
    """Метаданные токена, прочитанные из контракта."""
    address: str
    name: str
    symbol: str
    decimals: int
    total_supply: int


class ERC20Token:
    """Обёртка над ERC20 контрактом."""

    def __init__(self, w3: Web3, address: str):
        self.w3 = w3
        self.address = Web3.to_checksum_address(address)
        self.contract: Contract = w3.eth.contract(address=self.address, abi=ERC20_ABI)

    def decimals(self) -> int:
        return self.contract.functions.decimals().call()

    def info(self) -> TokenInfo:
        return TokenInfo(
            address=self.address,
            name=self.contract.functions.name().call(),
            symbol=self.contract.functions.symbol().call(),
            decimals=self.decimals(),
            total_supply=self.contract.functions.totalSupply().call(),
        )

    def balance_of(self, owner: str) -> int:
        """Получение баланса токена."""
        return self.contract.functions.balanceOf(Web3.to_checksum_address(owner)).call()

    def allowance(self, owner: str, spender: str) -> int:
        return self.contract.functions.allowance(
            Web3.to_checksum_address(owner),
            Web3.to_checksum_address(spender)
        ).call()

    def needs_approval(self, owner: str, spender: str, amount: int) -> bool:
        """
        Проверка, нужен ли approve перед свапом / mint.

        Args:
            owner: Владелец токенов
            spender: SwapRouter или PositionManager
            amount: Сумма, которую spender должен списать

        Returns:
            True если текущий allowance меньше amount
        """
        current_allowance = self.allowance(owner, spender)
        if current_allowance < amount:
            logger.info(
                f"Approval needed for {self.address}: allowance {current_allowance} < {amount}"
            )
            return True
        return False

    def encode_approve(self, spender: str, amount: int = MAX_UINT256) -> str:
        """Кодирование approve (по умолчанию на максимальную сумму)."""
        return self.contract.encode_abi(
            "approve",
            args=[Web3.to_checksum_address(spender), amount]
        )
