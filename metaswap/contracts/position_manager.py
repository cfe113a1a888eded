"""
MetaNode Position Manager Integration

Работа с PositionManager: список позиций и кодирование mint / burn / collect.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from web3 import Web3
from web3.contract import Contract

from .abis import POSITION_MANAGER_ABI
from ..math.ticks import get_price_range_from_ticks
from ..utils import calculate_deadline

logger = logging.getLogger(__name__)

DEFAULT_DEADLINE_MINUTES = 20


@dataclass
class MintParams:
    """Параметры для создания позиции."""
    token0: str
    token1: str
    index: int
    amount0_desired: int
    amount1_desired: int
    recipient: str = None
    deadline: int = None

    def to_tuple(self, recipient: str = None, deadline: int = None) -> tuple:
        """
        Конвертация в tuple для контракта.

        recipient / deadline arguments override the stored fields; a missing
        deadline defaults to DEFAULT_DEADLINE_MINUTES from now.
        """
        recipient = recipient or self.recipient
        if recipient is None:
            raise ValueError("Mint recipient is required")

        if deadline is None:
            deadline = self.deadline
        if deadline is None:
            deadline = calculate_deadline(DEFAULT_DEADLINE_MINUTES)

        return (
            Web3.to_checksum_address(self.token0),
            Web3.to_checksum_address(self.token1),
            self.index,
            self.amount0_desired,
            self.amount1_desired,
            Web3.to_checksum_address(recipient),
            deadline
        )


@dataclass
class PositionInfo:
    """Позиция из getAllPositions."""
    id: int
    owner: str
    token0: str
    token1: str
    index: int
    fee: int
    liquidity: int
    tick_lower: int
    tick_upper: int
    tokens_owed0: int
    tokens_owed1: int
    fee_growth_inside0_last_x128: int
    fee_growth_inside1_last_x128: int

    @classmethod
    def from_tuple(cls, raw: tuple) -> 'PositionInfo':
        return cls(
            id=int(raw[0]),
            owner=raw[1],
            token0=raw[2],
            token1=raw[3],
            index=int(raw[4]),
            fee=int(raw[5]),
            liquidity=int(raw[6]),
            tick_lower=int(raw[7]),
            tick_upper=int(raw[8]),
            tokens_owed0=int(raw[9]),
            tokens_owed1=int(raw[10]),
            fee_growth_inside0_last_x128=int(raw[11]),
            fee_growth_inside1_last_x128=int(raw[12]),
        )

    @property
    def price_range(self) -> Tuple[float, float]:
        """(min_price, max_price) token1/token0."""
        return get_price_range_from_ticks(self.tick_lower, self.tick_upper)

    @property
    def has_unclaimed_tokens(self) -> bool:
        return self.tokens_owed0 > 0 or self.tokens_owed1 > 0

    def in_range(self, current_tick: int) -> bool:
        # Pool semantics: active when tick_lower <= tick < tick_upper
        return self.tick_lower <= current_tick < self.tick_upper


class PositionManager:
    """
    Класс для работы с MetaNode PositionManager.

    Поддерживает:
    - Чтение позиций (всех / по владельцу)
    - Кодирование mint, burn, collect
    """

    POSITION_MANAGER_ADDRESSES = {
        11155111: "0xbe766Bf20eFfe431829C5d5a2744865974A0B610",  # Sepolia
    }

    def __init__(
        self,
        w3: Web3,
        position_manager_address: str = None,
        chain_id: int = 11155111
    ):
        self.w3 = w3
        self.chain_id = chain_id

        if position_manager_address:
            self.position_manager_address = Web3.to_checksum_address(position_manager_address)
        else:
            if chain_id not in self.POSITION_MANAGER_ADDRESSES:
                raise ValueError(f"No PositionManager deployment known for chain {chain_id}")
            self.position_manager_address = Web3.to_checksum_address(
                self.POSITION_MANAGER_ADDRESSES[chain_id]
            )

        self.contract: Contract = w3.eth.contract(
            address=self.position_manager_address,
            abi=POSITION_MANAGER_ABI
        )

    def get_all_positions(self) -> List[PositionInfo]:
        raw_positions = self.contract.functions.getAllPositions().call()
        return [PositionInfo.from_tuple(raw) for raw in raw_positions]

    def get_positions(self, owner: str) -> List[PositionInfo]:
        """
        Позиции конкретного владельца.

        Сравнение адресов без учёта регистра.
        """
        owner = owner.lower()
        positions = [p for p in self.get_all_positions() if p.owner.lower() == owner]
        logger.debug(f"{len(positions)} positions owned by {owner}")
        return positions

    def owner_of(self, position_id: int) -> str:
        """Владелец позиции (NFT)."""
        return self.contract.functions.ownerOf(position_id).call()

    def encode_mint(self, params: MintParams, recipient: str = None, deadline: int = None) -> str:
        """
        Кодирование вызова mint.

        Args:
            params: Параметры позиции
            recipient: Адрес получателя позиции (overrides params.recipient)
            deadline: Deadline транзакции (overrides params.deadline)

        Returns:
            Закодированные данные вызова
        """
        return self.contract.encode_abi(
            "mint",
            args=[params.to_tuple(recipient, deadline)]
        )

    def encode_burn(self, position_id: int) -> str:
        """Кодирование burn."""
        return self.contract.encode_abi("burn", args=[position_id])

    def encode_collect(self, position_id: int, recipient: str) -> str:
        """Кодирование collect."""
        return self.contract.encode_abi(
            "collect",
            args=[position_id, Web3.to_checksum_address(recipient)]
        )
