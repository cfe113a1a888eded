"""
MetaNode PoolManager Integration

Чтение списка пулов и подготовка вызова createAndInitializePoolIfNecessary.
Все цены / тики считаются через metaswap.math.ticks.
"""

import logging
from dataclasses import dataclass, replace
from typing import List, Optional, Tuple

from web3 import Web3
from web3.contract import Contract

from .abis import POOL_ABI, POOL_MANAGER_ABI
from .erc20 import ERC20Token
from ..math.ticks import (
    InvalidArgument,
    TickRange,
    TickRangeError,
    calculate_tick_range,
    get_tick_spacing,
    price_to_sqrt_price_x96,
    sqrt_price_x96_to_human_price,
    sqrt_price_x96_to_price,
)
from ..utils import sort_tokens

logger = logging.getLogger(__name__)

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"


@dataclass
class CreatePoolParams:
    """Параметры для createAndInitializePoolIfNecessary."""
    token0: str
    token1: str
    fee: int
    tick_lower: int
    tick_upper: int
    sqrt_price_x96: int

    @property
    def tick_spacing(self) -> int:
        return get_tick_spacing(self.fee)

    def validate(self) -> Optional[TickRangeError]:
        return TickRange(self.tick_lower, self.tick_upper).validate(self.tick_spacing)

    def to_tuple(self) -> tuple:
        """Конвертация в tuple для контракта."""
        return (
            Web3.to_checksum_address(self.token0),
            Web3.to_checksum_address(self.token1),
            self.fee,
            self.tick_lower,
            self.tick_upper,
            self.sqrt_price_x96,
        )

    @classmethod
    def from_price(
        cls,
        token_a: str,
        token_b: str,
        fee: int,
        price: float,
        range_percent: float = None,
        tick_lower: int = None,
        tick_upper: int = None
    ) -> 'CreatePoolParams':
        """
        Build pool parameters from a user-facing price.

        Args:
            token_a: Первый токен (в порядке ввода пользователя)
            token_b: Второй токен
            fee: Fee tier
            price: Цена token_b за 1 token_a
            range_percent: Symmetric band around the price (10 = ±10%)
            tick_lower: Explicit lower tick (pool orientation), overrides range_percent
            tick_upper: Explicit upper tick (pool orientation)

        Tokens are sorted by address. When that puts token_b first, the pool
        price is token_a per token_b, so the entered price is inverted before
        computing sqrtPriceX96 and the percent band.
        """
        if not price > 0:
            raise InvalidArgument("Price must be positive")

        token0, token1 = sort_tokens(token_a, token_b)
        pool_price = price if token0 == token_a else 1.0 / price

        if tick_lower is None or tick_upper is None:
            if range_percent is None:
                raise InvalidArgument("Either range_percent or both explicit ticks are required")
            tick_range = calculate_tick_range(pool_price, range_percent, get_tick_spacing(fee))
            tick_lower, tick_upper = tick_range.tick_lower, tick_range.tick_upper

        return cls(
            token0=token0,
            token1=token1,
            fee=fee,
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            sqrt_price_x96=price_to_sqrt_price_x96(pool_price),
        )


@dataclass
class PoolInfo:
    """Информация о пуле (одна запись getAllPools)."""
    address: str
    token0: str
    token1: str
    index: int
    fee: int
    fee_protocol: int
    tick_lower: int
    tick_upper: int
    tick: int
    sqrt_price_x96: int
    liquidity: int

    @classmethod
    def from_tuple(cls, raw: tuple) -> 'PoolInfo':
        (address, token0, token1, index, fee, fee_protocol,
         tick_lower, tick_upper, tick, sqrt_price_x96, liquidity) = raw
        return cls(
            address=address,
            token0=token0,
            token1=token1,
            index=int(index),
            fee=int(fee),
            fee_protocol=int(fee_protocol),
            tick_lower=int(tick_lower),
            tick_upper=int(tick_upper),
            tick=int(tick),
            sqrt_price_x96=int(sqrt_price_x96),
            liquidity=int(liquidity),
        )

    @property
    def initialized(self) -> bool:
        return self.sqrt_price_x96 > 0

    @property
    def tick_spacing(self) -> int:
        return get_tick_spacing(self.fee)

    @property
    def price(self) -> float:
        """Raw pool price token1/token0 (0.0 if not initialised)."""
        return sqrt_price_x96_to_price(self.sqrt_price_x96)

    def human_price(self, decimals0: int, decimals1: int) -> float:
        return sqrt_price_x96_to_human_price(self.sqrt_price_x96, decimals0, decimals1)

    def matches(self, token_a: str, token_b: str, fee: int = None) -> bool:
        """Same token pair (any order) and, if given, same fee."""
        pair = {self.token0.lower(), self.token1.lower()}
        if pair != {token_a.lower(), token_b.lower()}:
            return False
        return fee is None or self.fee == fee


@dataclass
class PoolState:
    """Живое состояние пула, прочитанное из контракта пула."""
    liquidity: int
    sqrt_price_x96: int
    tick: int


class PoolManager:
    """
    Класс для работы с MetaNode PoolManager.

    Позволяет:
    - Получать список пулов и пар
    - Находить пул по паре токенов и fee
    - Читать текущее состояние пула
    - Кодировать создание пула с начальной ценой
    """

    POOL_MANAGER_ADDRESSES = {
        11155111: "0xddC12b3F9F7C91C79DA7433D8d212FB78d609f7B",  # Sepolia
    }

    def __init__(
        self,
        w3: Web3,
        pool_manager_address: str = None,
        chain_id: int = 11155111
    ):
        self.w3 = w3
        self.chain_id = chain_id

        if pool_manager_address:
            self.pool_manager_address = Web3.to_checksum_address(pool_manager_address)
        else:
            if chain_id not in self.POOL_MANAGER_ADDRESSES:
                raise ValueError(f"No PoolManager deployment known for chain {chain_id}")
            self.pool_manager_address = Web3.to_checksum_address(
                self.POOL_MANAGER_ADDRESSES[chain_id]
            )

        self.contract: Contract = w3.eth.contract(
            address=self.pool_manager_address,
            abi=POOL_MANAGER_ABI
        )

    def get_all_pools(self) -> List[PoolInfo]:
        """Все пулы, как их возвращает getAllPools."""
        raw_pools = self.contract.functions.getAllPools().call()
        logger.debug(f"getAllPools returned {len(raw_pools)} pools")
        return [PoolInfo.from_tuple(raw) for raw in raw_pools]

    def get_pairs(self) -> List[Tuple[str, str]]:
        return [(token0, token1) for token0, token1 in self.contract.functions.getPairs().call()]

    def get_pool_address(self, token0: str, token1: str, index: int = 0) -> Optional[str]:
        """
        Получение адреса пула.

        Returns:
            Адрес пула или None если пул не существует
        """
        token0, token1 = sort_tokens(token0, token1)
        pool_address = self.contract.functions.getPool(
            Web3.to_checksum_address(token0),
            Web3.to_checksum_address(token1),
            index
        ).call()

        if pool_address == ZERO_ADDRESS:
            return None

        return pool_address

    def find_pool(self, token_a: str, token_b: str, fee: int = None) -> Optional[PoolInfo]:
        """First pool for the pair (and fee, if given), or None."""
        for pool in self.get_all_pools():
            if pool.matches(token_a, token_b, fee):
                logger.info(f"Found pool {pool.address} (index={pool.index}, fee={pool.fee})")
                return pool

        logger.info(f"No pool for {token_a}/{token_b} fee={fee}")
        return None

    def get_pool_state(self, pool_address: str) -> PoolState:
        """Чтение liquidity / sqrtPriceX96 / tick из контракта пула."""
        pool = self.w3.eth.contract(
            address=Web3.to_checksum_address(pool_address),
            abi=POOL_ABI
        )
        return PoolState(
            liquidity=pool.functions.liquidity().call(),
            sqrt_price_x96=pool.functions.sqrtPriceX96().call(),
            tick=pool.functions.tick().call(),
        )

    def get_token_decimals(self, token: str) -> int:
        """decimals() токена, нужно для human_price."""
        return ERC20Token(self.w3, token).decimals()

    def get_pools_with_state(self) -> List[PoolInfo]:
        """
        getAllPools with live state read from each pool contract.

        A pool whose state cannot be read is still listed, with zero
        liquidity / price / tick, so one broken pool does not hide the rest.
        """
        pools = []
        for pool in self.get_all_pools():
            try:
                state = self.get_pool_state(pool.address)
                pools.append(replace(
                    pool,
                    liquidity=state.liquidity,
                    sqrt_price_x96=state.sqrt_price_x96,
                    tick=state.tick,
                ))
            except Exception as e:
                logger.warning(f"Failed to read state of pool {pool.address}: {e}")
                pools.append(replace(pool, liquidity=0, sqrt_price_x96=0, tick=0))
        return pools

    def encode_create_pool(self, params: CreatePoolParams) -> str:
        """
        Кодирование createAndInitializePoolIfNecessary.

        Raises:
            InvalidArgument: tick range fails validation for the fee tier
        """
        error = params.validate()
        if error is not None:
            raise InvalidArgument(error.message(params.tick_spacing))

        logger.debug(
            f"createAndInitializePoolIfNecessary: fee={params.fee}, "
            f"ticks=[{params.tick_lower}, {params.tick_upper}], sqrtPriceX96={params.sqrt_price_x96}"
        )
        return self.contract.encode_abi(
            "createAndInitializePoolIfNecessary",
            args=[params.to_tuple()]
        )
