"""
MetaNode contracts: PoolManager, PositionManager, SwapRouter.

Все обёртки получают Web3 явно и только читают состояние / кодируют calldata
(в том числе approve для ERC20).
Подпись и отправка транзакций остаются на стороне кошелька.
"""

from .pool_manager import PoolManager, PoolInfo, PoolState, CreatePoolParams
from .position_manager import PositionManager, PositionInfo, MintParams
from .swap_router import (
    SwapRouter,
    ExactInputParams,
    ExactOutputParams,
    QuoteParams,
    QuoteExactOutputParams,
    QuoteResult,
)
from .erc20 import ERC20Token, TokenInfo

__all__ = [
    'PoolManager',
    'PoolInfo',
    'PoolState',
    'CreatePoolParams',
    'PositionManager',
    'PositionInfo',
    'MintParams',
    'SwapRouter',
    'ExactInputParams',
    'QuoteParams',
    'QuoteResult',
    'ExactOutputParams',
    'QuoteExactOutputParams',
    'ERC20Token',
    'TokenInfo',
]
