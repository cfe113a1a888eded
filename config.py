"""
Configuration for MetaNode Swap

Адреса контрактов MetaNode (PoolManager / PositionManager / SwapRouter),
тестовые токены и значения по умолчанию для Sepolia.
"""

import os
from dataclasses import dataclass
from typing import Dict, List, Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ChainConfig:
    """Конфигурация сети."""
    chain_id: int
    rpc_url: str
    explorer_url: str
    native_token: str
    pool_manager: str
    position_manager: str
    swap_router: str


@dataclass
class TokenConfig:
    """Конфигурация токена."""
    address: str
    symbol: str
    name: str
    decimals: int


# ============================================================
# CHAIN CONFIGURATIONS
# ============================================================

SEPOLIA_CHAIN_ID = 11155111

# Sepolia - MetaNode Swap deployment
# RPC can be overridden with SEPOLIA_RPC_URL in the environment or .env
SEPOLIA = ChainConfig(
    chain_id=SEPOLIA_CHAIN_ID,
    rpc_url=os.getenv("SEPOLIA_RPC_URL", "https://ethereum-sepolia-rpc.publicnode.com"),
    explorer_url="https://sepolia.etherscan.io",
    native_token="ETH",
    pool_manager="0xddC12b3F9F7C91C79DA7433D8d212FB78d609f7B",
    position_manager="0xbe766Bf20eFfe431829C5d5a2744865974A0B610",
    swap_router="0xD2c220143F5784b3bD84ae12747d97C8A36CeCB2",
)

CHAINS: Dict[int, ChainConfig] = {
    SEPOLIA_CHAIN_ID: SEPOLIA,
}

# ============================================================
# TOKEN CONFIGURATIONS (Sepolia)
# ============================================================

TOKENS: List[TokenConfig] = [
    TokenConfig(
        address="0x4798388e3adE569570Df626040F07DF71135C48E",
        symbol="MNA",
        name="MetaNode Token A",
        decimals=18
    ),
    TokenConfig(
        address="0x5A4eA3a013D42Cfd1B1609d19f6eA998EeE06D30",
        symbol="MNB",
        name="MetaNode Token B",
        decimals=18
    ),
    TokenConfig(
        address="0x86B5df6FF459854ca91318274E47F4eEE245CF28",
        symbol="MNC",
        name="MetaNode Token C",
        decimals=18
    ),
    TokenConfig(
        address="0x7af86B1034AC4C925Ef5C3F637D1092310d83F03",
        symbol="MND",
        name="MetaNode Token D",
        decimals=18
    ),
]

# ============================================================
# FEE TIERS
# ============================================================

FEE_TIERS = {
    500: "0.05%",    # стабильные пары
    3000: "0.30%",   # большинство пар
    10000: "1.00%",  # экзотические пары
}

# Preset ±% ranges offered when creating a pool
PRESET_RANGES = {
    "Narrow": 5,
    "Medium": 10,
    "Wide": 25,
    "Very Wide": 50,
}

# ============================================================
# DEFAULT SETTINGS
# ============================================================

DEFAULT_SLIPPAGE = 0.5  # 0.5%
DEFAULT_DEADLINE_MINUTES = 20
DEFAULT_FEE_TIER = 3000
DEFAULT_RANGE_PERCENT = 10

# Full-range position bounds (multiples of 200, so valid for every fee tier)
DEFAULT_TICK_LOWER = -887200
DEFAULT_TICK_UPPER = 887200


def get_chain_config(chain_id: int) -> ChainConfig:
    if chain_id not in CHAINS:
        raise ValueError(f"Unsupported chain: {chain_id}")
    return CHAINS[chain_id]


def find_token(address: str) -> Optional[TokenConfig]:
    """Поиск токена по адресу (без учёта регистра)."""
    address = address.lower()
    for token in TOKENS:
        if token.address.lower() == address:
            return token
    return None


def get_token(symbol: str) -> Optional[TokenConfig]:
    """Поиск токена по символу."""
    for token in TOKENS:
        if token.symbol == symbol:
            return token
    return None
