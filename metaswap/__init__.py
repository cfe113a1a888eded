"""
MetaNode Swap toolkit

Price/tick math, contract call builders and read helpers for the
MetaNode concentrated-liquidity pools (PoolManager / PositionManager /
SwapRouter).
"""

__version__ = "0.1.0"
