"""
Functional modules for EkuboClient
"""

from .market import MarketModule
from .swap import SwapModule, SwapPlan
from .liquidity import LiquidityModule, LiquidityPlan

__all__ = [
    "MarketModule",
    "SwapModule",
    "SwapPlan",
    "LiquidityModule",
    "LiquidityPlan",
]
