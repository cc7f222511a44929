"""
Ekubo Adapter - Concentrated-liquidity interaction engine for Ekubo (Starknet)

Provides:
- Price/tick/fee/spacing conversions (Q128.128 sqrt prices, tick base 1.000001)
- Position bounds from price ranges
- Guarded swaps (sqrt ratio limit + minimum output / exact output)
- Position lifecycle: create, add liquidity, withdraw / collect fees

Chain access, signing and token metadata are supplied by the caller
through the collaborator interfaces in protocols.ekubo.interfaces.
"""

from .client import EkuboClient
from .types import (
    Token,
    TokenRef,
    PoolKey,
    TokenOrder,
    ResolvedPool,
    PoolInfo,
    Bounds,
    PositionRecord,
    PositionPage,
    PositionInfo,
    SwapMode,
    QuoteLeg,
    SwapQuote,
    ExecutionGuard,
    Call,
    TxResult,
    TxStatus,
)
from .errors import (
    EkuboAdapterError,
    InputError,
    InvalidRangeError,
    QuoteShapeError,
    PoolUnavailable,
    ExecutionError,
    PositionNotFound,
    ApiError,
    ConfigurationError,
    ErrorCode,
)
from .modules import MarketModule, SwapModule, SwapPlan, LiquidityModule, LiquidityPlan
from .protocols.ekubo import EkuboApiClient
from .infra import RegistryTokenMetadata

__all__ = [
    # Client
    "EkuboClient",
    # Types
    "Token",
    "TokenRef",
    "PoolKey",
    "TokenOrder",
    "ResolvedPool",
    "PoolInfo",
    "Bounds",
    "PositionRecord",
    "PositionPage",
    "PositionInfo",
    "SwapMode",
    "QuoteLeg",
    "SwapQuote",
    "ExecutionGuard",
    "Call",
    "TxResult",
    "TxStatus",
    # Errors
    "EkuboAdapterError",
    "InputError",
    "InvalidRangeError",
    "QuoteShapeError",
    "PoolUnavailable",
    "ExecutionError",
    "PositionNotFound",
    "ApiError",
    "ConfigurationError",
    "ErrorCode",
    # Modules
    "MarketModule",
    "SwapModule",
    "SwapPlan",
    "LiquidityModule",
    "LiquidityPlan",
    # Collaborators
    "EkuboApiClient",
    "RegistryTokenMetadata",
]

__version__ = "0.1.0"
