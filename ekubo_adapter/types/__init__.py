"""
Type definitions for Ekubo Adapter
"""

from .common import Token, TokenRef, normalize_address, address_value
from .pool import PoolKey, TokenOrder, ResolvedPool, PoolInfo
from .position import Bounds, PositionRecord, PositionPage, PositionInfo, encode_i129
from .quote import SwapMode, QuoteLeg, SwapQuote, ExecutionGuard
from .operation import Call
from .result import TxResult, TxStatus

# Token registry
from .starknet_tokens import (
    STARKNET_TOKENS,
    STARKNET_TOKEN_ADDRESSES,
    STARKNET_TOKEN_DECIMALS,
    get_token,
    get_token_by_address,
    is_known_token,
)

__all__ = [
    # Common types
    "Token",
    "TokenRef",
    "normalize_address",
    "address_value",
    # Pool types
    "PoolKey",
    "TokenOrder",
    "ResolvedPool",
    "PoolInfo",
    # Position types
    "Bounds",
    "PositionRecord",
    "PositionPage",
    "PositionInfo",
    "encode_i129",
    # Quote types
    "SwapMode",
    "QuoteLeg",
    "SwapQuote",
    "ExecutionGuard",
    "Call",
    "TxResult",
    "TxStatus",
    # Token registry
    "STARKNET_TOKENS",
    "STARKNET_TOKEN_ADDRESSES",
    "STARKNET_TOKEN_DECIMALS",
    "get_token",
    "get_token_by_address",
    "is_known_token",
]
