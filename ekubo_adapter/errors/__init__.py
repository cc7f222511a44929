"""
Error definitions for Ekubo Adapter
"""

from .exceptions import (
    ErrorCode,
    EkuboAdapterError,
    InputError,
    InvalidRangeError,
    QuoteShapeError,
    PoolUnavailable,
    ExecutionError,
    PositionNotFound,
    ApiError,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "EkuboAdapterError",
    "InputError",
    "InvalidRangeError",
    "QuoteShapeError",
    "PoolUnavailable",
    "ExecutionError",
    "PositionNotFound",
    "ApiError",
    "ConfigurationError",
]
