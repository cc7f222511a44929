"""
Infrastructure helpers: correlation-scoped logging, multicall execution
and token metadata.
"""

from .correlation import (
    CorrelationContext,
    generate_correlation_id,
    get_correlation_id,
    set_correlation_id,
    log_with_correlation,
)
from .executor import execute_calls
from .tokens import RegistryTokenMetadata

__all__ = [
    "CorrelationContext",
    "generate_correlation_id",
    "get_correlation_id",
    "set_correlation_id",
    "log_with_correlation",
    "execute_calls",
    "RegistryTokenMetadata",
]
