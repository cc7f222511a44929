"""
Ekubo (Starknet) concentrated-liquidity protocol support
"""

from .constants import (
    EKUBO_ADDRESSES,
    Q128,
    TICK_BASE,
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
    get_ekubo_address,
)
from .math import (
    price_from_sqrt_price,
    tick_from_sqrt_price,
    tick_from_price,
    price_from_tick,
    fee_percent_to_fixed,
    fee_fixed_to_percent,
    spacing_percent_to_exponent,
    spacing_exponent_to_percent,
    round_tick_to_spacing,
)
from .bounds import build_bounds, orient_price_range, bounds_from_price_range
from .quote import (
    sqrt_ratio_limit,
    extract_expected_output,
    calculate_minimum_output,
    extract_required_input,
    exact_output_minimum,
    compute_execution_guard,
    build_route_node,
    build_token_amount,
)
from .pools import (
    build_pool_key,
    prepare_pool_key,
    read_sqrt_ratio,
    read_liquidity,
    read_fees_per_liquidity,
    read_token_info,
)
from .api import EkuboApiClient, find_position, parse_position_record
from .events import extract_position_id_from_receipt

__all__ = [
    "EKUBO_ADDRESSES",
    "Q128",
    "TICK_BASE",
    "MIN_TICK",
    "MAX_TICK",
    "MIN_SQRT_RATIO",
    "MAX_SQRT_RATIO",
    "get_ekubo_address",
    # Math
    "price_from_sqrt_price",
    "tick_from_sqrt_price",
    "tick_from_price",
    "price_from_tick",
    "fee_percent_to_fixed",
    "fee_fixed_to_percent",
    "spacing_percent_to_exponent",
    "spacing_exponent_to_percent",
    "round_tick_to_spacing",
    # Bounds
    "build_bounds",
    "orient_price_range",
    "bounds_from_price_range",
    # Quotes
    "sqrt_ratio_limit",
    "extract_expected_output",
    "calculate_minimum_output",
    "extract_required_input",
    "exact_output_minimum",
    "compute_execution_guard",
    "build_route_node",
    "build_token_amount",
    # Pools, positions, events
    "build_pool_key",
    "prepare_pool_key",
    "read_sqrt_ratio",
    "read_liquidity",
    "read_fees_per_liquidity",
    "read_token_info",
    "EkuboApiClient",
    "find_position",
    "parse_position_record",
    "extract_position_id_from_receipt",
]
