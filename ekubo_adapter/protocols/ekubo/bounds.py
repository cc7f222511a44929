"""
Ekubo position bounds

Validates tick pairs and derives spacing-aligned bounds from price ranges.
"""

from decimal import Decimal
from typing import Tuple

from .constants import MAX_TICK, MIN_TICK
from .math import Number, is_finite_number, round_tick_to_spacing, tick_from_price, to_decimal
from ...errors import InputError, InvalidRangeError
from ...types import Bounds, TokenOrder


def build_bounds(lower_tick, upper_tick) -> Bounds:
    """
    Build position bounds from two ticks already aligned to the pool spacing

    Ticks are not re-rounded here.

    Args:
        lower_tick: Lower tick
        upper_tick: Upper tick

    Returns:
        Bounds with the ticks unchanged

    Raises:
        InvalidRangeError: A tick is not a finite integer, lies outside
            [MIN_TICK, MAX_TICK], or lower >= upper
    """
    ticks = []
    for tick in (lower_tick, upper_tick):
        if not is_finite_number(tick) or int(tick) != tick:
            raise InvalidRangeError.not_integer(lower_tick, upper_tick)
        ticks.append(int(tick))

    lower, upper = ticks
    if lower >= upper:
        raise InvalidRangeError.not_ordered(lower, upper)
    if lower < MIN_TICK or upper > MAX_TICK:
        raise InvalidRangeError.out_of_range(lower, upper, MIN_TICK, MAX_TICK)
    return Bounds(lower_tick=lower, upper_tick=upper)


def orient_price_range(
    lower_price: Number,
    upper_price: Number,
    order: TokenOrder,
) -> Tuple[Decimal, Decimal]:
    """
    Express a caller price range (token_b per token_a) in pool order (token1 per token0)

    When token_a is the pool's token1 the range is inverted and reciprocated:
    (lower, upper) -> (1/upper, 1/lower).
    """
    lower = to_decimal(lower_price, "price_range")
    upper = to_decimal(upper_price, "price_range")
    if lower <= 0 or upper <= 0:
        raise InputError.invalid("price_range", f"prices must be positive, got {lower_price}-{upper_price}")
    if lower >= upper:
        raise InputError.invalid("price_range", f"lower price {lower} must be below upper price {upper}")

    if order is TokenOrder.SWAPPED:
        return Decimal(1) / upper, Decimal(1) / lower
    return lower, upper


def bounds_from_price_range(
    lower_price: Number,
    upper_price: Number,
    decimals0: int,
    decimals1: int,
    tick_spacing: int,
) -> Bounds:
    """
    Derive spacing-aligned bounds covering a pool-order price range

    The lower tick is rounded down and the upper tick rounded up, so the
    resulting range always contains the requested one.

    Args:
        lower_price: Lower price of token0 in token1
        upper_price: Upper price of token0 in token1
        decimals0: Token0 decimals
        decimals1: Token1 decimals
        tick_spacing: Pool tick spacing exponent

    Returns:
        Validated Bounds
    """
    raw_lower = tick_from_price(lower_price, decimals0, decimals1)
    raw_upper = tick_from_price(upper_price, decimals0, decimals1)

    lower_tick = round_tick_to_spacing(raw_lower, tick_spacing, round_down=True)
    upper_tick = round_tick_to_spacing(raw_upper, tick_spacing, round_down=False)

    return build_bounds(lower_tick, upper_tick)
