"""
Ekubo Math Utilities

Conversions between sqrt price, tick, human price, fee fraction and
tick-spacing exponent. All functions are pure.

Ekubo uses a tick base of 1.000001 (one tick = 0.0001%) and stores sqrt
prices as Q128.128 fixed point.
"""

import math
from decimal import Decimal, ROUND_CEILING, ROUND_FLOOR, ROUND_HALF_UP, localcontext
from typing import Union

from .constants import Q128, TICK_BASE, MAX_FEE
from ...errors import InputError

Number = Union[Decimal, float, int, str]

# Working precision for log/power evaluation
_PRECISION = 80


def to_decimal(value: Number, param: str) -> Decimal:
    if isinstance(value, bool):
        raise InputError.invalid(param, f"expected a number, got {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except ArithmeticError:
        raise InputError.invalid(param, f"not a number: {value!r}")
    if not result.is_finite():
        raise InputError.invalid(param, f"must be finite, got {value}")
    return result


def _floor_log_base(raw_price: Decimal) -> int:
    """floor(ln(raw_price) / ln(1.000001))"""
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        ratio = raw_price.ln() / TICK_BASE.ln()
        return int(ratio.to_integral_value(rounding=ROUND_FLOOR))


def price_from_sqrt_price(
    sqrt_price: int,
    decimals0: int,
    decimals1: int,
) -> Decimal:
    """
    Convert a Q128.128 sqrt price to a human price

    Formula: (sqrt_price / 2^128)^2 * 10^(decimals0 - decimals1)

    Args:
        sqrt_price: Pool sqrt ratio
        decimals0: Token0 decimals
        decimals1: Token1 decimals

    Returns:
        Price of token0 in token1
    """
    sqrt_price = int(sqrt_price)
    if sqrt_price <= 0:
        raise InputError.invalid("sqrt_price", f"must be positive, got {sqrt_price}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        ratio = Decimal(sqrt_price) / Decimal(Q128)
        price = ratio * ratio
        return +(price * Decimal(10) ** (decimals0 - decimals1))


def tick_from_sqrt_price(sqrt_price: int) -> int:
    """
    Convert a Q128.128 sqrt price to the tick at or below it

    Works on the raw (unscaled) price; decimals never enter here.

    Args:
        sqrt_price: Pool sqrt ratio

    Returns:
        floor(log_1.000001(price))
    """
    sqrt_price = int(sqrt_price)
    if sqrt_price <= 0:
        raise InputError.invalid("sqrt_price", f"must be positive, got {sqrt_price}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        # ln(price) = 2 * (ln(sqrt) - ln(2^128)); exact zero at sqrt == 2^128
        log_price = 2 * (Decimal(sqrt_price).ln() - Decimal(Q128).ln())
        ratio = log_price / TICK_BASE.ln()
        return int(ratio.to_integral_value(rounding=ROUND_FLOOR))


def tick_from_price(
    price: Number,
    decimals0: int,
    decimals1: int,
) -> int:
    """
    Convert a human price to the tick at or below it

    The display scaling is undone first:
    raw_price = price * 10^(decimals1 - decimals0)

    Args:
        price: Price of token0 in token1
        decimals0: Token0 decimals
        decimals1: Token1 decimals

    Returns:
        Tick index (not rounded to spacing)
    """
    price = to_decimal(price, "price")
    if price <= 0:
        raise InputError.invalid("price", f"must be positive, got {price}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        raw_price = price * Decimal(10) ** (decimals1 - decimals0)
    return _floor_log_base(raw_price)


def price_from_tick(
    tick: int,
    decimals0: int,
    decimals1: int,
) -> Decimal:
    """
    Convert a tick to a human price (display helper)

    Args:
        tick: Tick index
        decimals0: Token0 decimals
        decimals1: Token1 decimals

    Returns:
        Price of token0 in token1
    """
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return +(TICK_BASE ** int(tick) * Decimal(10) ** (decimals0 - decimals1))


def fee_percent_to_fixed(fee_percent: Number) -> int:
    """
    Convert a fee percentage to a 0.128 fixed-point fraction

    Formula: floor(fee_percent / 100 * 2^128)

    Example: 0.05 (%) -> 170141183460469231731687303715884105

    Args:
        fee_percent: Fee in percent, in [0, 100]

    Returns:
        Fee fraction as u128
    """
    fee = to_decimal(fee_percent, "fee")
    if fee < 0 or fee > 100:
        raise InputError.invalid("fee", f"percent must be in [0, 100], got {fee}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        fixed = int((fee / 100 * Decimal(Q128)).to_integral_value(rounding=ROUND_FLOOR))
    # 100% would be 2^128, one past the u128 range
    return min(fixed, MAX_FEE)


def fee_fixed_to_percent(fee_fixed: Union[int, str]) -> float:
    """
    Convert a 0.128 fixed-point fee fraction back to a percentage

    Lossy: fee_fixed_to_percent(fee_percent_to_fixed(x)) is only close to x.
    """
    if isinstance(fee_fixed, str):
        text = fee_fixed.strip()
        fee_fixed = int(text, 16) if text.lower().startswith("0x") else int(text)
    else:
        fee_fixed = int(fee_fixed)
    if fee_fixed < 0:
        raise InputError.invalid("fee", f"fixed fee must be non-negative, got {fee_fixed}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(Decimal(fee_fixed) / Decimal(Q128) * 100)


def spacing_percent_to_exponent(spacing_percent: Number) -> int:
    """
    Convert a tick spacing percentage to a tick spacing exponent

    Formula: round(log_1.000001(1 + spacing_percent / 100)), halves rounded up

    Example: 0.1 (%) -> 1000

    Args:
        spacing_percent: Tick spacing in percent

    Returns:
        Number of ticks per spacing unit
    """
    percent = to_decimal(spacing_percent, "tick_spacing")
    if percent < 0:
        raise InputError.invalid("tick_spacing", f"percent must be non-negative, got {percent}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        ratio = (1 + percent / 100).ln() / TICK_BASE.ln()
        return int(ratio.to_integral_value(rounding=ROUND_HALF_UP))


def spacing_exponent_to_percent(exponent: int) -> float:
    """
    Convert a tick spacing exponent back to a percentage

    Formula: (1.000001^exponent - 1) * 100
    """
    exponent = int(exponent)
    if exponent < 0:
        raise InputError.invalid("tick_spacing", f"exponent must be non-negative, got {exponent}")

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float((TICK_BASE ** exponent - 1) * 100)


def round_tick_to_spacing(tick: Number, spacing: int, round_down: bool) -> int:
    """
    Round a tick to a multiple of the pool's tick spacing

    Args:
        tick: Raw tick
        spacing: Tick spacing exponent; values <= 0 disable rounding
        round_down: Floor when True (lower bound), ceil when False (upper bound)

    Returns:
        Tick that is an exact multiple of spacing
    """
    if spacing <= 0:
        return tick

    if isinstance(tick, int):
        if round_down:
            return tick // spacing * spacing
        return -(-tick // spacing) * spacing

    value = to_decimal(tick, "tick")
    quotient = (value / spacing).to_integral_value(
        rounding=ROUND_FLOOR if round_down else ROUND_CEILING
    )
    return int(quotient) * spacing


def is_valid_tick(tick: int, spacing: int) -> bool:
    """Check a tick is an integer multiple of spacing (any tick when spacing <= 0)"""
    if not isinstance(tick, int) or isinstance(tick, bool):
        return False
    if spacing <= 0:
        return True
    return tick % spacing == 0


def is_finite_number(value) -> bool:
    """True for finite ints/floats/Decimals (bools excluded)"""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, Decimal):
        return value.is_finite()
    return False
