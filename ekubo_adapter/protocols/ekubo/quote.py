"""
Ekubo swap quote handling

Reads router quotes and turns them into the two client-side swap
protections: a sqrt ratio limit and an output amount guard.

Quote legs follow Ekubo's delta convention: a true sign is a negative
delta for the pool, i.e. tokens paid out to the trader.
"""

import logging
from decimal import Decimal, ROUND_FLOOR, localcontext
from typing import Any, Mapping, Union

from .constants import MIN_SQRT_RATIO, MAX_SQRT_RATIO
from .math import Number, to_decimal
from ...errors import InputError, QuoteShapeError
from ...types import ExecutionGuard, PoolKey, SwapMode, SwapQuote, TokenOrder

logger = logging.getLogger(__name__)

_PRECISION = 100

QuoteLike = Union[SwapQuote, Mapping[str, Any]]


def _as_quote(quote: QuoteLike) -> SwapQuote:
    if isinstance(quote, SwapQuote):
        return quote
    return SwapQuote.from_raw(quote)


def _slippage(slippage_percent: Number) -> Decimal:
    slippage = to_decimal(slippage_percent, "slippage")
    if slippage < 0 or slippage > 100:
        raise InputError.invalid("slippage", f"percent must be in [0, 100], got {slippage}")
    return slippage


# =========================================================================
# Price limit
# =========================================================================

def sqrt_ratio_limit(
    current_sqrt_price: int,
    slippage_percent: Number,
    is_selling_token0: bool,
) -> int:
    """
    Sqrt ratio the swap must not cross

    Selling token0 pushes the price down, so the limit is
    current * sqrt(1 - slippage) and must lie in [MIN_SQRT_RATIO, current).
    Selling token1 pushes the price up: current * sqrt(1 + slippage) in
    (current, MAX_SQRT_RATIO]. A candidate outside its interval falls back
    to the protocol-wide bound on that side.

    Args:
        current_sqrt_price: Freshly read pool sqrt ratio
        slippage_percent: Tolerance in percent (0.5 = 0.5%)
        is_selling_token0: Whether the sell-side token is the pool's token0

    Returns:
        Sqrt ratio limit
    """
    current = int(current_sqrt_price)
    if current <= 0:
        raise InputError.invalid("sqrt_price", f"must be positive, got {current}")
    slippage = _slippage(slippage_percent)

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        if is_selling_token0:
            multiplier = (1 - slippage / 100).sqrt()
        else:
            multiplier = (1 + slippage / 100).sqrt()
        candidate = int((Decimal(current) * multiplier).to_integral_value(rounding=ROUND_FLOOR))

    if is_selling_token0:
        if MIN_SQRT_RATIO <= candidate < current:
            return candidate
        return MIN_SQRT_RATIO

    if current < candidate <= MAX_SQRT_RATIO:
        return candidate
    return MAX_SQRT_RATIO


# =========================================================================
# Exact input
# =========================================================================

def extract_expected_output(quote: QuoteLike, is_token_a_lower: bool) -> int:
    """
    Quoted output for an exact-input swap selling token A

    Selling the lower token (token0) receives token1 and vice versa.

    Raises:
        QuoteShapeError: The output leg is missing, malformed, or flagged as an input
    """
    quote = _as_quote(quote)
    leg_name = "amount1" if is_token_a_lower else "amount0"
    leg = quote.leg(token0=not is_token_a_lower)
    if leg.magnitude and not leg.is_output:
        raise QuoteShapeError.unexpected_sign(leg_name)
    return leg.magnitude


def calculate_minimum_output(expected_output: int, slippage_percent: Number) -> int:
    """
    Minimum acceptable output after slippage

    Formula: floor(expected_output * (1 - slippage / 100))
    """
    expected = int(expected_output)
    if expected < 0:
        raise InputError.invalid("expected_output", f"must be non-negative, got {expected}")
    slippage = _slippage(slippage_percent)

    with localcontext() as ctx:
        ctx.prec = _PRECISION
        minimum = Decimal(expected) * (1 - slippage / 100)
        return int(minimum.to_integral_value(rounding=ROUND_FLOOR))


# =========================================================================
# Exact output
# =========================================================================

def extract_required_input(quote: QuoteLike, is_token_in_token0: bool) -> int:
    """
    Input the router needs for an exact-output swap

    The sign on the input leg depends on token ordering, so only its
    magnitude is used.
    """
    quote = _as_quote(quote)
    return quote.leg(token0=is_token_in_token0).magnitude


def exact_output_minimum(desired_output: int) -> int:
    """Amount guard for exact-output swaps: the desired output, unreduced"""
    desired = int(desired_output)
    if desired < 0:
        raise InputError.invalid("amount", f"must be non-negative, got {desired}")
    return desired


# =========================================================================
# Guards and request shapes
# =========================================================================

def compute_execution_guard(
    mode: SwapMode,
    quote: QuoteLike,
    amount: int,
    slippage_percent: Number,
    limit: int,
    order: TokenOrder,
) -> ExecutionGuard:
    """
    Combine a quote with the caller's parameters into swap protections

    Args:
        mode: Exact-in or exact-out
        quote: Router quote for the route and amount
        amount: Raw amount the caller fixed (input for exact-in, output for exact-out)
        slippage_percent: Tolerance in percent
        limit: Sqrt ratio limit already computed for this swap
        order: Mapping of (sell, buy) onto (token0, token1)

    Returns:
        ExecutionGuard
    """
    quote = _as_quote(quote)
    selling_token0 = order is TokenOrder.FORWARD

    if mode is SwapMode.EXACT_IN:
        expected = extract_expected_output(quote, is_token_a_lower=selling_token0)
        minimum = calculate_minimum_output(expected, slippage_percent)
        logger.debug(f"Exact-in guard: expected={expected}, minimum={minimum}, limit={limit}")
        return ExecutionGuard(
            mode=mode,
            sqrt_ratio_limit=limit,
            minimum_output=minimum,
            input_amount=int(amount),
            expected_output=expected,
        )

    required = extract_required_input(quote, is_token_in_token0=selling_token0)
    minimum = exact_output_minimum(amount)
    logger.debug(f"Exact-out guard: required_input={required}, output={minimum}, limit={limit}")
    return ExecutionGuard(
        mode=mode,
        sqrt_ratio_limit=limit,
        minimum_output=minimum,
        input_amount=required,
    )


def build_route_node(pool_key: PoolKey, limit: int) -> dict:
    """Single-hop router route node"""
    return {
        "pool_key": pool_key.to_calldata(),
        "sqrt_ratio_limit": int(limit),
        "skip_ahead": 0,
    }


def build_token_amount(token: str, amount: int, is_amount_in: bool) -> dict:
    """
    Router token amount

    A false sign fixes the input (exact-in); a true sign asks to receive
    the amount (exact-out).
    """
    return {
        "token": token,
        "amount": {"mag": int(amount), "sign": not is_amount_in},
    }
