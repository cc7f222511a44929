"""
Test Ekubo Bounds Module

Tests for tick bound validation and price-range derived bounds.
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from ekubo_adapter.errors import ErrorCode, InputError, InvalidRangeError
from ekubo_adapter.protocols.ekubo.bounds import (
    build_bounds,
    bounds_from_price_range,
    orient_price_range,
)
from ekubo_adapter.protocols.ekubo.constants import MAX_TICK, MIN_TICK
from ekubo_adapter.protocols.ekubo.math import price_from_tick
from ekubo_adapter.types import Bounds, TokenOrder


class TestBuildBounds:
    """Tests for build_bounds"""

    def test_valid_pair_unchanged(self):
        bounds = build_bounds(-1000, 2000)
        assert bounds == Bounds(lower_tick=-1000, upper_tick=2000)

    def test_does_not_round(self):
        # Ticks off any spacing grid pass through untouched
        bounds = build_bounds(-1234, 5678)
        assert (bounds.lower_tick, bounds.upper_tick) == (-1234, 5678)

    def test_integral_float_accepted(self):
        bounds = build_bounds(10.0, 20.0)
        assert bounds.lower_tick == 10 and isinstance(bounds.lower_tick, int)

    def test_equal_ticks_rejected(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            build_bounds(10, 10)
        assert exc_info.value.code == ErrorCode.INVALID_RANGE
        assert "Lower tick (10) must be less than upper tick (10)" in str(exc_info.value)

    def test_reversed_ticks_rejected(self):
        with pytest.raises(InvalidRangeError) as exc_info:
            build_bounds(20, 10)
        assert exc_info.value.lower_tick == 20
        assert exc_info.value.upper_tick == 10

    @pytest.mark.parametrize("lower,upper", [
        (1.5, 10),
        (0, float("inf")),
        (float("nan"), 10),
        ("0", 10),
        (None, 10),
        (True, 10),
    ])
    def test_non_integer_rejected(self, lower, upper):
        with pytest.raises(InvalidRangeError):
            build_bounds(lower, upper)

    def test_invalid_range_is_input_error(self):
        with pytest.raises(InputError):
            build_bounds(5, 1)

    def test_ordering_invariant(self):
        values = [-88722000, -1000, -1, 0, 1, 1000, 88722000]
        for lower in values:
            for upper in values:
                if lower >= upper:
                    with pytest.raises(InvalidRangeError):
                        build_bounds(lower, upper)
                else:
                    bounds = build_bounds(lower, upper)
                    assert (bounds.lower_tick, bounds.upper_tick) == (lower, upper)

    def test_ticks_outside_protocol_range_rejected(self):
        assert build_bounds(MIN_TICK, MAX_TICK) == Bounds(MIN_TICK, MAX_TICK)
        with pytest.raises(InvalidRangeError):
            build_bounds(MIN_TICK - 1, 0)
        with pytest.raises(InvalidRangeError):
            build_bounds(0, MAX_TICK + 1)


class TestOrientPriceRange:
    """Tests for orient_price_range"""

    def test_forward_unchanged(self):
        lower, upper = orient_price_range(2500, 3500, TokenOrder.FORWARD)
        assert (lower, upper) == (Decimal(2500), Decimal(3500))

    def test_swapped_inverts_and_reciprocates(self):
        lower, upper = orient_price_range(2000, 4000, TokenOrder.SWAPPED)
        assert lower == Decimal("0.00025")
        assert upper == Decimal("0.0005")
        assert lower < upper

    @pytest.mark.parametrize("lower,upper", [
        (0, 10),
        (-1, 10),
        (10, 10),
        (20, 10),
        ("inf", 10),
    ])
    def test_invalid_range_rejected(self, lower, upper):
        with pytest.raises(InputError):
            orient_price_range(lower, upper, TokenOrder.FORWARD)

    def test_non_numeric_price_is_input_error(self):
        with pytest.raises(InputError) as exc_info:
            orient_price_range("abc", 10, TokenOrder.FORWARD)
        assert exc_info.value.code == ErrorCode.INPUT_INVALID
        assert exc_info.value.param == "price_range"


class TestBoundsFromPriceRange:
    """Tests for bounds_from_price_range"""

    def test_unit_decimals(self):
        # tick(1) = 0, tick(2) = 693147 -> rounded up to 694000
        bounds = bounds_from_price_range(1, 2, 18, 18, 1000)
        assert bounds == Bounds(lower_tick=0, upper_tick=694000)

    def test_range_inside_one_spacing_widens(self):
        # Raw ticks 99 and 199 round out to one full spacing
        bounds = bounds_from_price_range("1.0001", "1.0002", 18, 18, 1000)
        assert bounds == Bounds(lower_tick=0, upper_tick=1000)

    def test_realized_range_contains_requested(self):
        # ETH (18) / USDC (6)
        bounds = bounds_from_price_range(2500, 3500, 18, 6, 1000)
        assert bounds.lower_tick % 1000 == 0
        assert bounds.upper_tick % 1000 == 0
        assert price_from_tick(bounds.lower_tick, 18, 6) <= 2500
        assert price_from_tick(bounds.upper_tick, 18, 6) >= 3500

    def test_swapped_pair_orients_first(self):
        # Caller quotes USDC -> ETH price; oriented range matches ETH/USDC
        lower, upper = orient_price_range(Decimal(1) / 3500, Decimal(1) / 2500, TokenOrder.SWAPPED)
        bounds = bounds_from_price_range(lower, upper, 18, 6, 1000)
        direct = bounds_from_price_range(2500, 3500, 18, 6, 1000)
        assert bounds == direct

    def test_zero_spacing_collapsed_range_rejected(self):
        # Without rounding two prices inside one tick give equal ticks
        with pytest.raises(InvalidRangeError):
            bounds_from_price_range("1", "1.0000001", 18, 18, 0)
