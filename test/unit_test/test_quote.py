"""
Swap Quote Unit Tests

Tests sqrt ratio limits, quote leg extraction and execution guards.
"""

import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from ekubo_adapter.errors import ErrorCode, InputError, QuoteShapeError
from ekubo_adapter.protocols.ekubo.constants import MIN_SQRT_RATIO, MAX_SQRT_RATIO, Q128
from ekubo_adapter.protocols.ekubo.quote import (
    build_route_node,
    build_token_amount,
    calculate_minimum_output,
    compute_execution_guard,
    exact_output_minimum,
    extract_expected_output,
    extract_required_input,
    sqrt_ratio_limit,
)
from ekubo_adapter.types import PoolKey, SwapMode, SwapQuote, TokenOrder

ETH = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"
USDC = "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8"


def leg(mag, sign):
    return {"mag": mag, "sign": sign}


class TestSqrtRatioLimit:
    """Tests for sqrt_ratio_limit"""

    def test_selling_token0_moves_down(self):
        limit = sqrt_ratio_limit(Q128, 0.5, is_selling_token0=True)
        assert MIN_SQRT_RATIO <= limit < Q128
        assert abs(limit / Q128 - float(Decimal("0.995").sqrt())) < 1e-12

    def test_selling_token1_moves_up(self):
        limit = sqrt_ratio_limit(Q128, 0.5, is_selling_token0=False)
        assert Q128 < limit <= MAX_SQRT_RATIO
        assert abs(limit / Q128 - float(Decimal("1.005").sqrt())) < 1e-12

    def test_full_slippage_falls_back_to_min(self):
        assert sqrt_ratio_limit(Q128, 100, is_selling_token0=True) == MIN_SQRT_RATIO

    def test_zero_slippage_falls_back_to_global_bounds(self):
        # Candidate equals current, which is outside the open interval
        assert sqrt_ratio_limit(Q128, 0, is_selling_token0=True) == MIN_SQRT_RATIO
        assert sqrt_ratio_limit(Q128, 0, is_selling_token0=False) == MAX_SQRT_RATIO

    def test_near_max_clamps(self):
        assert sqrt_ratio_limit(MAX_SQRT_RATIO - 1, 1, is_selling_token0=False) == MAX_SQRT_RATIO

    def test_near_min_clamps(self):
        assert sqrt_ratio_limit(MIN_SQRT_RATIO + 1, 1, is_selling_token0=True) == MIN_SQRT_RATIO

    def test_limit_stays_in_range(self):
        currents = [MIN_SQRT_RATIO + 1, Q128 // 1000, Q128, Q128 * 1000, MAX_SQRT_RATIO - 1]
        slippages = [0, "0.01", 0.5, 5, 50, 100]
        for current in currents:
            for slippage in slippages:
                down = sqrt_ratio_limit(current, slippage, is_selling_token0=True)
                up = sqrt_ratio_limit(current, slippage, is_selling_token0=False)
                assert MIN_SQRT_RATIO <= down <= current
                assert current <= up <= MAX_SQRT_RATIO

    @pytest.mark.parametrize("slippage", [-0.1, 100.5, "abc"])
    def test_invalid_slippage(self, slippage):
        with pytest.raises(InputError):
            sqrt_ratio_limit(Q128, slippage, is_selling_token0=True)

    def test_invalid_price(self):
        with pytest.raises(InputError):
            sqrt_ratio_limit(0, 0.5, is_selling_token0=True)


class TestExactIn:
    """Tests for exact-input extraction and minimum output"""

    def test_expected_output_token_a_lower(self):
        quote = {"amount0": leg(1000, False), "amount1": leg(2990, True)}
        assert extract_expected_output(quote, is_token_a_lower=True) == 2990

    def test_expected_output_token_a_higher(self):
        quote = {"amount0": leg(500, True), "amount1": leg(1000, False)}
        assert extract_expected_output(quote, is_token_a_lower=False) == 500

    def test_wire_strings_accepted(self):
        quote = {"amount0": leg("1000", "false"), "amount1": leg("0xbae", "true")}
        assert extract_expected_output(quote, is_token_a_lower=True) == 2990

    def test_output_flagged_as_input_rejected(self):
        quote = {"amount0": leg(1000, False), "amount1": leg(2990, False)}
        with pytest.raises(QuoteShapeError) as exc_info:
            extract_expected_output(quote, is_token_a_lower=True)
        assert exc_info.value.code == ErrorCode.QUOTE_SIGN_UNEXPECTED

    def test_zero_output_allowed(self):
        quote = {"amount0": leg(1000, False), "amount1": leg(0, False)}
        assert extract_expected_output(quote, is_token_a_lower=True) == 0

    @pytest.mark.parametrize("raw", [
        {"amount0": leg(1, False)},
        {"amount0": leg(1, False), "amount1": None},
    ])
    def test_missing_leg(self, raw):
        with pytest.raises(QuoteShapeError) as exc_info:
            extract_expected_output(raw, is_token_a_lower=True)
        assert exc_info.value.code == ErrorCode.QUOTE_MISSING_LEG

    @pytest.mark.parametrize("bad_leg", [
        leg("abc", True),
        leg(-5, True),
        leg(True, True),
        leg(10, "maybe"),
        {"mag": 10},
        10,
    ])
    def test_malformed_leg(self, bad_leg):
        with pytest.raises(QuoteShapeError) as exc_info:
            extract_expected_output({"amount0": leg(1, False), "amount1": bad_leg}, is_token_a_lower=True)
        assert exc_info.value.code == ErrorCode.QUOTE_MALFORMED

    def test_minimum_output(self):
        assert calculate_minimum_output(1000, 0.5) == 995
        assert calculate_minimum_output(2990, 0.5) == 2975
        assert calculate_minimum_output(1, 0.5) == 0
        assert calculate_minimum_output(1000, 0) == 1000
        assert calculate_minimum_output(1000, 100) == 0

    def test_minimum_output_large_values_exact(self):
        assert calculate_minimum_output(10 ** 30, 0.3) == 997 * 10 ** 27

    def test_minimum_output_rejects_negative(self):
        with pytest.raises(InputError):
            calculate_minimum_output(-1, 0.5)


class TestExactOut:
    """Tests for exact-output extraction"""

    def test_required_input_uses_magnitude(self):
        quote = {"amount0": leg(1234, False), "amount1": leg(1000, True)}
        assert extract_required_input(quote, is_token_in_token0=True) == 1234
        flipped = {"amount0": leg(1234, True), "amount1": leg(1000, True)}
        assert extract_required_input(flipped, is_token_in_token0=True) == 1234

    def test_required_input_token1(self):
        quote = {"amount0": leg(500, True), "amount1": leg(1500, False)}
        assert extract_required_input(quote, is_token_in_token0=False) == 1500

    def test_minimum_is_desired_amount(self):
        for desired in (0, 1, 1000, 10 ** 30):
            assert exact_output_minimum(desired) == desired


class TestExecutionGuard:
    """Tests for compute_execution_guard"""

    def test_exact_in_forward(self):
        quote = SwapQuote.from_raw({"amount0": leg(1000, False), "amount1": leg(2990, True)})
        guard = compute_execution_guard(SwapMode.EXACT_IN, quote, 1000, 0.5, 123, TokenOrder.FORWARD)
        assert guard.mode is SwapMode.EXACT_IN
        assert guard.sqrt_ratio_limit == 123
        assert guard.input_amount == 1000
        assert guard.expected_output == 2990
        assert guard.minimum_output == 2975

    def test_exact_in_swapped(self):
        quote = {"amount0": leg(497, True), "amount1": leg(1000, False)}
        guard = compute_execution_guard(SwapMode.EXACT_IN, quote, 1000, 1, 456, TokenOrder.SWAPPED)
        assert guard.expected_output == 497
        assert guard.minimum_output == 492

    def test_exact_out_swapped(self):
        quote = {"amount0": leg(500, True), "amount1": leg(1500, False)}
        guard = compute_execution_guard(SwapMode.EXACT_OUT, quote, 500, 50, 789, TokenOrder.SWAPPED)
        assert guard.input_amount == 1500
        # Slippage never reduces an exact output
        assert guard.minimum_output == 500
        assert guard.expected_output is None

    def test_to_dict(self):
        quote = {"amount0": leg(1000, False), "amount1": leg(2990, True)}
        guard = compute_execution_guard(SwapMode.EXACT_IN, quote, 1000, 0.5, 123, TokenOrder.FORWARD)
        assert guard.to_dict() == {
            "mode": "exact_in",
            "sqrt_ratio_limit": "123",
            "minimum_output": "2975",
            "input_amount": "1000",
            "expected_output": "2990",
        }


class TestRouterShapes:
    """Tests for router request builders"""

    def test_route_node(self):
        pool_key = PoolKey(token0=ETH, token1=USDC, fee=170141183460469231731687303715884105, tick_spacing=1000)
        node = build_route_node(pool_key, 42)
        assert node["sqrt_ratio_limit"] == 42
        assert node["skip_ahead"] == 0
        assert node["pool_key"]["token0"] == ETH
        assert node["pool_key"]["tick_spacing"] == 1000

    def test_token_amount_sign(self):
        exact_in = build_token_amount(ETH, 5, is_amount_in=True)
        exact_out = build_token_amount(USDC, 7, is_amount_in=False)
        assert exact_in == {"token": ETH, "amount": {"mag": 5, "sign": False}}
        assert exact_out == {"token": USDC, "amount": {"mag": 7, "sign": True}}
