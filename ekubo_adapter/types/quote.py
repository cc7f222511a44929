"""
Swap quote type definitions
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional

from ..errors import QuoteShapeError


class SwapMode(Enum):
    """Which side of the swap the caller fixes"""
    EXACT_IN = "exact_in"
    EXACT_OUT = "exact_out"

    @classmethod
    def from_flag(cls, is_amount_in: bool) -> "SwapMode":
        return cls.EXACT_IN if is_amount_in else cls.EXACT_OUT


def _parse_magnitude(leg: str, value: Any) -> int:
    if isinstance(value, bool):
        raise QuoteShapeError.malformed(leg, f"magnitude is a boolean: {value!r}")
    if isinstance(value, int):
        magnitude = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            magnitude = int(text, 16) if text.lower().startswith("0x") else int(text)
        except ValueError:
            raise QuoteShapeError.malformed(leg, f"magnitude is not an integer: {value!r}")
    else:
        raise QuoteShapeError.malformed(leg, f"unsupported magnitude type {type(value).__name__}")
    if magnitude < 0:
        raise QuoteShapeError.malformed(leg, f"negative magnitude {magnitude}")
    return magnitude


def _parse_sign(leg: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in ("true", "false", "0", "1"):
        return value.strip().lower() in ("true", "1")
    raise QuoteShapeError.malformed(leg, f"unreadable sign {value!r}")


@dataclass(frozen=True)
class QuoteLeg:
    """
    One token delta of a quote

    Attributes:
        magnitude: Absolute raw amount
        is_output: True when the pool pays this amount out to the trader
    """
    magnitude: int
    is_output: bool

    @classmethod
    def from_signed(cls, leg: str, raw: Any) -> "QuoteLeg":
        """
        Convert a wire {mag, sign} value into a tagged leg

        A true sign means the delta is negative from the pool's point of
        view, i.e. tokens leave the pool towards the trader.
        """
        if not isinstance(raw, Mapping):
            raise QuoteShapeError.malformed(leg, f"expected an object with mag/sign, got {raw!r}")
        if "mag" not in raw or "sign" not in raw:
            raise QuoteShapeError.malformed(leg, f"missing mag or sign in {dict(raw)!r}")
        return cls(
            magnitude=_parse_magnitude(leg, raw["mag"]),
            is_output=_parse_sign(leg, raw["sign"]),
        )

    def to_wire(self) -> dict:
        return {"mag": self.magnitude, "sign": self.is_output}


@dataclass(frozen=True)
class SwapQuote:
    """Token deltas for both pool tokens, in pool order"""
    amount0: QuoteLeg
    amount1: QuoteLeg

    @classmethod
    def from_raw(cls, raw: Any) -> "SwapQuote":
        if not isinstance(raw, Mapping):
            raise QuoteShapeError.malformed("quote", f"expected an object, got {type(raw).__name__}")
        for leg in ("amount0", "amount1"):
            if raw.get(leg) is None:
                raise QuoteShapeError.missing_leg(leg)
        return cls(
            amount0=QuoteLeg.from_signed("amount0", raw["amount0"]),
            amount1=QuoteLeg.from_signed("amount1", raw["amount1"]),
        )

    def leg(self, token0: bool) -> QuoteLeg:
        """Leg for token0 when token0 is True, else for token1"""
        return self.amount0 if token0 else self.amount1


@dataclass(frozen=True)
class ExecutionGuard:
    """
    Client-side protections for one swap

    Attributes:
        mode: Exact-in or exact-out
        sqrt_ratio_limit: Price bound the swap must not cross
        minimum_output: Minimum received (exact-in) or exact desired output (exact-out)
        input_amount: Amount of the sell token to transfer to the router
        expected_output: Quoted output before slippage (exact-in only)
    """
    mode: SwapMode
    sqrt_ratio_limit: int
    minimum_output: int
    input_amount: int
    expected_output: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "mode": self.mode.value,
            "sqrt_ratio_limit": str(self.sqrt_ratio_limit),
            "minimum_output": str(self.minimum_output),
            "input_amount": str(self.input_amount),
            "expected_output": None if self.expected_output is None else str(self.expected_output),
        }
