"""
Pool type definitions
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Tuple, TypeVar

from .common import Token, address_value, normalize_address
from ..errors import InputError

T = TypeVar("T")


@dataclass(frozen=True)
class PoolKey:
    """
    Ekubo pool identifier

    Attributes:
        token0: Lower token address
        token1: Higher token address
        fee: Fee as a 0.128 fixed-point fraction
        tick_spacing: Tick spacing exponent
        extension: Extension contract address ("0x0" when none)
    """
    token0: str
    token1: str
    fee: int
    tick_spacing: int
    extension: str = "0x0"

    def __post_init__(self):
        object.__setattr__(self, "token0", normalize_address(self.token0))
        object.__setattr__(self, "token1", normalize_address(self.token1))
        if address_value(self.token0) >= address_value(self.token1):
            raise InputError.invalid(
                "pool_key",
                f"token0 ({self.token0}) must be numerically lower than token1 ({self.token1})",
            )
        if self.fee < 0:
            raise InputError.invalid("fee", f"must be non-negative, got {self.fee}")
        if self.tick_spacing < 0:
            raise InputError.invalid("tick_spacing", f"must be non-negative, got {self.tick_spacing}")

    def to_calldata(self) -> dict:
        return {
            "token0": self.token0,
            "token1": self.token1,
            "fee": self.fee,
            "tick_spacing": self.tick_spacing,
            "extension": self.extension,
        }

    def __str__(self) -> str:
        return f"PoolKey({self.token0[:10]}.../{self.token1[:10]}..., fee={self.fee}, spacing={self.tick_spacing})"


class TokenOrder(Enum):
    """How the caller's (token_a, token_b) map onto the pool's (token0, token1)"""
    FORWARD = "forward"   # token_a is token0
    SWAPPED = "swapped"   # token_a is token1

    @classmethod
    def of(cls, token_a: str, token_b: str) -> "TokenOrder":
        a, b = address_value(token_a), address_value(token_b)
        if a == b:
            raise InputError.invalid("tokens", "token_a and token_b must differ")
        return cls.FORWARD if a < b else cls.SWAPPED

    def to_pool_order(self, value_a: T, value_b: T) -> Tuple[T, T]:
        """Reorder a pair given in caller order into (token0, token1) order"""
        if self is TokenOrder.FORWARD:
            return value_a, value_b
        return value_b, value_a


@dataclass(frozen=True)
class ResolvedPool:
    """
    A pool key together with the caller's token mapping

    For swaps token_a is the token being sold and token_b the token bought.
    """
    pool_key: PoolKey
    token_a: Token
    token_b: Token
    order: TokenOrder

    @property
    def token0(self) -> Token:
        return self.order.to_pool_order(self.token_a, self.token_b)[0]

    @property
    def token1(self) -> Token:
        return self.order.to_pool_order(self.token_a, self.token_b)[1]

    @property
    def sell_token(self) -> Token:
        return self.token_a

    @property
    def buy_token(self) -> Token:
        return self.token_b

    @property
    def is_token_a_lower(self) -> bool:
        return self.order is TokenOrder.FORWARD

    @property
    def is_selling_token0(self) -> bool:
        """Whether the sell-side token is the pool's token0"""
        return normalize_address(self.sell_token.address) == normalize_address(self.pool_key.token0)

    def to_pool_order(self, value_a: T, value_b: T) -> Tuple[T, T]:
        return self.order.to_pool_order(value_a, value_b)


@dataclass
class PoolInfo:
    """
    Snapshot of pool state

    Attributes:
        pool_key: Pool identifier
        token0: Pool token0
        token1: Pool token1
        sqrt_price: Current sqrt ratio (Q128.128)
        price: Human price of token0 in token1
        tick: Current tick derived from sqrt price
        liquidity: Active liquidity
        fees_per_liquidity: (value0, value1) fee growth accumulators
    """
    pool_key: PoolKey
    token0: Token
    token1: Token
    sqrt_price: int
    price: Decimal
    tick: int
    liquidity: int
    fees_per_liquidity: Tuple[int, int] = (0, 0)
    metadata: dict = field(default_factory=dict)

    @property
    def symbol(self) -> str:
        return f"{self.token0.symbol}/{self.token1.symbol}"

    def to_dict(self) -> dict:
        return {
            "pool": self.symbol,
            "token0": self.token0.address,
            "token1": self.token1.address,
            "sqrt_price": str(self.sqrt_price),
            "price": str(self.price),
            "tick": self.tick,
            "liquidity": str(self.liquidity),
            "fees_per_liquidity": {
                "value0": str(self.fees_per_liquidity[0]),
                "value1": str(self.fees_per_liquidity[1]),
            },
        }

    def __str__(self) -> str:
        return f"PoolInfo({self.symbol}, price={self.price:.6f}, tick={self.tick})"
