"""
Position type definitions
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .common import Token
from .pool import PoolKey


def encode_i129(value: int) -> Dict[str, object]:
    """Encode a signed integer as Ekubo's i129 {mag, sign} (sign = negative)"""
    return {"mag": abs(value), "sign": value < 0}


@dataclass(frozen=True)
class Bounds:
    """
    Position tick range

    Attributes:
        lower_tick: Lower tick (inclusive)
        upper_tick: Upper tick (exclusive)

    Build through protocols.ekubo.bounds.build_bounds, which validates ordering.
    """
    lower_tick: int
    upper_tick: int

    @property
    def width(self) -> int:
        return self.upper_tick - self.lower_tick

    def contains(self, tick: int) -> bool:
        return self.lower_tick <= tick < self.upper_tick

    def to_calldata(self) -> dict:
        return {
            "lower": encode_i129(self.lower_tick),
            "upper": encode_i129(self.upper_tick),
        }

    def __str__(self) -> str:
        return f"[{self.lower_tick}, {self.upper_tick})"


@dataclass
class PositionRecord:
    """
    Position as reported by the position index

    Attributes:
        id: Position NFT token id
        pool_key: Pool the position belongs to
        bounds: Tick range of the position
        liquidity: Current liquidity
        pool_state: Optional pool snapshot returned alongside the record
    """
    id: int
    pool_key: PoolKey
    bounds: Bounds
    liquidity: int = 0
    pool_state: Optional[dict] = None
    metadata: dict = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.liquidity == 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pool_key": self.pool_key.to_calldata(),
            "bounds": {"lower": self.bounds.lower_tick, "upper": self.bounds.upper_tick},
            "liquidity": str(self.liquidity),
            "pool_state": self.pool_state,
        }

    def __repr__(self) -> str:
        return f"PositionRecord(id={self.id}, bounds={self.bounds}, liquidity={self.liquidity})"


@dataclass
class PositionPage:
    """One page of position index results"""
    records: List[PositionRecord] = field(default_factory=list)
    pagination: dict = field(default_factory=dict)

    @property
    def page(self) -> int:
        return int(self.pagination.get("page", 1))

    @property
    def total_pages(self) -> Optional[int]:
        total = self.pagination.get("totalPages", self.pagination.get("total_pages"))
        return int(total) if total is not None else None

    @property
    def has_more(self) -> bool:
        total = self.total_pages
        if total is None:
            return False
        return self.page < total

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class PositionInfo:
    """
    Live position state read from the positions contract

    Attributes:
        record: Index record the read was made for
        owner: Owner address the record was looked up under
        token0: Pool token0
        token1: Pool token1
        liquidity: Current liquidity
        amount0: Token0 the liquidity is worth at the current price (raw)
        amount1: Token1 the liquidity is worth at the current price (raw)
        fees0: Uncollected token0 fees (raw)
        fees1: Uncollected token1 fees (raw)
        fee_percent: Pool fee tier in percent
        tick_spacing_percent: Pool tick spacing in percent
    """
    record: PositionRecord
    owner: str
    token0: Token
    token1: Token
    liquidity: int
    amount0: int
    amount1: int
    fees0: int
    fees1: int
    fee_percent: float = 0.0
    tick_spacing_percent: float = 0.0

    @property
    def id(self) -> int:
        return self.record.id

    @property
    def bounds(self) -> Bounds:
        return self.record.bounds

    @property
    def has_uncollected_fees(self) -> bool:
        return self.fees0 > 0 or self.fees1 > 0

    def to_dict(self) -> dict:
        return {
            "position_id": self.id,
            "owner_address": self.owner,
            "liquidity": str(self.liquidity),
            "amount0": str(self.amount0),
            "amount1": str(self.amount1),
            "fees0": str(self.fees0),
            "fees1": str(self.fees1),
            "token0": self.token0.symbol or self.token0.address,
            "token1": self.token1.symbol or self.token1.address,
            "lower_tick": self.bounds.lower_tick,
            "upper_tick": self.bounds.upper_tick,
            "pool_fee": self.fee_percent,
            "tick_spacing": self.tick_spacing_percent,
        }

    def __repr__(self) -> str:
        return (
            f"PositionInfo(id={self.id}, liquidity={self.liquidity}, "
            f"amounts=({self.amount0}, {self.amount1}), fees=({self.fees0}, {self.fees1}))"
        )
