"""
Collaborator interfaces

Chain access, signing and token metadata live outside this package.
Anything matching these protocols can be passed to the modules.
"""

from typing import Any, List, Mapping, Optional, Protocol, Sequence

from ...types import Bounds, Call, PoolKey, PositionPage, Token


class Receipt(Protocol):
    """Confirmed transaction receipt"""

    events: List[Mapping[str, Any]]

    def is_success(self) -> bool:
        ...


class ChainReader(Protocol):
    """Read-only access to Ekubo core and router"""

    async def get_pool_price(self, pool_key: PoolKey) -> Mapping[str, Any]:
        """Returns {"sqrt_ratio": int, ...}"""
        ...

    async def get_pool_liquidity(self, pool_key: PoolKey) -> int:
        ...

    async def get_pool_fees_per_liquidity(self, pool_key: PoolKey) -> Mapping[str, Any]:
        """Returns {"value0": int, "value1": int}"""
        ...

    async def quote_swap(self, route_node: dict, token_amount: dict) -> Mapping[str, Any]:
        """Returns {"amount0": {"mag", "sign"}, "amount1": {"mag", "sign"}}"""
        ...

    async def get_token_info(self, position_id: int, pool_key: PoolKey, bounds: Bounds) -> Mapping[str, Any]:
        """Positions contract read; returns {"liquidity", "amount0", "amount1", "fees0", "fees1"}"""
        ...


class ChainWriter(Protocol):
    """Account that submits multicalls"""

    address: str

    async def execute(self, calls: Sequence[Call]) -> Mapping[str, Any]:
        """Returns {"transaction_hash": str}"""
        ...

    async def wait_for_transaction(self, transaction_hash: str) -> Receipt:
        ...


class PositionIndex(Protocol):
    """Paginated position lookup by owner"""

    async def fetch_positions(
        self,
        owner: str,
        page: int = 1,
        page_size: Optional[int] = None,
        state: str = "opened",
    ) -> PositionPage:
        ...


class TokenMetadata(Protocol):
    """Symbol/address to token resolution"""

    async def resolve(self, symbol_or_address: str) -> Token:
        ...

