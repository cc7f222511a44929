"""
Market Module

Provides pool state and position queries.
"""

import logging
from decimal import Decimal
from typing import Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import EkuboClient

from ..protocols.ekubo import (
    fee_fixed_to_percent,
    find_position,
    prepare_pool_key,
    price_from_sqrt_price,
    read_fees_per_liquidity,
    read_liquidity,
    read_sqrt_ratio,
    read_token_info,
    spacing_exponent_to_percent,
    tick_from_sqrt_price,
)
from ..protocols.ekubo.pools import TokenInput
from ..types import PoolInfo, PositionInfo, PositionPage, PositionRecord

logger = logging.getLogger(__name__)


class MarketModule:
    """
    Market data module

    Provides:
    - Pool state (sqrt price, human price, tick, liquidity, fee growth)
    - Position listing and lookup from the position index
    - Live position amounts and uncollected fees

    Usage:
        client = EkuboClient(reader, writer)

        info = await client.market.pool_info("ETH", "USDC", fee_percent=0.05)
        print(info.price, info.tick)

        page = await client.market.positions(state="opened")
        record = await client.market.position(12345)
        info = await client.market.position_info(12345)
    """

    def __init__(self, client: "EkuboClient"):
        """
        Initialize market module

        Args:
            client: EkuboClient instance
        """
        self._client = client

    async def pool_info(
        self,
        token_a: TokenInput,
        token_b: TokenInput,
        fee_percent: Optional[Union[Decimal, float, str]] = None,
        tick_spacing_percent: Optional[Union[Decimal, float, str]] = None,
        extension: Optional[str] = None,
    ) -> PoolInfo:
        """
        Read current pool state

        The pair is normalized to pool order, so the price is always token1
        per token0 whatever order the tokens are given in.

        Raises:
            PoolUnavailable: Pool not initialized or unreadable state
        """
        pool = await prepare_pool_key(
            self._client.tokens, token_a, token_b,
            fee_percent=fee_percent,
            tick_spacing_percent=tick_spacing_percent,
            extension=extension,
        )
        pool_key = pool.pool_key
        reader = self._client.reader

        sqrt_price = read_sqrt_ratio(pool_key, await reader.get_pool_price(pool_key))
        liquidity = read_liquidity(pool_key, await reader.get_pool_liquidity(pool_key))
        fees = read_fees_per_liquidity(pool_key, await reader.get_pool_fees_per_liquidity(pool_key))

        token0, token1 = pool.token0, pool.token1
        info = PoolInfo(
            pool_key=pool_key,
            token0=token0,
            token1=token1,
            sqrt_price=sqrt_price,
            price=price_from_sqrt_price(sqrt_price, token0.decimals, token1.decimals),
            tick=tick_from_sqrt_price(sqrt_price),
            liquidity=liquidity,
            fees_per_liquidity=fees,
        )
        logger.debug(f"Pool state: {info}")
        return info

    async def positions(
        self,
        owner: Optional[str] = None,
        page: int = 1,
        page_size: Optional[int] = None,
        state: str = "opened",
    ) -> PositionPage:
        """
        One page of positions for an owner

        Args:
            owner: Owner address (default: writer account)
            page: 1-based page number
            page_size: Entries per page (capped at 100)
            state: "opened" or "closed"

        Returns:
            PositionPage with the index's pagination block passed through
        """
        if owner is None:
            owner = self._client.owner
        return await self._client.positions.fetch_positions(
            owner, page=page, page_size=page_size, state=state,
        )

    async def position(
        self,
        position_id: int,
        owner: Optional[str] = None,
        state: str = "opened",
    ) -> PositionRecord:
        """
        Look a position up by id

        Raises:
            PositionNotFound: No record with this id for the owner
        """
        if owner is None:
            owner = self._client.owner
        return await find_position(self._client.positions, owner, position_id, state=state)

    async def position_info(
        self,
        position_id: int,
        owner: Optional[str] = None,
        state: str = "opened",
    ) -> PositionInfo:
        """
        Live position state: liquidity, token amounts and uncollected fees

        Pool key and bounds come from the index record; amounts are read
        from the positions contract.

        Raises:
            PositionNotFound: No record with this id for the owner
            PoolUnavailable: Unreadable contract response
        """
        if owner is None:
            owner = self._client.owner
        record = await find_position(self._client.positions, owner, position_id, state=state)
        pool_key = record.pool_key

        tokens = self._client.tokens
        token0 = await tokens.resolve(pool_key.token0)
        token1 = await tokens.resolve(pool_key.token1)

        raw = await self._client.reader.get_token_info(record.id, pool_key, record.bounds)
        amounts = read_token_info(pool_key, record.id, raw)

        info = PositionInfo(
            record=record,
            owner=owner,
            token0=token0,
            token1=token1,
            fee_percent=fee_fixed_to_percent(pool_key.fee),
            tick_spacing_percent=spacing_exponent_to_percent(pool_key.tick_spacing),
            **amounts,
        )
        logger.debug(f"Position state: {info!r}")
        return info
