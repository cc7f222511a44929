"""
Liquidity Module

Create, add to and withdraw from Ekubo positions.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import EkuboClient

from ..config import config
from ..errors import ExecutionError, InputError
from ..infra import CorrelationContext, execute_calls, log_with_correlation
from ..protocols.ekubo import (
    bounds_from_price_range,
    extract_position_id_from_receipt,
    find_position,
    orient_price_range,
    prepare_pool_key,
)
from ..protocols.ekubo import calls as ekubo_calls
from ..protocols.ekubo.pools import TokenInput
from ..types import Bounds, Call, PoolKey, PositionRecord, Token, TxResult

logger = logging.getLogger(__name__)

Amount = Union[Decimal, float, int, str]


@dataclass
class LiquidityPlan:
    """
    Ordered calls for one lifecycle operation, before execution

    Attributes:
        operation: "create", "add" or "withdraw"
        pool_key: Target pool
        bounds: Position tick range
        calls: Calls in submission order
        position_id: Existing position id (add/withdraw)
        amount0: Raw token0 amount transferred (create/add)
        amount1: Raw token1 amount transferred (create/add)
        liquidity: Liquidity withdrawn (withdraw)
    """
    operation: str
    pool_key: PoolKey
    bounds: Bounds
    calls: List[Call] = field(default_factory=list)
    position_id: Optional[int] = None
    amount0: int = 0
    amount1: int = 0
    liquidity: int = 0

    def to_dict(self) -> dict:
        return {
            "operation": self.operation,
            "position_id": self.position_id,
            "lower_tick": self.bounds.lower_tick,
            "upper_tick": self.bounds.upper_tick,
            "token0": self.pool_key.token0,
            "token1": self.pool_key.token1,
            "amount0": str(self.amount0),
            "amount1": str(self.amount1),
            "liquidity": str(self.liquidity),
            "calls": [call.to_dict() for call in self.calls],
        }


class LiquidityModule:
    """
    Liquidity operations module

    Provides position lifecycle management:
    - Create a position from a price range
    - Add liquidity to an existing position
    - Withdraw liquidity and/or collect fees

    Every operation has a plan_* counterpart that returns the calls
    without submitting them.

    Usage:
        client = EkuboClient(reader, writer)

        # Create position (price of ETH in USDC)
        result = await client.lp.create_position(
            "ETH", "USDC", amount_a="0.1", amount_b="300",
            lower_price=2500, upper_price=3500,
        )
        position_id = result.data["position_id"]

        # Top up
        result = await client.lp.add_liquidity(position_id, "0.05", "150")

        # Collect fees only
        result = await client.lp.withdraw_liquidity(position_id, fees_only=True)
    """

    def __init__(self, client: "EkuboClient"):
        """
        Initialize liquidity module

        Args:
            client: EkuboClient instance
        """
        self._client = client

    @property
    def owner(self) -> str:
        """Owner account address"""
        return self._client.owner

    @property
    def positions_address(self) -> str:
        return self._client.address_of("positions")

    # =========================================================================
    # Create
    # =========================================================================

    async def plan_create(
        self,
        token_a: TokenInput,
        token_b: TokenInput,
        amount_a: Amount,
        amount_b: Amount,
        lower_price: Amount,
        upper_price: Amount,
        fee_percent: Optional[Amount] = None,
        tick_spacing_percent: Optional[Amount] = None,
        extension: Optional[str] = None,
    ) -> LiquidityPlan:
        """
        Build the calls that mint a new position

        Prices are token_b per token_a; amounts are human units of each token.

        Returns:
            LiquidityPlan with [transfer(token0), transfer(token1), mint_and_deposit_and_clear_both]
        """
        pool = await prepare_pool_key(
            self._client.tokens, token_a, token_b,
            fee_percent=fee_percent,
            tick_spacing_percent=tick_spacing_percent,
            extension=extension,
        )
        pool_key = pool.pool_key

        raw_a = pool.token_a.raw_amount(amount_a)
        raw_b = pool.token_b.raw_amount(amount_b)
        amount0, amount1 = pool.to_pool_order(raw_a, raw_b)

        lower, upper = orient_price_range(lower_price, upper_price, pool.order)
        bounds = bounds_from_price_range(
            lower, upper,
            pool.token0.decimals, pool.token1.decimals,
            pool_key.tick_spacing,
        )
        logger.debug(
            f"Create plan {pool.token0.symbol}/{pool.token1.symbol}: "
            f"prices {lower}-{upper} -> ticks {bounds}, amounts {amount0}/{amount1}"
        )

        positions = self.positions_address
        return LiquidityPlan(
            operation="create",
            pool_key=pool_key,
            bounds=bounds,
            calls=[
                ekubo_calls.transfer(pool_key.token0, positions, amount0),
                ekubo_calls.transfer(pool_key.token1, positions, amount1),
                ekubo_calls.mint_and_deposit_and_clear_both(positions, pool_key, bounds),
            ],
            amount0=amount0,
            amount1=amount1,
        )

    async def create_position(
        self,
        token_a: TokenInput,
        token_b: TokenInput,
        amount_a: Amount,
        amount_b: Amount,
        lower_price: Amount,
        upper_price: Amount,
        fee_percent: Optional[Amount] = None,
        tick_spacing_percent: Optional[Amount] = None,
        extension: Optional[str] = None,
    ) -> TxResult:
        """
        Mint a new position and deposit both tokens

        Returns:
            TxResult; on success data holds position_id, lower_tick, upper_tick,
            token0, token1, amount0, amount1. A confirmed transaction whose
            receipt carries no position id fails with POSITION_ID_MISSING and
            keeps the transaction hash.
        """
        operation = f"create_position({token_a}/{token_b})"
        with CorrelationContext("lp_create"):
            try:
                plan = await self.plan_create(
                    token_a, token_b, amount_a, amount_b, lower_price, upper_price,
                    fee_percent=fee_percent,
                    tick_spacing_percent=tick_spacing_percent,
                    extension=extension,
                )
                tx_hash, receipt = await execute_calls(self._client.writer, plan.calls, operation)

                position_id = extract_position_id_from_receipt(
                    receipt, self._client.address_of("positions_nft")
                )
                if position_id is None:
                    raise ExecutionError.position_id_missing(tx_hash)

                log_with_correlation(
                    logging.INFO, f"Created position {position_id} {plan.bounds}", operation, logger,
                    position_id=position_id,
                )
                return TxResult.success(tx_hash, position_id=position_id, **self._summary(plan))
            except Exception as e:
                log_with_correlation(logging.ERROR, f"Failed: {e}", operation, logger)
                return TxResult.from_exception(e)

    # =========================================================================
    # Add
    # =========================================================================

    async def plan_add(
        self,
        position_id: int,
        amount0: Amount,
        amount1: Amount,
        state: str = "opened",
    ) -> LiquidityPlan:
        """
        Build the calls that deposit into an existing position

        Pool key and bounds come from the position index record, never from
        the caller. Amounts are human units in pool order (token0, token1).

        Returns:
            LiquidityPlan with [transfer(token0), transfer(token1), deposit, clear(token0), clear(token1)]
        """
        record = await self._find(position_id, state)
        pool_key = record.pool_key
        token0, token1 = await self._pool_tokens(pool_key)

        raw0 = token0.raw_amount(amount0)
        raw1 = token1.raw_amount(amount1)
        if raw0 == 0 and raw1 == 0:
            raise InputError.invalid("amount", "at least one of amount0/amount1 must be positive")

        positions = self.positions_address
        return LiquidityPlan(
            operation="add",
            pool_key=pool_key,
            bounds=record.bounds,
            calls=[
                ekubo_calls.transfer(pool_key.token0, positions, raw0),
                ekubo_calls.transfer(pool_key.token1, positions, raw1),
                ekubo_calls.deposit(positions, record.id, pool_key, record.bounds),
                ekubo_calls.clear(positions, pool_key.token0),
                ekubo_calls.clear(positions, pool_key.token1),
            ],
            position_id=record.id,
            amount0=raw0,
            amount1=raw1,
        )

    async def add_liquidity(
        self,
        position_id: int,
        amount0: Amount,
        amount1: Amount,
        state: str = "opened",
    ) -> TxResult:
        """Deposit more of both tokens into an existing position"""
        operation = f"add_liquidity({position_id})"
        with CorrelationContext("lp_add"):
            try:
                plan = await self.plan_add(position_id, amount0, amount1, state=state)
                tx_hash, _ = await execute_calls(self._client.writer, plan.calls, operation)
                log_with_correlation(logging.INFO, f"Added liquidity to {position_id}", operation, logger)
                return TxResult.success(tx_hash, position_id=plan.position_id, **self._summary(plan))
            except Exception as e:
                log_with_correlation(logging.ERROR, f"Failed: {e}", operation, logger)
                return TxResult.from_exception(e)

    # =========================================================================
    # Withdraw
    # =========================================================================

    async def plan_withdraw(
        self,
        position_id: int,
        liquidity_amount: Optional[int] = None,
        fees_only: bool = False,
        collect_fees: Optional[bool] = None,
        state: str = "opened",
    ) -> LiquidityPlan:
        """
        Build the calls that withdraw from a position

        Args:
            position_id: Position NFT id
            liquidity_amount: Liquidity to remove (default: all of the record's liquidity)
            fees_only: Withdraw zero liquidity and only collect fees
            collect_fees: Collect accrued fees (default from config)
            state: Index state to search ("opened" or "closed")

        Returns:
            LiquidityPlan with [withdraw, clear(token0), clear(token1)]
        """
        if collect_fees is None:
            collect_fees = config.trading.collect_fees_on_withdraw

        record = await self._find(position_id, state)
        pool_key = record.pool_key

        if fees_only:
            liquidity = 0
        elif liquidity_amount is not None:
            liquidity = int(liquidity_amount)
            if liquidity < 0:
                raise InputError.invalid("liquidity_amount", f"must be non-negative, got {liquidity}")
        else:
            liquidity = record.liquidity

        positions = self.positions_address
        return LiquidityPlan(
            operation="withdraw",
            pool_key=pool_key,
            bounds=record.bounds,
            calls=[
                ekubo_calls.withdraw(
                    positions, record.id, pool_key, record.bounds, liquidity,
                    min_token0=0, min_token1=0, collect_fees=collect_fees,
                ),
                ekubo_calls.clear(positions, pool_key.token0),
                ekubo_calls.clear(positions, pool_key.token1),
            ],
            position_id=record.id,
            liquidity=liquidity,
        )

    async def withdraw_liquidity(
        self,
        position_id: int,
        liquidity_amount: Optional[int] = None,
        fees_only: bool = False,
        collect_fees: Optional[bool] = None,
        state: str = "opened",
    ) -> TxResult:
        """Withdraw liquidity and/or collect fees from a position"""
        operation = f"withdraw_liquidity({position_id})"
        with CorrelationContext("lp_withdraw"):
            try:
                plan = await self.plan_withdraw(
                    position_id,
                    liquidity_amount=liquidity_amount,
                    fees_only=fees_only,
                    collect_fees=collect_fees,
                    state=state,
                )
                tx_hash, _ = await execute_calls(self._client.writer, plan.calls, operation)
                log_with_correlation(
                    logging.INFO, f"Withdrew {plan.liquidity} liquidity from {position_id}", operation, logger,
                )
                return TxResult.success(
                    tx_hash,
                    position_id=plan.position_id,
                    liquidity=plan.liquidity,
                    fees_only=fees_only,
                    lower_tick=plan.bounds.lower_tick,
                    upper_tick=plan.bounds.upper_tick,
                )
            except Exception as e:
                log_with_correlation(logging.ERROR, f"Failed: {e}", operation, logger)
                return TxResult.from_exception(e)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _find(self, position_id: int, state: str) -> PositionRecord:
        return await find_position(self._client.positions, self.owner, position_id, state=state)

    async def _pool_tokens(self, pool_key: PoolKey):
        tokens = self._client.tokens
        token0: Token = await tokens.resolve(pool_key.token0)
        token1: Token = await tokens.resolve(pool_key.token1)
        return token0, token1

    @staticmethod
    def _summary(plan: LiquidityPlan) -> dict:
        return {
            "lower_tick": plan.bounds.lower_tick,
            "upper_tick": plan.bounds.upper_tick,
            "token0": plan.pool_key.token0,
            "token1": plan.pool_key.token1,
            "amount0": plan.amount0,
            "amount1": plan.amount1,
        }
