"""
Swap Module

Quote and execute single-pool swaps through the Ekubo router.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from ..client import EkuboClient

from ..config import config
from ..errors import InputError
from ..infra import CorrelationContext, execute_calls, log_with_correlation
from ..protocols.ekubo import (
    build_route_node,
    build_token_amount,
    compute_execution_guard,
    prepare_pool_key,
    read_sqrt_ratio,
    sqrt_ratio_limit,
)
from ..protocols.ekubo import calls as ekubo_calls
from ..protocols.ekubo.pools import TokenInput
from ..types import (
    Call,
    ExecutionGuard,
    ResolvedPool,
    SwapMode,
    SwapQuote,
    TxResult,
    normalize_address,
)

logger = logging.getLogger(__name__)

Amount = Union[Decimal, float, int, str]


@dataclass
class SwapPlan:
    """
    Guarded swap ready for submission

    Attributes:
        pool: Pool key with token_a = token in, token_b = token out
        mode: Exact-in or exact-out
        amount: Raw amount the caller fixed
        sqrt_price: Pool sqrt ratio read for this plan
        quote: Router quote for the route and amount
        guard: Price limit and amount guard
        route_node: Router route node
        token_amount: Router token amount
        calls: [transfer, swap, clear_minimum, clear]
    """
    pool: ResolvedPool
    mode: SwapMode
    amount: int
    sqrt_price: int
    quote: SwapQuote
    guard: ExecutionGuard
    route_node: dict
    token_amount: dict
    calls: List[Call] = field(default_factory=list)

    @property
    def token_in(self):
        return self.pool.sell_token

    @property
    def token_out(self):
        return self.pool.buy_token

    def to_dict(self) -> dict:
        return {
            "token_in": self.token_in.symbol,
            "token_out": self.token_out.symbol,
            "amount": str(self.amount),
            "sqrt_price": str(self.sqrt_price),
            "guard": self.guard.to_dict(),
            "calls": [call.to_dict() for call in self.calls],
        }


class SwapModule:
    """
    Swap module

    Every swap carries two protections computed from a fresh pool read:
    a sqrt ratio limit and an amount guard (minimum output for exact-in,
    exact output for exact-out).

    Usage:
        client = EkuboClient(reader, writer)

        # Sell exactly 0.1 ETH for at least quote - 0.5%
        result = await client.swap.swap("ETH", "USDC", "0.1", slippage_percent=0.5)

        # Buy exactly 100 USDC
        result = await client.swap.swap("ETH", "USDC", "100", is_amount_in=False)

        # Inspect without sending
        plan = await client.swap.quote("ETH", "USDC", "0.1")
        print(plan.guard.minimum_output)
    """

    def __init__(self, client: "EkuboClient"):
        """
        Initialize swap module

        Args:
            client: EkuboClient instance
        """
        self._client = client

    @property
    def router_address(self) -> str:
        return self._client.address_of("router")

    async def quote(
        self,
        token_in: TokenInput,
        token_out: TokenInput,
        amount: Amount,
        is_amount_in: bool = True,
        slippage_percent: Optional[Amount] = None,
        fee_percent: Optional[Amount] = None,
        tick_spacing_percent: Optional[Amount] = None,
        extension: Optional[str] = None,
    ) -> SwapPlan:
        """
        Quote a swap and compute its guards

        Args:
            token_in: Token sold
            token_out: Token bought
            amount: Human amount of token_in (exact-in) or token_out (exact-out)
            is_amount_in: Exact-in when True, exact-out when False
            slippage_percent: Tolerance in percent (default from config)
            fee_percent: Pool fee tier in percent (default from config)
            tick_spacing_percent: Pool tick spacing in percent (default from config)
            extension: Pool extension address

        Returns:
            SwapPlan
        """
        if slippage_percent is None:
            slippage_percent = config.trading.default_slippage_percent

        pool = await prepare_pool_key(
            self._client.tokens, token_in, token_out,
            fee_percent=fee_percent,
            tick_spacing_percent=tick_spacing_percent,
            extension=extension,
        )
        pool_key = pool.pool_key
        mode = SwapMode.from_flag(is_amount_in)

        fixed_token = pool.sell_token if mode is SwapMode.EXACT_IN else pool.buy_token
        raw_amount = fixed_token.raw_amount(amount)
        if raw_amount <= 0:
            raise InputError.invalid("amount", f"must be positive, got {amount}")

        sqrt_price = read_sqrt_ratio(pool_key, await self._client.reader.get_pool_price(pool_key))
        limit = sqrt_ratio_limit(sqrt_price, slippage_percent, pool.is_selling_token0)

        route_node = build_route_node(pool_key, limit)
        token_amount = build_token_amount(
            normalize_address(fixed_token.address), raw_amount, is_amount_in,
        )
        raw_quote = await self._client.reader.quote_swap(route_node, token_amount)
        quote = SwapQuote.from_raw(raw_quote)

        guard = compute_execution_guard(
            mode, quote, raw_amount, slippage_percent, limit, pool.order,
        )
        logger.debug(
            f"Swap plan {pool.sell_token}->{pool.buy_token} ({mode.value}): "
            f"input={guard.input_amount}, minimum_output={guard.minimum_output}, limit={limit}"
        )

        router = self.router_address
        sell = normalize_address(pool.sell_token.address)
        buy = normalize_address(pool.buy_token.address)
        calls = [
            ekubo_calls.transfer(sell, router, guard.input_amount),
            ekubo_calls.swap(router, route_node, token_amount),
            ekubo_calls.clear_minimum(router, buy, guard.minimum_output),
            ekubo_calls.clear(router, buy),
        ]

        return SwapPlan(
            pool=pool,
            mode=mode,
            amount=raw_amount,
            sqrt_price=sqrt_price,
            quote=quote,
            guard=guard,
            route_node=route_node,
            token_amount=token_amount,
            calls=calls,
        )

    async def swap(
        self,
        token_in: TokenInput,
        token_out: TokenInput,
        amount: Amount,
        is_amount_in: bool = True,
        slippage_percent: Optional[Amount] = None,
        fee_percent: Optional[Amount] = None,
        tick_spacing_percent: Optional[Amount] = None,
        extension: Optional[str] = None,
    ) -> TxResult:
        """
        Quote and execute a swap

        Returns:
            TxResult; on success data holds token_in, token_out, mode,
            amount_in, minimum_output, expected_output and sqrt_ratio_limit
            (raw units)
        """
        operation = f"swap({token_in}->{token_out})"
        with CorrelationContext("swap"):
            try:
                plan = await self.quote(
                    token_in, token_out, amount,
                    is_amount_in=is_amount_in,
                    slippage_percent=slippage_percent,
                    fee_percent=fee_percent,
                    tick_spacing_percent=tick_spacing_percent,
                    extension=extension,
                )
                log_with_correlation(
                    logging.INFO,
                    f"Quoted {plan.mode.value}: in={plan.guard.input_amount}, "
                    f"min_out={plan.guard.minimum_output}",
                    operation, logger,
                )
                tx_hash, _ = await execute_calls(self._client.writer, plan.calls, operation)
                return TxResult.success(
                    tx_hash,
                    token_in=plan.token_in.symbol,
                    token_out=plan.token_out.symbol,
                    mode=plan.mode.value,
                    amount_in=plan.guard.input_amount,
                    minimum_output=plan.guard.minimum_output,
                    expected_output=plan.guard.expected_output,
                    sqrt_ratio_limit=plan.guard.sqrt_ratio_limit,
                )
            except Exception as e:
                log_with_correlation(logging.ERROR, f"Failed: {e}", operation, logger)
                return TxResult.from_exception(e)
