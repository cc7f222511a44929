"""
Pool key resolution

Turns a caller's (token_a, token_b, fee %, spacing %) into a PoolKey in
token0 < token1 order, keeping track of which caller token became token0.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .interfaces import TokenMetadata
from .math import Number, fee_percent_to_fixed, spacing_percent_to_exponent
from ...config import config
from ...errors import InputError, PoolUnavailable
from ...types import PoolKey, ResolvedPool, Token, TokenOrder, TokenRef, normalize_address

logger = logging.getLogger(__name__)

TokenInput = Union[TokenRef, Token, str]


def build_pool_key(
    token_a: Token,
    token_b: Token,
    fee: int,
    tick_spacing: int,
    extension: str = "0x0",
) -> ResolvedPool:
    """
    Order two resolved tokens into a pool key

    Args:
        token_a: First caller token (the sell token for swaps)
        token_b: Second caller token
        fee: Fee fraction (0.128 fixed point)
        tick_spacing: Tick spacing exponent
        extension: Extension address

    Returns:
        ResolvedPool carrying the key and the caller-to-pool token order
    """
    order = TokenOrder.of(token_a.address, token_b.address)
    token0, token1 = order.to_pool_order(token_a, token_b)
    pool_key = PoolKey(
        token0=normalize_address(token0.address),
        token1=normalize_address(token1.address),
        fee=fee,
        tick_spacing=tick_spacing,
        extension=extension,
    )
    return ResolvedPool(pool_key=pool_key, token_a=token_a, token_b=token_b, order=order)


async def _resolve_token(tokens: TokenMetadata, value: TokenInput, which: str) -> Token:
    if isinstance(value, Token):
        return value
    ref = TokenRef.of(value) if value is not None else TokenRef()
    if not ref.symbol and not ref.address:
        raise InputError.missing_token(which)
    return await tokens.resolve(ref.query)


async def prepare_pool_key(
    tokens: TokenMetadata,
    token_a: TokenInput,
    token_b: TokenInput,
    fee_percent: Optional[Number] = None,
    tick_spacing_percent: Optional[Number] = None,
    extension: Optional[str] = None,
) -> ResolvedPool:
    """
    Resolve tokens and percentages into a pool key

    Args:
        tokens: Token metadata collaborator
        token_a: First token (symbol, address, TokenRef or Token)
        token_b: Second token
        fee_percent: Fee tier in percent (default from config, 0.05)
        tick_spacing_percent: Tick spacing in percent (default from config, 0.1)
        extension: Extension address (default "0x0")

    Returns:
        ResolvedPool
    """
    if fee_percent is None:
        fee_percent = config.trading.default_fee_percent
    if tick_spacing_percent is None:
        tick_spacing_percent = config.trading.default_tick_spacing_percent
    if extension is None:
        extension = config.trading.default_extension

    resolved_a = await _resolve_token(tokens, token_a, "token_a")
    resolved_b = await _resolve_token(tokens, token_b, "token_b")

    pool = build_pool_key(
        resolved_a,
        resolved_b,
        fee=fee_percent_to_fixed(fee_percent),
        tick_spacing=spacing_percent_to_exponent(tick_spacing_percent),
        extension=extension,
    )
    logger.debug(
        f"Resolved pool {resolved_a}/{resolved_b}: order={pool.order.value}, "
        f"fee={pool.pool_key.fee}, tick_spacing={pool.pool_key.tick_spacing}"
    )
    return pool


# =========================================================================
# Pool state readers
# =========================================================================

def _felt_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"boolean is not an integer: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    return int(text, 16) if text.lower().startswith("0x") else int(text)


def read_sqrt_ratio(pool_key: PoolKey, price_state: Any) -> int:
    """
    Current sqrt ratio from a ChainReader.get_pool_price result

    Raises:
        PoolUnavailable: Unreadable value, or zero (pool never initialized)
    """
    raw = price_state
    if isinstance(price_state, Mapping):
        raw = price_state.get("sqrt_ratio", price_state.get("sqrtRatio"))
    try:
        sqrt_ratio = _felt_int(raw)
    except (TypeError, ValueError):
        raise PoolUnavailable.invalid_state(str(pool_key), f"unreadable sqrt_ratio {raw!r}")
    if sqrt_ratio == 0:
        raise PoolUnavailable.not_initialized(str(pool_key))
    if sqrt_ratio < 0:
        raise PoolUnavailable.invalid_state(str(pool_key), f"negative sqrt_ratio {sqrt_ratio}")
    return sqrt_ratio


def read_liquidity(pool_key: PoolKey, value: Any) -> int:
    try:
        return _felt_int(value)
    except (TypeError, ValueError):
        raise PoolUnavailable.invalid_state(str(pool_key), f"unreadable liquidity {value!r}")


def read_fees_per_liquidity(pool_key: PoolKey, value: Any) -> Tuple[int, int]:
    """(value0, value1) from a ChainReader.get_pool_fees_per_liquidity result"""
    if not isinstance(value, Mapping):
        raise PoolUnavailable.invalid_state(str(pool_key), f"unreadable fees per liquidity {value!r}")
    try:
        return _felt_int(value["value0"]), _felt_int(value["value1"])
    except (KeyError, TypeError, ValueError):
        raise PoolUnavailable.invalid_state(str(pool_key), f"unreadable fees per liquidity {value!r}")


_TOKEN_INFO_FIELDS = ("liquidity", "amount0", "amount1", "fees0", "fees1")


def read_token_info(pool_key: PoolKey, position_id: int, value: Any) -> Dict[str, int]:
    """
    Liquidity, token amounts and uncollected fees from a
    ChainReader.get_token_info result

    Raises:
        PoolUnavailable: A field is missing or unreadable
    """
    if not isinstance(value, Mapping):
        raise PoolUnavailable.invalid_state(
            str(pool_key), f"unreadable token info for position {position_id}: {value!r}"
        )
    info = {}
    for name in _TOKEN_INFO_FIELDS:
        try:
            info[name] = _felt_int(value[name])
        except (KeyError, TypeError, ValueError):
            raise PoolUnavailable.invalid_state(
                str(pool_key), f"unreadable {name} for position {position_id}: {value.get(name)!r}"
            )
    return info
