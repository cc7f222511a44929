"""
Ekubo Call Builders

Builds the individual contract calls that make up a lifecycle multicall.
Calldata is keyed by the Cairo argument names; encoding to felts is left to
the ChainWriter.
"""

from ...types import Bounds, Call, PoolKey


def _token_ref(token: str) -> dict:
    return {"contract_address": token}


# =========================================================================
# ERC20
# =========================================================================

def transfer(token: str, recipient: str, amount: int) -> Call:
    return Call(token, "transfer", {"recipient": recipient, "amount": int(amount)})


# =========================================================================
# Positions contract
# =========================================================================

def mint_and_deposit_and_clear_both(
    positions: str,
    pool_key: PoolKey,
    bounds: Bounds,
    min_liquidity: int = 0,
) -> Call:
    return Call(positions, "mint_and_deposit_and_clear_both", {
        "pool_key": pool_key.to_calldata(),
        "bounds": bounds.to_calldata(),
        "min_liquidity": int(min_liquidity),
    })


def deposit(
    positions: str,
    position_id: int,
    pool_key: PoolKey,
    bounds: Bounds,
    min_liquidity: int = 0,
) -> Call:
    return Call(positions, "deposit", {
        "id": int(position_id),
        "pool_key": pool_key.to_calldata(),
        "bounds": bounds.to_calldata(),
        "min_liquidity": int(min_liquidity),
    })


def withdraw(
    positions: str,
    position_id: int,
    pool_key: PoolKey,
    bounds: Bounds,
    liquidity: int,
    min_token0: int = 0,
    min_token1: int = 0,
    collect_fees: bool = True,
) -> Call:
    """Withdraw liquidity (0 collects fees only)"""
    return Call(positions, "withdraw", {
        "id": int(position_id),
        "pool_key": pool_key.to_calldata(),
        "bounds": bounds.to_calldata(),
        "liquidity": int(liquidity),
        "min_token0": int(min_token0),
        "min_token1": int(min_token1),
        "collect_fees": bool(collect_fees),
    })


def clear(contract: str, token: str) -> Call:
    """Sweep the contract's balance of token back to the caller"""
    return Call(contract, "clear", {"token": _token_ref(token)})


# =========================================================================
# Router
# =========================================================================

def swap(router: str, route_node: dict, token_amount: dict) -> Call:
    return Call(router, "swap", {"node": route_node, "token_amount": token_amount})


def clear_minimum(router: str, token: str, minimum: int) -> Call:
    """Sweep token back to the caller, reverting if less than minimum"""
    return Call(router, "clear_minimum", {"token": _token_ref(token), "minimum": int(minimum)})
