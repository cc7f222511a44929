"""
Centralized Starknet Token Registry

Single source of truth for token symbol to address mappings on Starknet mainnet.
"""

from typing import Dict, Optional

from .common import Token, normalize_address


# Starknet token addresses (keys are uppercase for case-insensitive lookup)
STARKNET_TOKEN_ADDRESSES: Dict[str, str] = {
    "STRK": "0x04718f5a0fc34cc1af16a1cdee98ffb20c31f5cd61d6ab07201858f4287c938d",
    "ETH": "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7",

    # Stablecoins
    "USDC": "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8",
    "USDT": "0x068f5c6a61780768455de69077e07e89787839bf8166decfbf92b645209c0fb8",
    "DAI": "0x00da114221cb83fa859dbdb4c44beeaa0bb37c7537ad5ae66fe5e0efd20e6eb3",

    "WBTC": "0x03fe2b97c1fd336e750087d68b9b867997fd72a5be1a0ab1ab4b6bb4aa25fbc7",
}

# Address to decimals mapping
STARKNET_TOKEN_DECIMALS: Dict[str, int] = {
    "0x04718f5a0fc34cc1af16a1cdee98ffb20c31f5cd61d6ab07201858f4287c938d": 18,  # STRK
    "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7": 18,  # ETH
    "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8": 6,   # USDC
    "0x068f5c6a61780768455de69077e07e89787839bf8166decfbf92b645209c0fb8": 6,   # USDT
    "0x00da114221cb83fa859dbdb4c44beeaa0bb37c7537ad5ae66fe5e0efd20e6eb3": 18,  # DAI
    "0x03fe2b97c1fd336e750087d68b9b867997fd72a5be1a0ab1ab4b6bb4aa25fbc7": 8,   # WBTC
}

_TOKEN_NAMES: Dict[str, str] = {
    "STRK": "Starknet Token",
    "ETH": "Ether",
    "USDC": "USD Coin",
    "USDT": "Tether USD",
    "DAI": "Dai Stablecoin",
    "WBTC": "Wrapped BTC",
}

# Prebuilt Token objects for every registered symbol
STARKNET_TOKENS: Dict[str, Token] = {
    symbol: Token(
        address=address,
        symbol=symbol,
        decimals=STARKNET_TOKEN_DECIMALS[address],
        name=_TOKEN_NAMES[symbol],
    )
    for symbol, address in STARKNET_TOKEN_ADDRESSES.items()
}

# Reverse mapping: normalized address -> symbol
ADDRESS_TO_SYMBOL: Dict[str, str] = {
    address: symbol for symbol, address in STARKNET_TOKEN_ADDRESSES.items()
}


def get_token(symbol: str) -> Optional[Token]:
    """
    Get a Token object for a known symbol

    Args:
        symbol: Token symbol (case-insensitive)

    Returns:
        Token if known, None otherwise
    """
    return STARKNET_TOKENS.get(symbol.strip().upper())


def get_token_by_address(address: str) -> Optional[Token]:
    """Get a Token object for a known address (any hex formatting)"""
    symbol = ADDRESS_TO_SYMBOL.get(normalize_address(address))
    if symbol is None:
        return None
    return STARKNET_TOKENS[symbol]


def is_known_token(symbol: str) -> bool:
    """Check if a token symbol is known (case-insensitive)"""
    return symbol.strip().upper() in STARKNET_TOKEN_ADDRESSES
