"""
Registry-backed token metadata

TokenMetadata implementation over the static Starknet token registry,
optionally extended with caller-supplied tokens.
"""

import logging
from typing import Dict, Iterable, Optional

from ..errors import InputError
from ..types import Token, normalize_address
from ..types.starknet_tokens import STARKNET_TOKENS

logger = logging.getLogger(__name__)


class RegistryTokenMetadata:
    """
    Resolve tokens by symbol (case-insensitive) or address

    Usage:
        tokens = RegistryTokenMetadata()
        usdc = await tokens.resolve("usdc")
    """

    def __init__(self, extra_tokens: Optional[Iterable[Token]] = None):
        self._by_symbol: Dict[str, Token] = dict(STARKNET_TOKENS)
        for token in extra_tokens or []:
            self._by_symbol[token.symbol.upper()] = Token(
                address=normalize_address(token.address),
                symbol=token.symbol,
                decimals=token.decimals,
                name=token.name,
            )
        self._by_address: Dict[str, Token] = {
            normalize_address(token.address): token for token in self._by_symbol.values()
        }

    def get(self, symbol_or_address: str) -> Optional[Token]:
        query = symbol_or_address.strip()
        if query.lower().startswith("0x"):
            return self._by_address.get(normalize_address(query))
        return self._by_symbol.get(query.upper())

    async def resolve(self, symbol_or_address: str) -> Token:
        if not symbol_or_address or not symbol_or_address.strip():
            raise InputError.missing_token("token")
        token = self.get(symbol_or_address)
        if token is None:
            raise InputError.unknown_token(symbol_or_address)
        return token
