"""
Common type definitions
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from ..errors import InputError


def normalize_address(address: Union[str, int]) -> str:
    """
    Normalize a Starknet felt address to 0x + 64 lowercase hex digits

    Args:
        address: Hex string (any case, with or without leading zeros) or int

    Returns:
        Canonical address string
    """
    if isinstance(address, int):
        value = address
    else:
        text = address.strip()
        try:
            value = int(text, 16)
        except ValueError:
            raise InputError.invalid("address", f"not a hex value: {address!r}")
    if value < 0:
        raise InputError.invalid("address", f"negative value: {address!r}")
    return f"0x{value:064x}"


def address_value(address: Union[str, int]) -> int:
    """Numeric value of an address, used for token0/token1 ordering"""
    if isinstance(address, int):
        return address
    return int(address, 16)


@dataclass(frozen=True)
class Token:
    """
    Token information

    Attributes:
        address: Token contract address (normalized 0x-prefixed hex)
        symbol: Token symbol (e.g., "ETH", "USDC")
        decimals: Number of decimal places
        name: Full token name (optional)
    """
    address: str
    symbol: str
    decimals: int
    name: str = ""

    def __str__(self) -> str:
        return self.symbol or self.address

    def __repr__(self) -> str:
        return f"Token({self.symbol}, {self.address[:10]}...)"

    def ui_amount(self, raw_amount: int) -> Decimal:
        """
        Convert raw amount to UI amount with full precision

        Args:
            raw_amount: Raw token amount (smallest units)

        Returns:
            UI amount as Decimal for precision
        """
        return Decimal(raw_amount) / Decimal(10 ** self.decimals)

    def raw_amount(self, ui_amount: Union[Decimal, float, int, str]) -> int:
        """
        Convert UI amount to raw amount

        Args:
            ui_amount: UI amount (can be Decimal, float, int, or str)

        Returns:
            Raw token amount (smallest units), truncated toward zero
        """
        if not isinstance(ui_amount, Decimal):
            try:
                ui_amount = Decimal(str(ui_amount))
            except InvalidOperation:
                raise InputError.invalid("amount", f"not a number: {ui_amount!r}")
        if not ui_amount.is_finite() or ui_amount < 0:
            raise InputError.invalid("amount", f"must be a non-negative number, got {ui_amount}")
        return int(ui_amount * Decimal(10 ** self.decimals))


@dataclass(frozen=True)
class TokenRef:
    """
    Caller-side reference to a token by symbol and/or address

    Address wins when both are given.
    """
    symbol: Optional[str] = None
    address: Optional[str] = None

    @property
    def query(self) -> str:
        if self.address:
            return self.address
        if self.symbol:
            return self.symbol
        raise InputError.missing_token("token")

    @classmethod
    def of(cls, value: Union["TokenRef", Token, str]) -> "TokenRef":
        """Build a reference from a symbol, an address, a Token or another ref"""
        if isinstance(value, TokenRef):
            return value
        if isinstance(value, Token):
            return cls(symbol=value.symbol, address=value.address)
        if isinstance(value, str) and value.strip().lower().startswith("0x"):
            return cls(address=value.strip())
        return cls(symbol=value)

    def __str__(self) -> str:
        return self.symbol or self.address or "<unset>"
