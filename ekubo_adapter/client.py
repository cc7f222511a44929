"""
EkuboClient - Unified entry point for Ekubo operations

Wires the chain collaborators (reader, writer), the position index and
token metadata into functional modules (market, swap, lp).
"""

from __future__ import annotations

from typing import Optional, TYPE_CHECKING

from .config import config as global_config
from .errors import ConfigurationError
from .infra import RegistryTokenMetadata
from .protocols.ekubo import EkuboApiClient, get_ekubo_address
from .protocols.ekubo.interfaces import ChainReader, ChainWriter, PositionIndex, TokenMetadata


class EkuboClient:
    """
    Unified Ekubo adapter client

    Provides access to Ekubo operations through functional modules:
    - market: Pool state, position listing
    - swap: Quotes and guarded swaps via the router
    - lp: Create, add to and withdraw from positions

    Usage:
        client = EkuboClient(reader=my_reader, writer=my_account)

        info = await client.market.pool_info("ETH", "USDC", fee_percent=0.05)
        result = await client.swap.swap("ETH", "USDC", "0.1", slippage_percent=0.5)
        result = await client.lp.create_position("ETH", "USDC", "0.1", "300", 2500, 3500)
    """

    def __init__(
        self,
        reader: ChainReader,
        writer: Optional[ChainWriter] = None,
        positions: Optional[PositionIndex] = None,
        tokens: Optional[TokenMetadata] = None,
        network: Optional[str] = None,
    ):
        """
        Initialize EkuboClient

        Args:
            reader: Chain read collaborator (pool state, quotes)
            writer: Account collaborator for multicalls (required for writes)
            positions: Position index (default: EkuboApiClient from config)
            tokens: Token metadata (default: static Starknet registry)
            network: mainnet or sepolia (default from config)
        """
        self._reader = reader
        self._writer = writer
        self._owns_positions = positions is None
        self._positions = positions if positions is not None else EkuboApiClient()
        self._tokens = tokens if tokens is not None else RegistryTokenMetadata()
        self._network = network if network is not None else global_config.ekubo.network

        # Fail early on an unknown network
        get_ekubo_address("core", self._network)

        # Lazy-loaded modules
        self._market: Optional["MarketModule"] = None
        self._swap: Optional["SwapModule"] = None
        self._lp: Optional["LiquidityModule"] = None

    @property
    def reader(self) -> ChainReader:
        return self._reader

    @property
    def writer(self) -> ChainWriter:
        """Account collaborator; required by write operations"""
        if self._writer is None:
            raise ConfigurationError.missing("writer")
        return self._writer

    @property
    def positions(self) -> PositionIndex:
        return self._positions

    @property
    def tokens(self) -> TokenMetadata:
        return self._tokens

    @property
    def network(self) -> str:
        return self._network

    @property
    def owner(self) -> str:
        """Address of the writer account"""
        return self.writer.address

    def address_of(self, contract: str) -> str:
        """Ekubo contract address on this client's network"""
        return get_ekubo_address(contract, self._network)

    @property
    def market(self) -> "MarketModule":
        """
        Market module for pool and position queries

        Provides:
        - pool_info(token_a, token_b, ...): Pool price, tick, liquidity
        - positions(owner, page, page_size, state): One page of positions
        - position(position_id, owner, state): Single position record
        - position_info(position_id, owner, state): Amounts and uncollected fees
        """
        if self._market is None:
            from .modules.market import MarketModule
            self._market = MarketModule(self)
        return self._market

    @property
    def swap(self) -> "SwapModule":
        """
        Swap module

        Provides:
        - quote(token_in, token_out, amount, ...): Guarded swap plan
        - swap(token_in, token_out, amount, ...): Quote and execute
        """
        if self._swap is None:
            from .modules.swap import SwapModule
            self._swap = SwapModule(self)
        return self._swap

    @property
    def lp(self) -> "LiquidityModule":
        """
        Liquidity module

        Provides:
        - create_position(...): Mint a new position
        - add_liquidity(position_id, amount0, amount1): Deposit into a position
        - withdraw_liquidity(position_id, liquidity, ...): Withdraw and/or collect fees
        """
        if self._lp is None:
            from .modules.liquidity import LiquidityModule
            self._lp = LiquidityModule(self)
        return self._lp

    async def close(self):
        """Release the position index HTTP client if this client created it"""
        if self._owns_positions and hasattr(self._positions, "close"):
            await self._positions.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def __repr__(self) -> str:
        return f"EkuboClient(network={self._network})"


# Type hints for modules (resolved at runtime)
if TYPE_CHECKING:
    from .modules.market import MarketModule
    from .modules.swap import SwapModule
    from .modules.liquidity import LiquidityModule
