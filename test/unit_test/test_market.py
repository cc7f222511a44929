"""
Market Module Unit Tests

Tests pool state reads and position queries with mocked collaborators.
"""

import asyncio
import sys
from decimal import Decimal
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from conftest import ETH, OWNER, USDC
from ekubo_adapter.client import EkuboClient
from ekubo_adapter.errors import ConfigurationError, PoolUnavailable, PositionNotFound
from ekubo_adapter.modules import LiquidityModule, MarketModule, SwapModule
from ekubo_adapter.protocols.ekubo.constants import Q128
from ekubo_adapter.protocols.ekubo.math import fee_percent_to_fixed
from ekubo_adapter.types import Bounds, PoolKey, PositionPage, PositionRecord


class TestPoolInfo:

    @pytest.fixture(autouse=True)
    def pool_state(self, reader):
        reader.get_pool_price.return_value = {"sqrt_ratio": Q128, "tick": {"mag": 0, "sign": False}}
        reader.get_pool_liquidity.return_value = "0xde0b6b3a7640000"
        reader.get_pool_fees_per_liquidity.return_value = {"value0": 1, "value1": "0x2"}

    def test_pool_info(self, client):
        info = asyncio.run(client.market.pool_info("ETH", "USDC"))

        assert info.token0.symbol == "ETH"
        assert info.token1.symbol == "USDC"
        assert info.sqrt_price == Q128
        assert info.price == Decimal(10) ** 12
        assert info.tick == 0
        assert info.liquidity == 10 ** 18
        assert info.fees_per_liquidity == (1, 2)
        assert info.symbol == "ETH/USDC"
        assert info.to_dict()["liquidity"] == str(10 ** 18)

    def test_pool_order_independent_of_argument_order(self, client, reader):
        forward = asyncio.run(client.market.pool_info("ETH", "USDC"))
        reverse = asyncio.run(client.market.pool_info("USDC", "ETH"))
        assert forward.pool_key == reverse.pool_key
        assert reverse.token0.symbol == "ETH"
        reader.get_pool_price.assert_awaited_with(forward.pool_key)

    def test_uninitialized_pool(self, client, reader):
        reader.get_pool_price.return_value = {"sqrt_ratio": 0}
        with pytest.raises(PoolUnavailable):
            asyncio.run(client.market.pool_info("ETH", "USDC"))

    def test_unreadable_fees(self, client, reader):
        reader.get_pool_fees_per_liquidity.return_value = {"value0": 1}
        with pytest.raises(PoolUnavailable):
            asyncio.run(client.market.pool_info("ETH", "USDC"))


class TestPositions:

    def _record(self, position_id):
        return PositionRecord(
            id=position_id,
            pool_key=PoolKey(token0=ETH, token1=USDC, fee=0, tick_spacing=1000),
            bounds=Bounds(lower_tick=-1000, upper_tick=1000),
        )

    def test_positions_default_owner(self, client, position_index):
        page = PositionPage(records=[self._record(1)], pagination={"page": 1, "totalPages": 4})
        position_index.fetch_positions.return_value = page

        result = asyncio.run(client.market.positions(page_size=10))

        assert result is page
        position_index.fetch_positions.assert_awaited_once_with(
            OWNER, page=1, page_size=10, state="opened",
        )

    def test_positions_closed_for_other_owner(self, client, position_index):
        position_index.fetch_positions.return_value = PositionPage()
        asyncio.run(client.market.positions(owner="0x999", page=2, state="closed"))
        position_index.fetch_positions.assert_awaited_once_with(
            "0x999", page=2, page_size=None, state="closed",
        )

    def test_position_lookup(self, client, position_index):
        position_index.fetch_positions.return_value = PositionPage(
            records=[self._record(1), self._record(2)], pagination={"page": 1},
        )
        assert asyncio.run(client.market.position(2)).id == 2
        with pytest.raises(PositionNotFound):
            asyncio.run(client.market.position(3))


class TestClient:

    def test_modules_lazy_and_cached(self, client):
        assert isinstance(client.market, MarketModule)
        assert isinstance(client.swap, SwapModule)
        assert isinstance(client.lp, LiquidityModule)
        assert client.lp is client.lp

    def test_missing_writer(self, reader, position_index):
        client = EkuboClient(reader=reader, positions=position_index)
        with pytest.raises(ConfigurationError):
            client.owner

    def test_write_without_writer_fails_cleanly(self, reader, position_index):
        client = EkuboClient(reader=reader, positions=position_index)
        result = asyncio.run(client.lp.create_position("ETH", "USDC", "0.1", "300", 2500, 3500))
        assert result.is_failed
        assert result.error_code == "9002"

    def test_unknown_network(self, reader):
        with pytest.raises(ConfigurationError):
            EkuboClient(reader=reader, positions=AsyncMock(), network="goerli")

    def test_close_leaves_injected_index_open(self, client, position_index):
        asyncio.run(client.close())
        position_index.close.assert_not_called()

    def test_close_owned_index(self, reader):
        client = EkuboClient(reader=reader)
        asyncio.run(client.close())


class TestPositionInfo:

    @pytest.fixture
    def record(self, position_index):
        record = PositionRecord(
            id=11,
            pool_key=PoolKey(token0=ETH, token1=USDC, fee=fee_percent_to_fixed(0.3), tick_spacing=5982),
            bounds=Bounds(lower_tick=-17946, upper_tick=23928),
            liquidity=5000,
        )
        position_index.fetch_positions.return_value = PositionPage(
            records=[record], pagination={"page": 1, "totalPages": 1},
        )
        return record

    def test_amounts_and_fees(self, client, reader, record):
        reader.get_token_info.return_value = {
            "liquidity": 5000,
            "amount0": "0x16345785d8a0000",
            "amount1": 300_000_000,
            "fees0": 0,
            "fees1": "12",
        }

        info = asyncio.run(client.market.position_info(11))

        reader.get_token_info.assert_awaited_once_with(11, record.pool_key, record.bounds)
        assert info.id == 11
        assert info.owner == OWNER
        assert (info.amount0, info.amount1) == (10 ** 17, 300_000_000)
        assert (info.fees0, info.fees1) == (0, 12)
        assert info.has_uncollected_fees
        assert info.token0.symbol == "ETH"

        data = info.to_dict()
        assert data["token1"] == "USDC"
        assert data["lower_tick"] == -17946
        assert abs(data["pool_fee"] - 0.3) < 1e-9
        assert abs(data["tick_spacing"] - 0.6) < 1e-3

    def test_unreadable_contract_response(self, client, reader, record):
        reader.get_token_info.return_value = {"liquidity": 5000, "amount0": 1, "amount1": 2}
        with pytest.raises(PoolUnavailable):
            asyncio.run(client.market.position_info(11))

    def test_unknown_position(self, client, reader, record):
        with pytest.raises(PositionNotFound):
            asyncio.run(client.market.position_info(12))
        reader.get_token_info.assert_not_awaited()
