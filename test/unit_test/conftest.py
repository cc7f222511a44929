"""
Shared fixtures for unit tests.

Chain collaborators are AsyncMocks; no network access.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from ekubo_adapter.client import EkuboClient
from ekubo_adapter.config import config
from ekubo_adapter.infra import RegistryTokenMetadata
from ekubo_adapter.protocols.ekubo.constants import EKUBO_ADDRESSES

ETH = "0x049d36570d4e46f48e99674bd3fcc84644ddd6b96f7c741b1562b82f9e004dc7"
USDC = "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8"
OWNER = "0x0000000000000000000000000000000000000000000000000000000000000123"
TX_HASH = "0x05f1b2c3"
TRANSFER_SELECTOR = "0x99cd8bde557814842a3121e8ddfd433a539b8c9f14bf31ebf108d12e6196e9"

POSITIONS = EKUBO_ADDRESSES["positions"]["mainnet"]
POSITIONS_NFT = EKUBO_ADDRESSES["positions_nft"]["mainnet"]
ROUTER = EKUBO_ADDRESSES["router"]["mainnet"]


@pytest.fixture(autouse=True)
def trading_defaults(monkeypatch):
    """Pin trading defaults regardless of the local .env"""
    monkeypatch.setattr(config.trading, "default_slippage_percent", 0.5)
    monkeypatch.setattr(config.trading, "default_fee_percent", 0.05)
    monkeypatch.setattr(config.trading, "default_tick_spacing_percent", 0.1)
    monkeypatch.setattr(config.trading, "default_extension", "0x0")
    monkeypatch.setattr(config.trading, "collect_fees_on_withdraw", True)
    monkeypatch.setattr(config.ekubo, "max_pages", 20)
    monkeypatch.setattr(config.ekubo, "page_size", 50)


def mint_event(position_id: int) -> dict:
    return {
        "from_address": POSITIONS_NFT,
        "keys": [TRANSFER_SELECTOR, "0x0", OWNER, hex(position_id), "0x0"],
        "data": [],
    }


@pytest.fixture
def receipt():
    receipt = MagicMock()
    receipt.is_success.return_value = True
    receipt.revert_reason = None
    receipt.events = []
    return receipt


@pytest.fixture
def writer(receipt):
    writer = AsyncMock()
    writer.address = OWNER
    writer.execute.return_value = {"transaction_hash": TX_HASH}
    writer.wait_for_transaction.return_value = receipt
    return writer


@pytest.fixture
def reader():
    return AsyncMock()


@pytest.fixture
def position_index():
    return AsyncMock()


@pytest.fixture
def client(reader, writer, position_index):
    return EkuboClient(
        reader=reader,
        writer=writer,
        positions=position_index,
        tokens=RegistryTokenMetadata(),
        network="mainnet",
    )
