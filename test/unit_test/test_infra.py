"""
Test Infrastructure Module

Tests for ekubo_adapter.infra package (correlation, executor, token metadata).
"""

import asyncio
import logging
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from ekubo_adapter.errors import ErrorCode, ExecutionError, InputError
from ekubo_adapter.infra import (
    CorrelationContext,
    RegistryTokenMetadata,
    execute_calls,
    get_correlation_id,
    log_with_correlation,
)
from ekubo_adapter.types import Call, Token

USDC = "0x053c91253bc9682c04929ca02ed00b3e423f6710d2ee7e0d5ebb06f3ecf368a8"


def make_writer(tx_hash="0xabc", success=True, revert_reason=None):
    writer = AsyncMock()
    writer.address = "0x0123"
    writer.execute.return_value = {"transaction_hash": tx_hash}
    receipt = MagicMock()
    receipt.is_success.return_value = success
    receipt.revert_reason = revert_reason
    receipt.events = []
    writer.wait_for_transaction.return_value = receipt
    return writer


CALLS = [Call(USDC, "transfer", {"recipient": "0x1", "amount": 1})]


class TestCorrelation:

    def test_context_sets_and_resets(self):
        assert get_correlation_id() is None
        with CorrelationContext("swap") as cid:
            assert cid.startswith("swap_")
            assert get_correlation_id() == cid
        assert get_correlation_id() is None

    def test_log_with_correlation(self, caplog):
        log = logging.getLogger("ekubo_adapter.test_correlation")
        with caplog.at_level(logging.INFO, logger="ekubo_adapter.test_correlation"):
            with CorrelationContext("lp") as cid:
                log_with_correlation(logging.INFO, "hello", "op", log, position_id=5)
        record = caplog.records[-1]
        assert record.getMessage() == f"[{cid}] [op] hello"
        assert record.correlation_id == cid
        assert record.position_id == 5


class TestExecuteCalls:

    def test_success(self):
        writer = make_writer()
        tx_hash, receipt = asyncio.run(execute_calls(writer, CALLS, "test"))
        assert tx_hash == "0xabc"
        writer.execute.assert_awaited_once_with(CALLS)
        writer.wait_for_transaction.assert_awaited_once_with("0xabc")
        assert receipt.is_success()

    def test_integer_hash(self):
        writer = make_writer(tx_hash=0xabc)
        tx_hash, _ = asyncio.run(execute_calls(writer, CALLS, "test"))
        assert tx_hash == "0xabc"

    def test_send_failure_keeps_message(self):
        writer = make_writer()
        writer.execute.side_effect = RuntimeError("insufficient balance")
        with pytest.raises(ExecutionError) as exc_info:
            asyncio.run(execute_calls(writer, CALLS, "test"))
        assert exc_info.value.code == ErrorCode.TX_SEND_FAILED
        assert "insufficient balance" in exc_info.value.message
        writer.wait_for_transaction.assert_not_awaited()

    def test_missing_hash(self):
        writer = make_writer()
        writer.execute.return_value = {}
        with pytest.raises(ExecutionError):
            asyncio.run(execute_calls(writer, CALLS, "test"))

    def test_reverted(self):
        writer = make_writer(success=False, revert_reason="LIMIT_MAG")
        with pytest.raises(ExecutionError) as exc_info:
            asyncio.run(execute_calls(writer, CALLS, "test"))
        assert exc_info.value.code == ErrorCode.TX_REVERTED
        assert exc_info.value.transaction_hash == "0xabc"
        assert "LIMIT_MAG" in exc_info.value.message

    def test_confirmation_failure(self):
        writer = make_writer()
        writer.wait_for_transaction.side_effect = TimeoutError("timed out")
        with pytest.raises(ExecutionError) as exc_info:
            asyncio.run(execute_calls(writer, CALLS, "test"))
        assert exc_info.value.transaction_hash == "0xabc"
        assert "timed out" in exc_info.value.message


class TestRegistryTokenMetadata:

    def test_resolve_symbol_case_insensitive(self):
        token = asyncio.run(RegistryTokenMetadata().resolve("usdc"))
        assert token.symbol == "USDC"
        assert token.decimals == 6

    def test_resolve_address(self):
        token = asyncio.run(RegistryTokenMetadata().resolve(USDC.replace("0x0", "0x", 1)))
        assert token.symbol == "USDC"

    def test_extra_tokens(self):
        lords = Token(address="0x124aeb495b947201f5fac96fd1138e326ad86195b98df6dec9009158a533b49", symbol="LORDS", decimals=18)
        tokens = RegistryTokenMetadata(extra_tokens=[lords])
        assert asyncio.run(tokens.resolve("lords")).decimals == 18
        assert asyncio.run(tokens.resolve(lords.address)).symbol == "LORDS"

    def test_unknown_and_missing(self):
        tokens = RegistryTokenMetadata()
        with pytest.raises(InputError) as exc_info:
            asyncio.run(tokens.resolve("DOGE"))
        assert exc_info.value.code == ErrorCode.TOKEN_UNKNOWN
        with pytest.raises(InputError) as exc_info:
            asyncio.run(tokens.resolve("  "))
        assert exc_info.value.code == ErrorCode.TOKEN_MISSING
