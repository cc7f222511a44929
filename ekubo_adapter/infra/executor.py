"""
Multicall execution

Submits an ordered call list through a ChainWriter and waits for the
receipt. No retries: a failed or reverted transaction surfaces as
ExecutionError carrying the writer's message.
"""

import logging
from typing import Any, Sequence, Tuple

from .correlation import log_with_correlation
from ..errors import ExecutionError
from ..types import Call

logger = logging.getLogger(__name__)


def _transaction_hash(response: Any) -> str:
    if isinstance(response, str):
        return response
    if hasattr(response, "get"):
        value = response.get("transaction_hash")
    else:
        value = getattr(response, "transaction_hash", None)
    if value is None:
        raise ExecutionError.send_failed(ValueError("writer returned no transaction hash"))
    return value if isinstance(value, str) else hex(value)


async def execute_calls(
    writer: Any,
    calls: Sequence[Call],
    operation_name: str,
) -> Tuple[str, Any]:
    """
    Execute calls as one transaction and wait for confirmation

    Args:
        writer: ChainWriter collaborator
        calls: Ordered call list
        operation_name: Label for logs

    Returns:
        (transaction_hash, receipt)

    Raises:
        ExecutionError: Submission failed, or the receipt is not successful
    """
    entrypoints = ", ".join(call.entrypoint for call in calls)
    log_with_correlation(
        logging.INFO, f"Submitting {len(calls)} calls: {entrypoints}", operation_name, logger,
        call_count=len(calls),
    )

    try:
        response = await writer.execute(list(calls))
    except ExecutionError:
        raise
    except Exception as e:
        log_with_correlation(logging.ERROR, f"Send failed: {e}", operation_name, logger)
        raise ExecutionError.send_failed(e)

    transaction_hash = _transaction_hash(response)
    log_with_correlation(
        logging.INFO, f"Submitted {transaction_hash}", operation_name, logger,
        transaction_hash=transaction_hash,
    )

    try:
        receipt = await writer.wait_for_transaction(transaction_hash)
    except Exception as e:
        log_with_correlation(logging.ERROR, f"Confirmation failed: {e}", operation_name, logger)
        raise ExecutionError(
            f"Failed to confirm transaction {transaction_hash}: {e}",
            transaction_hash=transaction_hash,
            original_error=e,
        )

    if not receipt.is_success():
        reason = getattr(receipt, "revert_reason", None)
        log_with_correlation(
            logging.ERROR, f"Transaction {transaction_hash} reverted: {reason}", operation_name, logger,
            transaction_hash=transaction_hash,
        )
        raise ExecutionError.reverted(transaction_hash, reason)

    log_with_correlation(
        logging.INFO, f"Confirmed {transaction_hash}", operation_name, logger,
        transaction_hash=transaction_hash,
    )
    return transaction_hash, receipt
