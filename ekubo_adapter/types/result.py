"""
Result type definitions for lifecycle operations
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from ..errors import EkuboAdapterError, ExecutionError


class TxStatus(Enum):
    """Transaction status"""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class TxResult:
    """
    Lifecycle operation result

    Attributes:
        status: Operation status
        transaction_hash: Transaction hash when one was submitted
        error: Error message if failed
        recoverable: Whether the error is recoverable (can retry)
        error_code: Error code for programmatic handling
        data: Operation output (position id, ticks, amounts, ...)
    """
    status: TxStatus
    transaction_hash: Optional[str] = None
    error: Optional[str] = None
    recoverable: bool = False
    error_code: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_success(self) -> bool:
        return self.status == TxStatus.SUCCESS

    @property
    def is_failed(self) -> bool:
        return self.status == TxStatus.FAILED

    @classmethod
    def success(cls, transaction_hash: Optional[str], **data) -> "TxResult":
        """Create successful result"""
        return cls(status=TxStatus.SUCCESS, transaction_hash=transaction_hash, data=data)

    @classmethod
    def failed(cls, error: str, transaction_hash: Optional[str] = None, **kwargs) -> "TxResult":
        """Create failed result"""
        return cls(
            status=TxStatus.FAILED,
            transaction_hash=transaction_hash,
            error=error,
            **kwargs
        )

    @classmethod
    def from_exception(cls, error: Exception) -> "TxResult":
        """Failed result for an exception caught at a module boundary"""
        if isinstance(error, EkuboAdapterError):
            transaction_hash = error.transaction_hash if isinstance(error, ExecutionError) else None
            return cls.failed(
                error.message,
                transaction_hash=transaction_hash,
                recoverable=error.recoverable,
                error_code=error.code.value,
            )
        return cls.failed(str(error) or error.__class__.__name__)

    def to_dict(self) -> dict:
        if self.is_success:
            return {"status": "success", "transaction_hash": self.transaction_hash, "data": self.data}
        return {
            "status": self.status.value,
            "error": self.error,
            "error_code": self.error_code,
            "transaction_hash": self.transaction_hash,
        }

    def __str__(self) -> str:
        if self.is_success:
            hash_display = f"{self.transaction_hash[:16]}..." if self.transaction_hash else "no hash"
            return f"TxResult(SUCCESS, {hash_display})"
        return f"TxResult({self.status.value}, error={self.error})"
