"""
Exception definitions for Ekubo Adapter
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for Ekubo operations

    1xxx - Input errors
    2xxx - Transaction errors
    3xxx - Quote errors
    4xxx - Pool errors
    5xxx - Position errors
    6xxx - API errors
    9xxx - Configuration errors
    """
    # Input errors (never recoverable)
    INPUT_INVALID = "1001"
    INVALID_RANGE = "1002"
    TOKEN_MISSING = "1003"
    TOKEN_UNKNOWN = "1004"

    # Transaction errors
    TX_SEND_FAILED = "2001"
    TX_REVERTED = "2002"
    POSITION_ID_MISSING = "2003"

    # Quote errors
    QUOTE_MISSING_LEG = "3001"
    QUOTE_SIGN_UNEXPECTED = "3002"
    QUOTE_MALFORMED = "3003"

    # Pool errors
    POOL_NOT_INITIALIZED = "4001"
    POOL_STATE_INVALID = "4002"

    # Position errors
    POSITION_NOT_FOUND = "5001"
    POSITION_ALREADY_CLOSED = "5002"

    # Position index API errors (recoverable)
    API_REQUEST_FAILED = "6001"
    API_INVALID_RESPONSE = "6002"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class EkuboAdapterError(Exception):
    """
    Base exception for all Ekubo adapter errors

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class InputError(EkuboAdapterError):
    """
    Malformed or out-of-range caller parameters - not recoverable

    Raised when:
    - A price, sqrt price or percentage is out of its domain
    - Neither symbol nor address is given for a token
    - A token symbol is not known to the registry
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INPUT_INVALID,
        param: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"param": param} if param else None,
        )
        self.param = param

    @classmethod
    def invalid(cls, param: str, reason: str) -> "InputError":
        return cls(f"Invalid {param}: {reason}", param=param)

    @classmethod
    def missing_token(cls, which: str) -> "InputError":
        return cls(
            f"Either {which} symbol or address must be provided",
            ErrorCode.TOKEN_MISSING,
            param=which,
        )

    @classmethod
    def unknown_token(cls, identifier: str) -> "InputError":
        return cls(
            f"Unknown token: {identifier}",
            ErrorCode.TOKEN_UNKNOWN,
            param=identifier,
        )


class InvalidRangeError(InputError):
    """
    Tick bounds cannot form a position

    Raised when:
    - lower tick is not strictly below upper tick
    - a tick is not a finite integer
    - a tick lies outside the protocol tick range
    """

    def __init__(self, message: str, lower_tick=None, upper_tick=None):
        super().__init__(message, ErrorCode.INVALID_RANGE, param="bounds")
        self.lower_tick = lower_tick
        self.upper_tick = upper_tick
        self.details.update({"lower_tick": lower_tick, "upper_tick": upper_tick})

    @classmethod
    def not_ordered(cls, lower_tick: int, upper_tick: int) -> "InvalidRangeError":
        return cls(
            f"Lower tick ({lower_tick}) must be less than upper tick ({upper_tick})",
            lower_tick=lower_tick,
            upper_tick=upper_tick,
        )

    @classmethod
    def out_of_range(cls, lower_tick: int, upper_tick: int, min_tick: int, max_tick: int) -> "InvalidRangeError":
        return cls(
            f"Ticks ({lower_tick}, {upper_tick}) outside supported range [{min_tick}, {max_tick}]",
            lower_tick=lower_tick,
            upper_tick=upper_tick,
        )

    @classmethod
    def not_integer(cls, lower_tick, upper_tick) -> "InvalidRangeError":
        return cls(
            f"Invalid tick values: lower={lower_tick}, upper={upper_tick}",
            lower_tick=lower_tick,
            upper_tick=upper_tick,
        )


class QuoteShapeError(EkuboAdapterError):
    """
    Quote response does not have the expected shape - not recoverable

    Raised when:
    - A quote leg is missing
    - A magnitude or sign cannot be read
    - The leg expected to be an output is flagged as an input
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.QUOTE_MALFORMED,
        leg: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"leg": leg} if leg else None,
        )
        self.leg = leg

    @classmethod
    def missing_leg(cls, leg: str) -> "QuoteShapeError":
        return cls(f"Quote is missing leg '{leg}'", ErrorCode.QUOTE_MISSING_LEG, leg=leg)

    @classmethod
    def unexpected_sign(cls, leg: str) -> "QuoteShapeError":
        return cls(
            f"Quote leg '{leg}' is an input where an output was expected",
            ErrorCode.QUOTE_SIGN_UNEXPECTED,
            leg=leg,
        )

    @classmethod
    def malformed(cls, leg: str, reason: str) -> "QuoteShapeError":
        return cls(f"Malformed quote leg '{leg}': {reason}", ErrorCode.QUOTE_MALFORMED, leg=leg)


class ExecutionError(EkuboAdapterError):
    """
    Transaction execution errors

    Raised when:
    - The writer fails to submit the call list
    - The transaction is confirmed but reverted
    - The transaction succeeded but the created position id is not in the receipt
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.TX_SEND_FAILED,
        transaction_hash: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            original_error=original_error,
            details={"transaction_hash": transaction_hash},
        )
        self.transaction_hash = transaction_hash

    @classmethod
    def send_failed(cls, error: Exception) -> "ExecutionError":
        return cls(
            f"Failed to send transaction: {error}",
            ErrorCode.TX_SEND_FAILED,
            original_error=error,
        )

    @classmethod
    def reverted(cls, transaction_hash: str, reason: Optional[str] = None) -> "ExecutionError":
        message = "Transaction confirmed but failed"
        if reason:
            message = f"{message}: {reason}"
        return cls(message, ErrorCode.TX_REVERTED, transaction_hash=transaction_hash)

    @classmethod
    def position_id_missing(cls, transaction_hash: str) -> "ExecutionError":
        return cls(
            f"Transaction {transaction_hash} succeeded but no position id was found in its events",
            ErrorCode.POSITION_ID_MISSING,
            transaction_hash=transaction_hash,
        )


class PoolUnavailable(EkuboAdapterError):
    """
    Pool not available - not recoverable

    Raised when:
    - Pool has never been initialized (zero sqrt price)
    - Pool state read returned an unreadable value
    """

    def __init__(
        self,
        message: str,
        pool: Optional[str] = None,
        code: ErrorCode = ErrorCode.POOL_STATE_INVALID,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"pool": pool},
        )
        self.pool = pool

    @classmethod
    def not_initialized(cls, pool: str) -> "PoolUnavailable":
        return cls(
            f"Pool not initialized: {pool}",
            pool=pool,
            code=ErrorCode.POOL_NOT_INITIALIZED,
        )

    @classmethod
    def invalid_state(cls, pool: str, reason: str) -> "PoolUnavailable":
        return cls(f"Pool has invalid state: {reason}", pool=pool)


class PositionNotFound(EkuboAdapterError):
    """
    Position not found - not recoverable

    Raised when:
    - No index record matches the position id for the owner
    - Position was already fully withdrawn
    """

    def __init__(
        self,
        message: str,
        position_id: Optional[str] = None,
        code: ErrorCode = ErrorCode.POSITION_NOT_FOUND,
    ):
        super().__init__(
            message,
            code,
            recoverable=False,
            details={"position_id": position_id},
        )
        self.position_id = position_id

    @classmethod
    def not_found(cls, position_id, owner: Optional[str] = None) -> "PositionNotFound":
        suffix = f" for owner {owner}" if owner else ""
        return cls(
            f"Position not found: {position_id}{suffix}",
            position_id=str(position_id),
        )

    @classmethod
    def already_closed(cls, position_id) -> "PositionNotFound":
        return cls(
            f"Position already closed: {position_id}",
            position_id=str(position_id),
            code=ErrorCode.POSITION_ALREADY_CLOSED,
        )


class ApiError(EkuboAdapterError):
    """
    Position index API errors - typically recoverable

    Raised when:
    - The HTTP request fails or times out
    - The API returns a non-2xx status
    - The response body cannot be parsed
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.API_REQUEST_FAILED,
        original_error: Optional[Exception] = None,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=code == ErrorCode.API_REQUEST_FAILED,
            original_error=original_error,
            details={"url": url, "status_code": status_code},
        )
        self.url = url
        self.status_code = status_code

    @classmethod
    def request_failed(cls, url: str, error: Exception) -> "ApiError":
        return cls(
            f"Failed to fetch position data: {error}",
            ErrorCode.API_REQUEST_FAILED,
            original_error=error,
            url=url,
        )

    @classmethod
    def bad_status(cls, url: str, status_code: int, reason: str = "") -> "ApiError":
        return cls(
            f"Failed to fetch position data: {status_code} {reason}".rstrip(),
            ErrorCode.API_REQUEST_FAILED,
            url=url,
            status_code=status_code,
        )

    @classmethod
    def invalid_response(cls, url: str, reason: str) -> "ApiError":
        return cls(
            f"Invalid position data from API: {reason}",
            ErrorCode.API_INVALID_RESPONSE,
            url=url,
        )


class ConfigurationError(EkuboAdapterError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
