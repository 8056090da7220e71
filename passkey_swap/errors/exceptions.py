"""
Exception definitions for Passkey Swap
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """
    Unified error codes for wallet and swap operations

    1xxx - RPC errors
    2xxx - Swap assembly errors (quote, build, lookup tables)
    3xxx - Submission errors
    4xxx - Read errors (balances, activity)
    7xxx - Operation errors
    9xxx - Configuration errors
    """
    # RPC errors (recoverable)
    RPC_CONNECTION_FAILED = "1001"
    RPC_TIMEOUT = "1002"
    RPC_RATE_LIMITED = "1003"
    RPC_INVALID_RESPONSE = "1004"

    # Swap assembly errors
    QUOTE_FAILED = "2001"
    QUOTE_REJECTED = "2002"
    BUILD_FAILED = "2003"
    BUILD_REJECTED = "2004"
    LOOKUP_TABLE_MISSING = "2005"
    TX_DECODE_FAILED = "2006"

    # Submission errors
    SUBMISSION_FAILED = "3001"
    SUBMISSION_CANCELLED = "3002"

    # Read errors
    READ_FAILED = "4001"

    # Operation errors
    INVALID_AMOUNT = "7001"
    SWAP_IN_PROGRESS = "7002"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class PasskeySwapError(Exception):
    """
    Base exception for all Passkey Swap errors

    Attributes:
        message: Human-readable error message (safe to show to the user)
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


class RpcError(PasskeySwapError):
    """
    RPC-related errors - typically recoverable

    Raised when:
    - Connection to RPC endpoint fails
    - Request times out
    - Rate limit is hit
    - The node returns a JSON-RPC error object
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.RPC_CONNECTION_FAILED,
        original_error: Optional[Exception] = None,
        endpoint: Optional[str] = None,
    ):
        super().__init__(
            message,
            code,
            recoverable=True,
            original_error=original_error,
            details={"endpoint": endpoint} if endpoint else None,
        )
        self.endpoint = endpoint

    @property
    def rpc_error_code(self) -> Optional[int]:
        return self.details.get("rpc_error_code")

    @classmethod
    def connection_failed(cls, endpoint: str, error: Exception = None) -> "RpcError":
        return cls(
            f"Failed to connect to RPC endpoint: {endpoint}",
            ErrorCode.RPC_CONNECTION_FAILED,
            original_error=error,
            endpoint=endpoint,
        )

    @classmethod
    def timeout(cls, endpoint: str, timeout_seconds: float) -> "RpcError":
        return cls(
            f"RPC request timed out after {timeout_seconds}s",
            ErrorCode.RPC_TIMEOUT,
            endpoint=endpoint,
        )

    @classmethod
    def rate_limited(cls, endpoint: str) -> "RpcError":
        return cls(
            "RPC rate limit exceeded",
            ErrorCode.RPC_RATE_LIMITED,
            endpoint=endpoint,
        )

    @classmethod
    def from_node_error(cls, error: dict, endpoint: str) -> "RpcError":
        """Wrap a JSON-RPC error object returned by the node"""
        err = cls(
            f"RPC error: {error.get('message', error)}",
            ErrorCode.RPC_INVALID_RESPONSE,
            endpoint=endpoint,
        )
        err.details["rpc_error_code"] = error.get("code")
        err.details["rpc_error_data"] = error.get("data")
        return err

    @classmethod
    def bad_payload(cls, endpoint: str, error: Exception) -> "RpcError":
        return cls(
            f"Unreadable RPC response: {error}",
            ErrorCode.RPC_INVALID_RESPONSE,
            original_error=error,
            endpoint=endpoint,
        )


class QuoteError(PasskeySwapError):
    """
    Swap quote could not be obtained

    Raised when:
    - The quote endpoint is unreachable or answers with a non-2xx status
    - The quote response carries success=false
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.QUOTE_FAILED,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error, details=details)

    @classmethod
    def request_failed(cls, error: Optional[Exception] = None, status_code: Optional[int] = None) -> "QuoteError":
        return cls(
            "Quote failed",
            ErrorCode.QUOTE_FAILED,
            original_error=error,
            details={"status_code": status_code},
        )

    @classmethod
    def rejected(cls, msg: Optional[str] = None) -> "QuoteError":
        return cls(msg or "Quote error", ErrorCode.QUOTE_REJECTED)


class BuildError(PasskeySwapError):
    """
    Prebuilt swap transaction could not be obtained

    Raised when:
    - The build endpoint is unreachable or answers with a non-2xx status
    - The build response carries success=false or no transaction
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.BUILD_FAILED,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error, details=details)

    @classmethod
    def request_failed(cls, error: Optional[Exception] = None, status_code: Optional[int] = None) -> "BuildError":
        return cls(
            "Swap transaction failed",
            ErrorCode.BUILD_FAILED,
            original_error=error,
            details={"status_code": status_code},
        )

    @classmethod
    def rejected(cls, msg: Optional[str] = None) -> "BuildError":
        return cls(msg or "Swap error", ErrorCode.BUILD_REJECTED)

    @classmethod
    def undecodable(cls, error: Exception) -> "BuildError":
        return cls(
            f"Swap transaction could not be decoded: {error}",
            ErrorCode.TX_DECODE_FAILED,
            original_error=error,
        )


class LookupTableResolutionError(PasskeySwapError):
    """
    An address lookup table referenced by a v0 message could not be loaded

    Fatal to the swap: instructions cannot be decompiled without every table.
    """

    def __init__(
        self,
        message: str,
        address: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message,
            ErrorCode.LOOKUP_TABLE_MISSING,
            recoverable=False,
            original_error=original_error,
            details={"address": address},
        )
        self.address = address

    @classmethod
    def missing(cls, address: str, error: Optional[Exception] = None) -> "LookupTableResolutionError":
        return cls(f"Failed to fetch LUT: {address}", address=address, original_error=error)


class SubmissionError(PasskeySwapError):
    """
    The passkey signer / relay did not produce a signature

    Raised when:
    - The user cancels the passkey prompt
    - Relay simulation fails
    - The relay times out
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SUBMISSION_FAILED,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message, code, recoverable=False, original_error=original_error)

    @classmethod
    def relay_failed(cls, error: Exception) -> "SubmissionError":
        reason = getattr(error, "message", None) or str(error) or error.__class__.__name__
        code = ErrorCode.SUBMISSION_CANCELLED if "cancel" in reason.lower() else ErrorCode.SUBMISSION_FAILED
        return cls(reason, code, original_error=error)

    @classmethod
    def cancelled(cls) -> "SubmissionError":
        return cls("Signing was cancelled", ErrorCode.SUBMISSION_CANCELLED)

    @classmethod
    def no_signature(cls) -> "SubmissionError":
        return cls("Relay returned no signature", ErrorCode.SUBMISSION_FAILED)


class TransientReadError(PasskeySwapError):
    """
    Balance or activity read failed - recoverable, display-only

    Callers substitute a default value (zero balance, empty list).
    """

    def __init__(
        self,
        message: str,
        original_error: Optional[Exception] = None,
        what: Optional[str] = None,
    ):
        super().__init__(
            message,
            ErrorCode.READ_FAILED,
            recoverable=True,
            original_error=original_error,
            details={"what": what},
        )

    @classmethod
    def failed(cls, what: str, error: Exception) -> "TransientReadError":
        return cls(f"Failed to read {what}: {error}", original_error=error, what=what)


class InvalidSwapAmount(PasskeySwapError):
    """Swap amount is not a positive number"""

    def __init__(self, message: str = "Enter valid amount", amount: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.INVALID_AMOUNT,
            recoverable=False,
            details={"amount": amount},
        )


class SwapInProgress(PasskeySwapError):
    """Another swap is already in flight for this wallet"""

    def __init__(self, message: str = "A swap is already in progress"):
        super().__init__(message, ErrorCode.SWAP_IN_PROGRESS, recoverable=True)


class ConfigurationError(PasskeySwapError):
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
