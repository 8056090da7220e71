"""
Error definitions for Passkey Swap
"""

from .exceptions import (
    ErrorCode,
    PasskeySwapError,
    RpcError,
    QuoteError,
    BuildError,
    LookupTableResolutionError,
    SubmissionError,
    TransientReadError,
    InvalidSwapAmount,
    SwapInProgress,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "PasskeySwapError",
    "RpcError",
    "QuoteError",
    "BuildError",
    "LookupTableResolutionError",
    "SubmissionError",
    "TransientReadError",
    "InvalidSwapAmount",
    "SwapInProgress",
    "ConfigurationError",
]
