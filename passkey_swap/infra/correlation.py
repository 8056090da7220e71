"""
Correlation IDs for swap tracing

A swap attempt runs inside one CorrelationContext; log_stage stamps every
quote / build / normalize / submit line with its ID.
"""

import logging
import uuid
import contextvars
from typing import Optional

logger = logging.getLogger(__name__)

_current_id: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("swap_correlation_id", default=None)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex[:12]


def get_correlation_id() -> Optional[str]:
    return _current_id.get()


def set_correlation_id(correlation_id: Optional[str]) -> contextvars.Token:
    """Bind an ID to the current context; pass the token to reset it"""
    return _current_id.set(correlation_id)


class CorrelationContext:
    """
    Scope a fresh correlation ID, restoring the outer one on exit

    Usage:
        with CorrelationContext("swap") as cid:
            log_stage(logging.INFO, "Requesting quote", "quote")
    """

    def __init__(self, prefix: Optional[str] = None):
        suffix = generate_correlation_id()
        self.correlation_id = f"{prefix}_{suffix}" if prefix else suffix
        self._token: Optional[contextvars.Token] = None

    def __enter__(self) -> str:
        self._token = set_correlation_id(self.correlation_id)
        return self.correlation_id

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._token is not None:
            _current_id.reset(self._token)
            self._token = None


def log_stage(level: int, message: str, stage: str, log: Optional[logging.Logger] = None, **extra):
    """
    Log message as "[<correlation id>] [<stage>] message"

    The ID and stage are also attached to the record as correlation_id and
    stage, along with any extra fields.
    """
    cid = get_correlation_id()
    prefix = f"[{cid}] [{stage}]" if cid else f"[{stage}]"
    (log or logger).log(level, f"{prefix} {message}", extra={"correlation_id": cid, "stage": stage, **extra})
