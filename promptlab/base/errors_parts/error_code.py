"""
Normalized error codes (taxonomy).

Defines the `ErrorCode` enumeration used by provider adapters, the stream
normalizer and the HTTP layer. Values are lowercase snake_case and appear as
the prefix of the ``error`` field of persisted log entries
(``"<code>:<message>"``), so they are a stable public contract.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    SERVER_ERROR = "server_error"
    INTERNAL = "internal"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
