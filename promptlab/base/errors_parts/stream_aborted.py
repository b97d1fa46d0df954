"""Exception signalling that an outbound stream ended in the error state."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode


class StreamAborted(RuntimeError):
    """Raised by the stream normalizer after a failed stream was finalized.

    The HTTP layer lets it escape the response body iterator so the server
    aborts the connection; a partial body is never presented as complete.
    The log entry for the request has already been dispatched when this is
    raised.
    """

    def __init__(self, code: ErrorCode, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"{code.value}:{message}")
        self.code = code
        self.message = message
        self.cause = cause


__all__ = ["StreamAborted"]
