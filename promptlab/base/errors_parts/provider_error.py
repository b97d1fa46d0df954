"""Failure raised by an adapter while opening the upstream stream."""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode

LOG_MESSAGE_LIMIT = 260


class ProviderError(Exception):
    """A start-phase failure with its normalized code.

    ``status_code`` is the upstream HTTP status when the SDK exposed one; the
    chat route answers with it. ``raw`` keeps the SDK exception for the
    operational log.
    """

    def __init__(
        self,
        *,
        code: ErrorCode,
        message: str,
        provider: str,
        model: Optional[str] = None,
        status_code: Optional[int] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.provider = provider
        self.model = model
        self.status_code = status_code
        self.raw = raw

    def __str__(self) -> str:
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"

    def http_status(self) -> int:
        """Status for the HTTP answer: the upstream's when it is an error, else 500."""
        if self.status_code is not None and self.status_code >= 400:
            return self.status_code
        return 500

    def as_log_error(self) -> str:
        """Return the ``"<code>:<message>"`` form stored on log entries."""
        return f"{self.code.value}:{self.message[:LOG_MESSAGE_LIMIT]}"


__all__ = ["LOG_MESSAGE_LIMIT", "ProviderError"]
