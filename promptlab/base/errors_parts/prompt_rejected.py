"""Client input rejection raised before any provider adapter is built."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class PromptRejected(Exception):
    """Inbound request refused synchronously (empty prompt, unknown platform, missing key).

    Attributes:
        status_code: HTTP status returned to the caller (400 or 401).
        message: Text placed in the ``{"error": ...}`` payload.
    """

    status_code: int
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


__all__ = ["PromptRejected"]
