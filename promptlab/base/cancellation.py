"""Cooperative cancellation for outbound streams.

A :class:`CancellationToken` is created per ``/api/chat`` request and handed
to the stream normalizer, which checks it before pulling the next provider
event. Once set it stays set; the first reason wins.
"""
from __future__ import annotations

from threading import Lock
from typing import Optional

DEFAULT_CANCEL_REASON = "client disconnected"


class StreamCancelled(RuntimeError):
    """The token was cancelled while a stream was still being pulled.

    Not to be confused with ``asyncio.CancelledError``, which signals task
    cancellation; the normalizer records both as a truncated stream.
    """

    def __init__(self, reason: str = DEFAULT_CANCEL_REASON) -> None:
        super().__init__(reason)
        self.reason = reason


class CancellationToken:
    """One-shot cancellation flag, safe to set from any thread."""

    __slots__ = ("_lock", "_reason", "_set")

    def __init__(self) -> None:
        self._lock = Lock()
        self._set = False
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._set

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> bool:
        """Set the flag; return ``False`` when it was already set."""
        with self._lock:
            if self._set:
                return False
            self._set = True
            self._reason = reason or DEFAULT_CANCEL_REASON
            return True

    def raise_if_cancelled(self) -> None:
        if self._set:
            raise StreamCancelled(self._reason or DEFAULT_CANCEL_REASON)

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"CancellationToken(cancelled={self._set}, reason={self._reason!r})"


__all__ = ["CancellationToken", "DEFAULT_CANCEL_REASON", "StreamCancelled"]
