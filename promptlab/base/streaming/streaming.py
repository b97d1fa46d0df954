"""Streaming primitives shared by provider adapters and the normalizer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Optional


@dataclass(frozen=True)
class ChatStreamEvent:
    """One item of a provider adapter's delta sequence.

    Fields:
      provider: platform id the adapter serves
      model: model id/name
      delta: textual delta; may be empty (skipped chunk) or ``None`` on the
        terminal event
      finish: True only on the terminal marker, which is always the last
        event an adapter yields
      finish_reason: upstream finish reason carried by the terminal event
      raw: provider SDK chunk (optional, for debugging)
    """

    provider: str
    model: str
    delta: str | None
    finish: bool = False
    finish_reason: str | None = None
    raw: Any | None = None

    @property
    def has_text(self) -> bool:
        return bool(self.delta)


def terminal_event(provider: str, model: str, finish_reason: str = "stop") -> ChatStreamEvent:
    """Return the uniform end-of-stream marker."""
    return ChatStreamEvent(provider=provider, model=model, delta=None, finish=True, finish_reason=finish_reason)


class EventStream:
    """An adapter's event sequence plus the hook releasing its transport.

    Closing a generator that was never started does not run its ``finally``
    block, so ``aclose`` calls ``on_close`` itself. The hook runs at most once.
    """

    def __init__(
        self,
        events: AsyncIterator[ChatStreamEvent],
        on_close: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self._events = events
        self._on_close = on_close
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> ChatStreamEvent:
        return await self._events.__anext__()

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            aclose = getattr(self._events, "aclose", None)
            if aclose is not None:
                await aclose()
        finally:
            if self._on_close is not None:
                await self._on_close()


__all__ = [
    "ChatStreamEvent",
    "EventStream",
    "terminal_event",
]
