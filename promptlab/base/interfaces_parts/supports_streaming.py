"""SupportsStreaming Protocol (single-class module).

The one capability every provider adapter implements: open an upstream
stream for a prompt and expose it as an async delta sequence.
"""

from __future__ import annotations

from typing import AsyncIterator, Protocol, runtime_checkable

from ..models import PromptRequest
from ..streaming.streaming import ChatStreamEvent


@runtime_checkable
class SupportsStreaming(Protocol):
    """Provider adapter contract.

    ``open_stream`` performs the start phase (the upstream call) and raises
    ``ProviderError`` when it fails. The returned iterator yields zero or more
    delta events (``finish=False``) then exactly one terminal event
    (``finish=True``). Transport errors during iteration propagate to the
    consumer unchanged.
    """

    @property
    def provider_name(self) -> str:  # pragma: no cover - interface
        """Platform id served by this adapter."""
        ...

    async def open_stream(self, request: PromptRequest) -> AsyncIterator[ChatStreamEvent]:  # pragma: no cover - interface
        """Start the upstream call and return its delta sequence."""
        ...
