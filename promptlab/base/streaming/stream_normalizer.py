"""Stream normalizer: provider delta sequence → outbound byte stream.

One :class:`StreamNormalizer` serves exactly one request. It pulls the
adapter's events strictly in order, forwards every non-empty delta as UTF-8
bytes the moment it arrives, feeds :class:`StreamMetrics`, and finalizes
exactly once:

* terminal marker            → ``CLOSED``, LogEntry without error
* adapter/transport failure  → ``ERRORED``, LogEntry with error, ``StreamAborted``
* idle timeout               → ``ERRORED`` with a ``timeout`` error
* cancellation / disconnect  → ``ERRORED``, LogEntry flagged ``truncated``

``abandon()`` is the owner's last word: the HTTP response awaits it after
sending, so a body that never started still finalizes and releases the
upstream.

The next event is requested only after the previous bytes were taken by the
consumer, so the client read rate gates upstream consumption.
"""
from __future__ import annotations

import asyncio
import logging
from contextlib import suppress
from enum import Enum
from typing import AsyncIterator, Optional

from ..cancellation import DEFAULT_CANCEL_REASON, CancellationToken, StreamCancelled
from ..errors import LOG_MESSAGE_LIMIT, ErrorCode, StreamAborted, classify_exception
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import PromptRequest
from ..timeouts import get_timeout_config, operation_timeout
from .streaming import ChatStreamEvent
from .streaming_finalize import finalize_stream
from .streaming_metrics import StreamMetrics
from ...telemetry.log_entry import LogEntry
from ...telemetry.sink import TelemetrySink


class StreamPhase(str, Enum):
    """Lifecycle of one normalized stream. ``CLOSED`` and ``ERRORED`` are terminal."""

    START = "start"
    STREAMING = "streaming"
    CLOSED = "closed"
    ERRORED = "errored"


async def _next_event(iterator: AsyncIterator[ChatStreamEvent]) -> Optional[ChatStreamEvent]:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return None


class StreamNormalizer:
    """Drive one adapter's delta sequence into bytes and finalize once."""

    def __init__(
        self,
        *,
        events: AsyncIterator[ChatStreamEvent],
        request: PromptRequest,
        sink: TelemetrySink,
        metrics: Optional[StreamMetrics] = None,
        ctx: Optional[LogContext] = None,
        logger: Optional[logging.Logger] = None,
        cancellation_token: Optional[CancellationToken] = None,
        idle_timeout_seconds: Optional[float] = None,
    ) -> None:
        self._events = events
        self.request = request
        self._sink = sink
        self.metrics = metrics or StreamMetrics()
        self.ctx = ctx or LogContext(platform=request.platform_id, model=request.model_name)
        self._logger = logger or get_logger("promptlab.stream")
        self._token = cancellation_token
        if idle_timeout_seconds is None:
            idle_timeout_seconds = get_timeout_config().stream_timeout_seconds
        self._idle_timeout = idle_timeout_seconds
        self.phase = StreamPhase.START
        self.log_entry: Optional[LogEntry] = None

    @property
    def finished(self) -> bool:
        return self.phase in (StreamPhase.CLOSED, StreamPhase.ERRORED)

    async def iter_bytes(self) -> AsyncIterator[bytes]:
        """Yield encoded deltas; raise ``StreamAborted`` if the stream fails."""
        if self.phase is not StreamPhase.START:
            raise RuntimeError("a stream normalizer can only be consumed once")
        self.phase = StreamPhase.STREAMING
        iterator = self._events.__aiter__()
        try:
            while True:
                if self._token is not None:
                    self._token.raise_if_cancelled()
                event = await operation_timeout(_next_event(iterator), self._idle_timeout)
                if event is None:
                    normalized_log_event(
                        self._logger,
                        "stream.no_terminal",
                        self.ctx,
                        phase="mid_stream",
                        emitted=self.metrics.emitted > 0,
                        level=logging.WARNING,
                    )
                    break
                if event.has_text:
                    self.metrics.record_delta(event.delta)
                    self._log_delta(event.delta)
                    yield event.delta.encode("utf-8")
                if event.finish:
                    break
        except StreamCancelled as exc:
            self._fail(ErrorCode.CANCELLED, str(exc), truncated=True)
            raise StreamAborted(ErrorCode.CANCELLED, str(exc), cause=exc) from exc
        except (asyncio.CancelledError, GeneratorExit):
            if self._token is not None:
                self._token.cancel(DEFAULT_CANCEL_REASON)
            self._fail(ErrorCode.CANCELLED, DEFAULT_CANCEL_REASON, truncated=True)
            raise
        except Exception as exc:  # noqa: BLE001 - every upstream failure aborts the response
            code = classify_exception(exc)
            self._fail(code, str(exc), truncated=self.metrics.emitted > 0)
            raise StreamAborted(code, str(exc), cause=exc) from exc
        finally:
            await self._close_upstream(iterator)
        self._close()

    async def abandon(self, reason: str = DEFAULT_CANCEL_REASON) -> None:
        """Finalize a stream whose response body was never fully consumed.

        Covers a body that never started (the client left before the headers
        went out) and one left suspended mid-stream. No-op once finished.
        """
        if self.finished:
            return
        if self._token is not None:
            self._token.cancel(reason)
        self._fail(ErrorCode.CANCELLED, reason, truncated=True)
        await self._close_upstream(self._events)

    # ----- transitions -----

    def _close(self) -> None:
        if self.finished:
            return
        self.phase = StreamPhase.CLOSED
        self.log_entry = finalize_stream(
            logger=self._logger,
            ctx=self.ctx,
            request=self.request,
            metrics=self.metrics,
            sink=self._sink,
        )

    def _fail(self, code: ErrorCode, message: str, *, truncated: bool) -> None:
        if self.finished:
            return
        self.phase = StreamPhase.ERRORED
        self.log_entry = finalize_stream(
            logger=self._logger,
            ctx=self.ctx,
            request=self.request,
            metrics=self.metrics,
            sink=self._sink,
            error=f"{code.value}:{message[:LOG_MESSAGE_LIMIT]}",
            truncated=truncated,
        )

    # ----- helpers -----

    @staticmethod
    async def _close_upstream(iterator: AsyncIterator[ChatStreamEvent]) -> None:
        aclose = getattr(iterator, "aclose", None)
        if callable(aclose):
            with suppress(Exception):
                await aclose()

    def _log_delta(self, delta: str) -> None:
        if self._logger.isEnabledFor(logging.DEBUG):
            normalized_log_event(
                self._logger,
                "stream.delta",
                self.ctx,
                phase="mid_stream",
                emitted=True,
                level=logging.DEBUG,
                delta_len=len(delta),
            )


__all__ = ["StreamNormalizer", "StreamPhase"]
