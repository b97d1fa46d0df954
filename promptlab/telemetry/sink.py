"""Telemetry sink contract and fire-and-forget dispatch.

The request path never awaits the sink. ``dispatch_log_entry`` submits the
write to the event loop's default executor; the background job reports a
failure on the operational logger itself. Nothing is re-raised or retried.
"""
from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Future
from typing import Optional, Protocol, Union, runtime_checkable

from ..base.logging import get_logger, log_event
from .log_entry import LogEntry

_logger = get_logger("promptlab.telemetry")


@runtime_checkable
class TelemetrySink(Protocol):
    """Best-effort persistence for finished request records."""

    def log(self, entry: LogEntry) -> None:  # pragma: no cover - interface
        """Persist ``entry``; may raise, callers go through ``dispatch_log_entry``."""
        ...


def report_sink_failure(entry: LogEntry, exc: BaseException) -> None:
    """Print a failed write and the entry itself to the operational console."""
    log_event(
        _logger,
        "telemetry.write.error",
        level=logging.ERROR,
        failure_class=exc.__class__.__name__,
        error=str(exc),
        entry=entry.to_dict(),
    )


def write_log_entry(sink: TelemetrySink, entry: LogEntry) -> bool:
    """Synchronously write ``entry``; return False (after reporting) on failure."""
    try:
        sink.log(entry)
    except Exception as exc:  # noqa: BLE001 - sink failures never reach the caller
        report_sink_failure(entry, exc)
        return False
    return True


def dispatch_log_entry(
    sink: TelemetrySink, entry: LogEntry
) -> Optional[Union["asyncio.Future[bool]", Future]]:
    """Submit ``entry`` for writing without blocking the caller.

    Returns the pending future when a running loop is available. Outside an
    event loop the write happens inline and ``None`` is returned.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        write_log_entry(sink, entry)
        return None
    return loop.run_in_executor(None, write_log_entry, sink, entry)


__all__ = [
    "TelemetrySink",
    "dispatch_log_entry",
    "write_log_entry",
    "report_sink_failure",
]
