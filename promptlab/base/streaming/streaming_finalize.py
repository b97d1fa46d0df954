"""Finalize stream helper.

Localizes the terminal bookkeeping of one request: snapshot the metrics,
build the :class:`LogEntry`, emit the consolidated lifecycle log line and hand
the entry to the telemetry sink without waiting for it.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..logging import LogContext, normalized_log_event
from ..models import PromptRequest
from .streaming_metrics import StreamMetrics
from ...telemetry.log_entry import LogEntry, iso_timestamp
from ...telemetry.sink import TelemetrySink, dispatch_log_entry


def finalize_stream(
    *,
    logger: logging.Logger,
    ctx: LogContext,
    request: PromptRequest,
    metrics: StreamMetrics,
    sink: TelemetrySink,
    error: Optional[str] = None,
    truncated: bool = False,
) -> LogEntry:
    """Stamp the end time, log the outcome and dispatch the request's LogEntry."""
    metrics.mark_end()
    record = metrics.snapshot()
    entry = LogEntry(
        timestamp=iso_timestamp(),
        model=request.model_name,
        prompt=request.prompt,
        response=metrics.text,
        metrics=record,
        error=error,
        truncated=truncated,
    )
    error_code: Optional[str] = None
    if error and ":" in error:
        error_code = error.split(":", 1)[0].strip() or None
    normalized_log_event(
        logger,
        "stream.end" if error is None else "stream.error",
        ctx,
        phase="finalize",
        emitted=metrics.emitted > 0,
        error_code=error_code,
        level=logging.INFO if error is None else logging.WARNING,
        emitted_count=metrics.emitted,
        first_token_latency_ms=record.first_token_latency,
        total_time_ms=record.total_time,
        token_count=record.token_count,
        truncated=truncated or None,
        error=error,
    )
    dispatch_log_entry(sink, entry)
    return entry


__all__ = ["finalize_stream"]
