from __future__ import annotations

"""
Batch result logging route.

``POST /api/log-batch`` records a finished batch run in the request log:
one summary entry for the batch, then one entry per completed result that
carries an ``endTime`` and one per failed result. Results still pending or
running are skipped.

Writes happen synchronously (the route runs in the threadpool) so a failed
write can be reported to the caller as ``500 {"success": false}``.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List

from fastapi import Depends
from fastapi.responses import JSONResponse

from promptlab.base.logging import get_logger, log_event
from promptlab.base.streaming import MetricsRecord, compute_metrics, now_ms
from promptlab.service.app import app
from promptlab.service.app_parts.app_core import BatchLogRequest, BatchTestResult, get_sink
from promptlab.telemetry import LogEntry, TelemetrySink, iso_timestamp

logger = get_logger("promptlab.service.batch")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _epoch_ms(timestamp: str) -> int:
    moment = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return (moment - _EPOCH) // timedelta(milliseconds=1)


def build_summary_entry(body: BatchLogRequest) -> LogEntry:
    """Return the batch summary entry; throughput is reported as 0."""
    end = now_ms()
    metrics = MetricsRecord(
        start_time=_epoch_ms(body.timestamp),
        end_time=end,
        total_time=body.duration,
        token_count=sum(len(r.response or "") for r in body.results),
        tokens_per_second=0,
    )
    return LogEntry(
        timestamp=iso_timestamp(),
        model=body.model,
        prompt=f"Batch Test: {body.promptTemplate}",
        response=f"Batch completed with {len(body.results)} tests",
        metrics=metrics,
    )


def build_result_entry(result: BatchTestResult) -> LogEntry | None:
    """Return the entry for one result, or ``None`` when it is not final."""
    if result.status == "completed" and result.endTime is not None:
        response = result.response or ""
        return LogEntry(
            timestamp=iso_timestamp(),
            model=result.model,
            prompt=result.prompt,
            response=response,
            metrics=compute_metrics(
                start_time=result.startTime,
                end_time=result.endTime,
                first_token_time=result.firstTokenTime,
                token_count=len(response),
            ),
        )
    if result.status == "error":
        return LogEntry(
            timestamp=iso_timestamp(),
            model=result.model,
            prompt=result.prompt,
            response="",
            error=result.error or "Unknown error",
            metrics=compute_metrics(
                start_time=result.startTime,
                end_time=result.endTime if result.endTime is not None else now_ms(),
                first_token_time=None,
                token_count=0,
            ),
        )
    return None


def build_batch_entries(body: BatchLogRequest) -> List[LogEntry]:
    entries = [build_summary_entry(body)]
    for result in body.results:
        entry = build_result_entry(result)
        if entry is not None:
            entries.append(entry)
    return entries


@app.post("/api/log-batch", response_model=None)
def post_log_batch(body: BatchLogRequest, sink: TelemetrySink = Depends(get_sink)) -> Dict[str, Any] | JSONResponse:
    """Persist a batch run's summary and per-result entries."""
    try:
        entries = build_batch_entries(body)
        for entry in entries:
            sink.log(entry)
    except Exception as exc:  # noqa: BLE001 - reported to the caller as 500
        log_event(
            logger,
            "batch.log.error",
            level=logging.ERROR,
            test_id=body.testId,
            failure_class=exc.__class__.__name__,
            error=str(exc),
        )
        return JSONResponse({"success": False, "error": "Failed to log batch results"}, status_code=500)
    log_event(logger, "batch.logged", test_id=body.testId, entries=len(entries))
    return {"success": True}
