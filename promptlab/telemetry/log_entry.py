"""LogEntry record persisted once per request by the telemetry sink."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, Optional

if TYPE_CHECKING:
    from ..base.streaming.streaming_metrics import MetricsRecord


def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """Return a millisecond-precision UTC ISO-8601 timestamp (``...T..:..:..mmmZ``)."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


@dataclass(frozen=True)
class LogEntry:
    """Finished request record.

    ``error`` is present only on failure paths. ``truncated`` marks a stream
    cut short by a client disconnect or a mid-stream failure; ``response``
    then holds the partial text that was delivered.
    """

    timestamp: str
    model: str
    prompt: str
    response: str
    metrics: MetricsRecord
    error: Optional[str] = None
    truncated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "model": self.model,
            "prompt": self.prompt,
            "response": self.response,
        }
        if self.error is not None:
            data["error"] = self.error
        if self.truncated:
            data["truncated"] = True
        data["metrics"] = self.metrics.to_dict()
        return data


__all__ = ["LogEntry", "iso_timestamp"]
