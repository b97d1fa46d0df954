"""Append-only JSON-lines telemetry sink, one file per UTC calendar day."""
from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .log_entry import LogEntry

# One lock per process: entries from concurrent requests never interleave.
_WRITE_LOCK = threading.Lock()


class JsonlTelemetrySink:
    """Write each :class:`LogEntry` as one JSON line to ``<log_dir>/YYYY-MM-DD.jsonl``."""

    def __init__(self, log_dir: Union[str, Path]) -> None:
        self.log_dir = Path(log_dir)

    def path_for(self, moment: Optional[datetime] = None) -> Path:
        day = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc).strftime("%Y-%m-%d")
        return self.log_dir / f"{day}.jsonl"

    def log(self, entry: LogEntry) -> None:
        line = json.dumps(entry.to_dict(), ensure_ascii=False, separators=(",", ":")) + "\n"
        with _WRITE_LOCK:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            with self.path_for().open("a", encoding="utf-8") as fh:
                fh.write(line)


__all__ = ["JsonlTelemetrySink"]
