"""Telemetry package: request log records and their best-effort persistence."""

from .log_entry import LogEntry, iso_timestamp
from .sink import TelemetrySink, dispatch_log_entry, write_log_entry, report_sink_failure
from .jsonl_sink import JsonlTelemetrySink

__all__ = [
    "LogEntry",
    "iso_timestamp",
    "TelemetrySink",
    "dispatch_log_entry",
    "write_log_entry",
    "report_sink_failure",
    "JsonlTelemetrySink",
]
