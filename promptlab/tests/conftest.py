"""Pytest configuration for the promptlab test suite.

Provides a deterministic wall clock, in-memory telemetry sinks, operational
log capture and an environment scrubbed of credentials and overrides.
"""

from __future__ import annotations

import json
import logging
import threading
import time
from typing import Any, Dict, Iterator, List

import pytest

from promptlab.base.logging import BASE_LOGGER_NAME, get_logger
import promptlab.config as config_mod
from promptlab.config import reset_platform_cache
from promptlab.telemetry import LogEntry

_SCRUBBED_ENV = (
    "DASHSCOPE_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "HTTPS_PROXY",
    "https_proxy",
    "PROMPTLAB_PLATFORMS_FILE",
    "PROMPTLAB_LOG_DIR",
    "PROMPTLAB_CORS_ORIGINS",
    "PROMPTLAB_HOST",
    "PROMPTLAB_PORT",
    "PROMPTLAB_RELOAD",
    "PROMPTLAB_TIMEOUT_START_SECONDS",
    "PROMPTLAB_TIMEOUT_STREAM_SECONDS",
    "PROMPTLAB_TIMEOUT_HTTP_SECONDS",
    "DOTENV_FILE",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run every test without ambient credentials or config overrides."""
    for name in _SCRUBBED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_mod, "_DOTENV_LOADED", True)
    reset_platform_cache()
    yield
    reset_platform_cache()


class FakeClock:
    """Integer-millisecond wall clock driving ``time.time_ns``."""

    def __init__(self, start_ms: int) -> None:
        self.ms = start_ms

    def advance(self, ms: int) -> None:
        self.ms += ms

    def time_ns(self) -> int:
        return self.ms * 1_000_000


@pytest.fixture()
def fake_clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Provide a deterministic clock; ``fake_clock.advance(ms)`` moves it."""
    clock = FakeClock(1_700_000_000_000)
    monkeypatch.setattr(time, "time_ns", clock.time_ns)
    return clock


class MemorySink:
    """Telemetry sink keeping entries in memory; safe across threads."""

    def __init__(self) -> None:
        self.entries: List[LogEntry] = []
        self._cond = threading.Condition()

    def log(self, entry: LogEntry) -> None:
        with self._cond:
            self.entries.append(entry)
            self._cond.notify_all()

    def wait_for(self, count: int, timeout: float = 2.0) -> List[LogEntry]:
        with self._cond:
            self._cond.wait_for(lambda: len(self.entries) >= count, timeout=timeout)
            return list(self.entries)


class FailingSink:
    """Telemetry sink whose writes always fail."""

    def __init__(self) -> None:
        self.attempts = 0

    def log(self, entry: LogEntry) -> None:
        self.attempts += 1
        raise OSError("disk full")


@pytest.fixture()
def memory_sink() -> MemorySink:
    return MemorySink()


@pytest.fixture()
def failing_sink() -> FailingSink:
    return FailingSink()


class LogCapture(list):
    """Captured records plus a helper decoding the JSON payloads."""

    def payloads(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for record in list(self):
            try:
                out.append(json.loads(record.getMessage()))
            except ValueError:
                continue
        return out

    def events(self) -> List[str]:
        return [p.get("event") for p in self.payloads()]


@pytest.fixture()
def log_capture() -> Iterator[LogCapture]:
    """Capture records emitted on the shared ``promptlab`` logger."""
    records = LogCapture()
    base = get_logger(BASE_LOGGER_NAME)
    handler = logging.Handler(level=logging.DEBUG)
    handler.emit = records.append  # type: ignore[method-assign]
    base.addHandler(handler)
    try:
        yield records
    finally:
        base.removeHandler(handler)
