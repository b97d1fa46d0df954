"""Unified timeout configuration for provider streams.

Key Components
--------------
TimeoutConfig
    Dataclass capturing normalized timeout values in seconds.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use and again whenever one of the variables changes. Supported
    environment variables (all optional):
        PROMPTLAB_TIMEOUT_START_SECONDS
        PROMPTLAB_TIMEOUT_STREAM_SECONDS
        PROMPTLAB_TIMEOUT_HTTP_SECONDS

operation_timeout(awaitable, seconds)
    Await ``awaitable`` under a wall-clock ceiling. ``seconds <= 0`` disables
    the guard.

Failure Modes
-------------
``TimeoutError`` is raised when the deadline elapses; ``classify_exception``
maps it to ``ErrorCode.TIMEOUT``.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
import os
from typing import Awaitable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        start_timeout_seconds: Ceiling for opening the upstream stream (the
            call that returns the first response headers).
        stream_timeout_seconds: Idle ceiling while waiting for the next
            upstream chunk.
        http_timeout_seconds: Timeout handed to the HTTP clients the adapters
            construct.
    """

    start_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0
    http_timeout_seconds: float = 120.0


_ENV_NAMES = (
    "PROMPTLAB_TIMEOUT_START_SECONDS",
    "PROMPTLAB_TIMEOUT_STREAM_SECONDS",
    "PROMPTLAB_TIMEOUT_HTTP_SECONDS",
)
_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Return the positive float held by ``name`` or ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    cur_guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == cur_guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        start_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.start_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.stream_timeout_seconds),
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.http_timeout_seconds),
    )
    _ENV_GUARD = cur_guard
    return _CACHED


async def operation_timeout(awaitable: Awaitable[T], seconds: float) -> T:
    """Await ``awaitable``, raising ``TimeoutError`` after ``seconds``."""
    if seconds <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError as exc:
        raise TimeoutError(f"operation exceeded {seconds}s") from exc


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "operation_timeout",
]
