"""Streaming metrics data structures.

``StreamMetrics`` is the mutable per-request timing state owned by one stream
normalizer. ``MetricsRecord`` is the read-only snapshot derived from it (or
from pre-computed batch results) by the pure function :func:`compute_metrics`.

All timestamps are integer epoch milliseconds and all durations integer
milliseconds. ``token_count`` is a character count of the response text, an
approximation of the real token count.
"""
from __future__ import annotations

import math
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def now_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class MetricsRecord:
    """Latency and throughput figures for one finished request."""

    start_time: int
    end_time: int
    total_time: int
    token_count: int
    first_token_time: Optional[int] = None
    first_token_latency: Optional[int] = None
    generation_time: Optional[int] = None
    tokens_per_second: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return the persisted (camelCase) form used in the JSONL log."""
        return {
            "startTime": self.start_time,
            "firstTokenTime": self.first_token_time,
            "endTime": self.end_time,
            "totalTime": self.total_time,
            "firstTokenLatency": self.first_token_latency,
            "generationTime": self.generation_time,
            "tokenCount": self.token_count,
            "tokensPerSecond": self.tokens_per_second,
        }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_metrics(
    *,
    start_time: int,
    end_time: int,
    first_token_time: Optional[int],
    token_count: int,
) -> MetricsRecord:
    """Derive a :class:`MetricsRecord` from the three observed timestamps.

    Without a first token, latency, generation time and throughput are all
    absent. Throughput is only defined for a strictly positive generation
    time.
    """
    first_token_latency: Optional[int] = None
    generation_time: Optional[int] = None
    tokens_per_second: Optional[int] = None
    if first_token_time is not None:
        first_token_latency = first_token_time - start_time
        generation_time = end_time - first_token_time
        if generation_time > 0:
            tokens_per_second = _round_half_up(token_count / (generation_time / 1000))
    return MetricsRecord(
        start_time=start_time,
        end_time=end_time,
        total_time=end_time - start_time,
        token_count=token_count,
        first_token_time=first_token_time,
        first_token_latency=first_token_latency,
        generation_time=generation_time,
        tokens_per_second=tokens_per_second,
    )


@dataclass
class StreamMetrics:
    """Timing state for a single provider stream.

    The clock is read at exactly three events: construction (request
    accepted), the first non-empty delta and the terminal event.
    """

    start_time: int = field(default_factory=now_ms)
    first_token_time: Optional[int] = None
    end_time: Optional[int] = None
    emitted: int = 0
    _parts: List[str] = field(default_factory=list, repr=False)

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def token_count(self) -> int:
        return sum(len(p) for p in self._parts)

    def record_delta(self, text: str) -> None:
        """Account for one forwarded non-empty delta."""
        if not text:
            return
        if self.first_token_time is None:
            self.first_token_time = now_ms()
        self._parts.append(text)
        self.emitted += 1

    def mark_end(self) -> bool:
        """Stamp the terminal time once; return False when already stamped."""
        if self.end_time is not None:
            return False
        self.end_time = now_ms()
        return True

    def snapshot(self) -> MetricsRecord:
        """Return the derived record; the stream must have ended."""
        if self.end_time is None:
            raise RuntimeError("stream metrics snapshot requested before end of stream")
        return compute_metrics(
            start_time=self.start_time,
            end_time=self.end_time,
            first_token_time=self.first_token_time,
            token_count=self.token_count,
        )


__all__ = [
    "MetricsRecord",
    "StreamMetrics",
    "compute_metrics",
    "now_ms",
]
