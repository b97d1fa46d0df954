"""Streaming package for the provider layer.

Exposes the delta event type, metrics, finalization and the stream normalizer
under a single namespace.
"""

from .streaming import ChatStreamEvent, EventStream, terminal_event
from .streaming_metrics import MetricsRecord, StreamMetrics, compute_metrics, now_ms
from .streaming_finalize import finalize_stream
from .stream_normalizer import StreamNormalizer, StreamPhase

__all__ = [
    "ChatStreamEvent",
    "EventStream",
    "terminal_event",
    "MetricsRecord",
    "StreamMetrics",
    "compute_metrics",
    "now_ms",
    "finalize_stream",
    "StreamNormalizer",
    "StreamPhase",
]
