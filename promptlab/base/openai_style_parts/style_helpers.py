"""
Helper utilities for OpenAI-style Chat Completions providers.

Purpose:
- Build the streaming ``chat.completions.create`` parameters for a single
  user prompt.
- Translate one streamed SDK chunk into ``(delta, finish_reason)``.
- Wrap start-phase SDK exceptions into ``ProviderError``.

No network I/O happens here; functions only prepare inputs or interpret
outputs.
"""

from __future__ import annotations

import typing as _t

from ..errors import ProviderError, classify_exception, extract_status


def build_stream_params(model: str, prompt: str, *, temperature: float) -> dict:
    """Return kwargs for a streaming chat completion with one user message."""
    return {
        "model": model,
        "messages": [{"role": "user", "content": prompt}],
        "stream": True,
        "temperature": temperature,
    }


def translate_stream_chunk(chunk: _t.Any) -> tuple[_t.Optional[str], _t.Optional[str]]:
    """Return ``(content_delta, finish_reason)`` for one streamed chunk.

    Chunks without choices (usage-only frames some platforms append) map to
    ``(None, None)``. Non-string content is ignored.
    """
    choices = getattr(chunk, "choices", None) or []
    if not choices:
        return None, None
    choice = choices[0]
    delta = getattr(choice, "delta", None)
    content = getattr(delta, "content", None) if delta is not None else None
    finish_reason = getattr(choice, "finish_reason", None)
    return (content if isinstance(content, str) else None), finish_reason


def wrap_start_error(exc: Exception, *, provider: str, model: str) -> ProviderError:
    """Classify a start-phase exception into a :class:`ProviderError`."""
    if isinstance(exc, ProviderError):
        return exc
    return ProviderError(
        code=classify_exception(exc),
        message=str(exc) or exc.__class__.__name__,
        provider=provider,
        model=model,
        status_code=extract_status(exc),
        raw=exc,
    )


__all__ = [
    "build_stream_params",
    "translate_stream_chunk",
    "wrap_start_error",
]
