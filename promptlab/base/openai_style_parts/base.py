"""BaseOpenAIStyleProvider: shared adapter for OpenAI-compatible platforms.

Purpose:
- Provide a reusable base class for platforms exposing an OpenAI-compatible
  Chat Completions interface (DashScope compatible mode and friends).

External dependencies:
- Relies on the SDK client returned by ``_make_client`` in subclasses. This
  module does not perform network I/O directly; it orchestrates SDK calls.

Timeout strategy:
- Wraps only the start phase in ``operation_timeout`` using
  ``get_timeout_config().start_timeout_seconds``. The idle ceiling between
  chunks is enforced by the stream normalizer.

Terminal semantics:
- The first chunk carrying a ``finish_reason`` ends the sequence. An upstream
  that runs dry without one still gets a synthesized terminal event and a
  warning log line.

Release:
- The returned ``EventStream`` releases the upstream response and the HTTP
  client on ``aclose`` even when iteration never started.
"""

from __future__ import annotations

import logging
from contextlib import suppress
from typing import Any, AsyncIterator, Optional

import httpx

from ..http import aclose_quietly
from ..interfaces import SupportsStreaming
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import PromptRequest
from ..streaming.streaming import ChatStreamEvent, EventStream, terminal_event
from ..timeouts import get_timeout_config, operation_timeout
from .provider_init import _ProviderInit
from .style_helpers import build_stream_params, translate_stream_chunk, wrap_start_error


class BaseOpenAIStyleProvider(SupportsStreaming):
    """Reusable base class for OpenAI-compatible providers.

    Subclasses must implement ``_make_client()`` returning an SDK client
    with an async ``chat.completions.create``; they may set
    ``self._http_client`` so the transport is released with the stream.
    """

    def __init__(self, init: _ProviderInit) -> None:
        self._provider_name = init.provider_name
        self._api_key = init.api_key
        self._base_url = init.base_url
        self._model = init.default_model
        self._proxy_url = init.proxy_url
        self._temperature = init.temperature
        self._logger = get_logger(init.logger_name)
        self._http_client: Optional[httpx.AsyncClient] = None

    # ----- Abstract surface -----
    @property
    def provider_name(self) -> str:
        """Return the platform id (e.g., ``dashscope``)."""
        return self._provider_name

    def _make_client(self) -> Any:  # pragma: no cover - abstract
        """Create and return the underlying SDK client."""
        raise NotImplementedError

    def default_model(self) -> str:
        return self._model

    # ----- Streaming -----

    async def open_stream(self, request: PromptRequest) -> AsyncIterator[ChatStreamEvent]:
        """Start a streaming completion; raise ``ProviderError`` on failure."""
        model = request.model_name or self._model
        ctx = LogContext(platform=self.provider_name, model=model)
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            emitted=False,
            prompt_len=len(request.prompt),
            proxy=bool(self._proxy_url),
        )
        client = self._make_client()
        params = build_stream_params(model, request.prompt, temperature=self._temperature)
        try:
            upstream = await operation_timeout(
                client.chat.completions.create(**params),
                get_timeout_config().start_timeout_seconds,
            )
        except Exception as exc:
            await aclose_quietly(self._http_client)
            err = wrap_start_error(exc, provider=self.provider_name, model=model)
            normalized_log_event(
                self._logger,
                "stream.start.error",
                ctx,
                phase="start",
                emitted=False,
                error_code=err.code.value,
                level=logging.WARNING,
                status_code=err.status_code,
                error=err.message,
            )
            raise err from exc
        return EventStream(self._iter_events(upstream, model, ctx), on_close=lambda: self._release(upstream))

    async def _iter_events(self, upstream: Any, model: str, ctx: LogContext) -> AsyncIterator[ChatStreamEvent]:
        finish_reason: Optional[str] = None
        try:
            async for chunk in upstream:
                content, reason = translate_stream_chunk(chunk)
                if content:
                    yield ChatStreamEvent(provider=self.provider_name, model=model, delta=content, raw=chunk)
                if reason:
                    finish_reason = reason
                    break
            if finish_reason is None:
                normalized_log_event(
                    self._logger,
                    "stream.finish_missing",
                    ctx,
                    phase="mid_stream",
                    level=logging.WARNING,
                )
            yield terminal_event(self.provider_name, model, finish_reason or "stop")
        finally:
            await self._release(upstream)

    async def _release(self, upstream: Any) -> None:
        close = getattr(upstream, "close", None)
        if callable(close):
            with suppress(Exception):
                result = close()
                if hasattr(result, "__await__"):
                    await result
        await aclose_quietly(self._http_client)


__all__ = ["BaseOpenAIStyleProvider"]
