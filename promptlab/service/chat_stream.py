from __future__ import annotations

"""
FastAPI streaming chat route.

Purpose
-------
Expose ``POST /api/chat``: validate the prompt, resolve the platform and its
credential, open the provider stream and return the normalized plain-text
byte stream.

Flow
----
1. Start metrics are taken when the handler is entered.
2. ``resolve_prompt`` / ``resolve_platform_and_key`` raise ``PromptRejected``
   (400/401) before any adapter is built; no request log entry is written.
3. The adapter's start phase runs under the start timeout. A failure there
   is answered with the upstream status (else 500) and ``{"error": ...}``,
   and exactly one log entry is dispatched.
4. Otherwise a ``StreamNormalizer`` drives the adapter and owns the log entry.

Failure after streaming began
-----------------------------
``StreamAborted`` escapes the response body iterator; the server aborts the
connection so the client never mistakes a partial body for a complete one.

Client gone before the body
---------------------------
``NormalizedStreamingResponse`` awaits ``StreamNormalizer.abandon()`` once
sending ends, however it ends, so a request whose headers never went out is
still logged once and its upstream released.
"""

from uuid import uuid4

from fastapi import Depends
from fastapi.responses import JSONResponse, StreamingResponse

from promptlab.base.errors import ProviderError
from promptlab.base.logging import LogContext, get_logger
from promptlab.base.models import PromptRequest
from promptlab.base.openai_style_parts.style_helpers import wrap_start_error
from promptlab.base.streaming import StreamMetrics, StreamNormalizer, finalize_stream
from promptlab.config import Settings
from promptlab.service.app import app
from promptlab.service.app_parts.app_core import (
    AdapterBuilder,
    ChatBody,
    get_adapter_builder,
    get_settings_dep,
    get_sink,
    resolve_platform_and_key,
    resolve_prompt,
)
from promptlab.telemetry import TelemetrySink

logger = get_logger("promptlab.service.chat")

PLAIN_TEXT_UTF8 = "text/plain; charset=utf-8"


class NormalizedStreamingResponse(StreamingResponse):
    """Plain-text streaming response that always finalizes its normalizer."""

    def __init__(self, normalizer: StreamNormalizer) -> None:
        super().__init__(normalizer.iter_bytes(), media_type=PLAIN_TEXT_UTF8)
        self.normalizer = normalizer

    async def __call__(self, scope, receive, send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.normalizer.abandon()


@app.post("/api/chat", response_model=None)
async def post_chat(
    body: ChatBody,
    sink: TelemetrySink = Depends(get_sink),
    settings: Settings = Depends(get_settings_dep),
    build_adapter: AdapterBuilder = Depends(get_adapter_builder),
) -> StreamingResponse | JSONResponse:
    """Stream the model's answer to one prompt as UTF-8 plain text."""
    metrics = StreamMetrics()
    prompt = resolve_prompt(body)
    platform, api_key = resolve_platform_and_key(body)
    model = body.model or platform.default_model
    request = PromptRequest(prompt=prompt, platform_id=platform.id, model_name=model)
    ctx = LogContext(platform=platform.id, model=model, request_id=uuid4().hex[:12]).bind(prompt_len=len(prompt))

    try:
        adapter = build_adapter(platform, api_key, proxy_url=settings.proxy_url)
        events = await adapter.open_stream(request)
    except Exception as exc:  # noqa: BLE001 - every start failure is answered and logged
        err: ProviderError = wrap_start_error(exc, provider=platform.id, model=model)
        finalize_stream(
            logger=logger,
            ctx=ctx,
            request=request,
            metrics=metrics,
            sink=sink,
            error=err.as_log_error(),
        )
        return JSONResponse({"error": err.message or "Failed to generate response"}, status_code=err.http_status())

    normalizer = StreamNormalizer(
        events=events,
        request=request,
        sink=sink,
        metrics=metrics,
        ctx=ctx,
        logger=logger,
    )
    return NormalizedStreamingResponse(normalizer)
