"""GeminiProvider adapter.

Uses google-generativeai's ``GenerativeModel.generate_content_async`` with
``stream=True`` and the raw prompt string.

Chunk handling differs from the OpenAI-compatible platforms:

* the SDK signals the end of the stream only by exhaustion, so the adapter
  synthesizes the terminal event;
* reading ``chunk.text`` raises when a chunk was blocked by the safety
  filters (or carries no text part). :func:`extract_chunk_text` turns that
  into an empty delta and a WARNING log line instead of an aborted stream.

The SDK keeps its credentials process-wide (``genai.configure``) and routes
through gRPC, which reads the egress proxy from the ``HTTPS_PROXY``
environment variable itself; ``proxy_url`` is therefore informational here.
"""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Optional

import google.generativeai as genai

from ..base.errors import LOG_MESSAGE_LIMIT, ProviderError
from ..base.interfaces import SupportsStreaming
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import PromptRequest
from ..base.openai_style_parts.style_helpers import wrap_start_error
from ..base.streaming import ChatStreamEvent, terminal_event
from ..base.timeouts import get_timeout_config, operation_timeout
from ..config.defaults import GEMINI_MODELS

_logger = get_logger("providers.gemini")


def extract_chunk_text(
    chunk: Any,
    *,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
) -> Optional[str]:
    """Return the text carried by one streaming chunk, or ``None``.

    Calls ``chunk.text`` when it is a method, otherwise reads it as a
    property. Any exception raised while doing so (safety-filter rejection,
    empty candidate) is logged at WARNING and yields ``None`` so the stream
    continues.
    """
    try:
        text = chunk.text
        if callable(text):
            text = text()
    except Exception as exc:  # noqa: BLE001 - a bad chunk is skipped, never fatal
        normalized_log_event(
            logger or _logger,
            "stream.chunk.skipped",
            ctx,
            phase="mid_stream",
            level=logging.WARNING,
            failure_class=exc.__class__.__name__,
            error=str(exc)[:LOG_MESSAGE_LIMIT],
        )
        return None
    if isinstance(text, str) and text:
        return text
    return None


class GeminiProvider(SupportsStreaming):
    """Gemini adapter producing the uniform delta sequence."""

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        *,
        platform_id: str = "gemini",
        proxy_url: Optional[str] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model or GEMINI_MODELS[0]
        self._platform_id = platform_id
        self._proxy_url = proxy_url
        self._logger = get_logger("providers.gemini")

    @property
    def provider_name(self) -> str:
        return self._platform_id

    def default_model(self) -> str:
        return self._model

    async def open_stream(self, request: PromptRequest) -> AsyncIterator[ChatStreamEvent]:
        """Start ``generate_content_async`` and return the delta sequence.

        Raises:
            ProviderError: the start call failed or exceeded the start timeout.
        """
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
        try:
            genai.configure(api_key=self._api_key)
            gen_model = genai.GenerativeModel(model_name=model)
            response = await operation_timeout(
                gen_model.generate_content_async(request.prompt, stream=True),
                get_timeout_config().start_timeout_seconds,
            )
        except Exception as exc:
            err: ProviderError = wrap_start_error(exc, provider=self.provider_name, model=model)
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
        return self._iter_events(response, model, ctx)

    async def _iter_events(self, response: Any, model: str, ctx: LogContext) -> AsyncIterator[ChatStreamEvent]:
        async for chunk in response:
            text = extract_chunk_text(chunk, logger=self._logger, ctx=ctx)
            if text:
                yield ChatStreamEvent(provider=self.provider_name, model=model, delta=text, raw=chunk)
        yield terminal_event(self.provider_name, model, "stop")


__all__ = ["GeminiProvider", "extract_chunk_text"]
