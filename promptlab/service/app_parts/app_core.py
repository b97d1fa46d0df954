from __future__ import annotations

from functools import lru_cache
from typing import Any, Callable, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from promptlab.base.errors import PromptRejected
from promptlab.base.factory import ProviderFactory
from promptlab.base.interfaces import SupportsStreaming
from promptlab.config import (
    DEFAULT_PLATFORM,
    PlatformConfig,
    Settings,
    get_platform,
    get_settings,
    load_platforms,
    resolve_platform_key,
)
from promptlab.telemetry import JsonlTelemetrySink, TelemetrySink

AdapterBuilder = Callable[..., SupportsStreaming]


class ChatMessageDTO(BaseModel):
    """A single chat message as sent by chat-style front ends."""

    role: str
    content: Any = None


class ChatBody(BaseModel):
    """Body of ``POST /api/chat``.

    Either ``prompt`` or ``messages`` carries the user text. With
    ``messages``, only the last entry is used and only when its role is
    ``user``.
    """

    prompt: Optional[str] = None
    messages: Optional[List[ChatMessageDTO]] = None
    platform: Optional[str] = None
    model: Optional[str] = None


class BatchTestResult(BaseModel):
    """One prompt run reported by the batch runner."""

    id: Optional[str] = None
    variable: Optional[str] = None
    prompt: str = ""
    response: Optional[str] = ""
    model: str = ""
    status: str
    error: Optional[str] = None
    startTime: int
    firstTokenTime: Optional[int] = None
    endTime: Optional[int] = None


class BatchLogRequest(BaseModel):
    """Body of ``POST /api/log-batch``."""

    testId: str
    promptTemplate: str
    variables: List[str] = Field(default_factory=list)
    model: str
    platform: Optional[str] = None
    results: List[BatchTestResult] = Field(default_factory=list)
    timestamp: str
    duration: int


def resolve_prompt(body: ChatBody) -> str:
    """Return the user prompt or raise ``PromptRejected`` (400) when blank."""
    prompt = ""
    if body.messages:
        last = body.messages[-1]
        if last.role == "user":
            content = last.content
            prompt = content if isinstance(content, str) else str(content or "")
    elif body.prompt:
        prompt = body.prompt
    if not prompt.strip():
        raise PromptRejected(400, "Empty prompt")
    return prompt


def resolve_platform_and_key(body: ChatBody) -> Tuple[PlatformConfig, str]:
    """Look up the platform and its credential.

    Raises:
        PromptRejected: 400 for an unknown platform, 401 for a missing key.
    """
    platform_id = body.platform or DEFAULT_PLATFORM
    platform = get_platform(platform_id)
    if platform is None:
        raise PromptRejected(400, f"Unsupported platform: {platform_id}")
    api_key, _ = resolve_platform_key(platform)
    if not api_key:
        raise PromptRejected(401, f"Missing API key for platform: {platform.name}")
    return platform, api_key


def build_platforms_response() -> Dict[str, Any]:
    platforms = [
        p.to_dict(configured=resolve_platform_key(p)[0] is not None)
        for p in load_platforms().values()
    ]
    return {"platforms": platforms, "default": DEFAULT_PLATFORM}


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


def get_settings_dep() -> Settings:
    """FastAPI dependency returning the process settings."""
    return get_settings()


@lru_cache(maxsize=8)
def _sink_for(log_dir: str) -> JsonlTelemetrySink:
    return JsonlTelemetrySink(log_dir)


def get_sink() -> TelemetrySink:
    """FastAPI dependency returning the JSONL telemetry sink."""
    return _sink_for(get_settings().log_dir)


def get_adapter_builder() -> AdapterBuilder:
    """FastAPI dependency returning the adapter constructor."""
    return ProviderFactory.create


__all__ = [
    "AdapterBuilder",
    "BatchLogRequest",
    "BatchTestResult",
    "ChatBody",
    "ChatMessageDTO",
    "build_platforms_response",
    "get_adapter_builder",
    "get_settings_dep",
    "get_sink",
    "resolve_platform_and_key",
    "resolve_prompt",
]
