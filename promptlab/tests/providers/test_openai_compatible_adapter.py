"""OpenAI-compatible adapter tests with a fake ``AsyncOpenAI`` client."""
from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import httpx
import pytest

from promptlab.base.errors import ErrorCode, ProviderError
from promptlab.base.http import aclose_quietly
from promptlab.base.models import PromptRequest
from promptlab.base.streaming import ChatStreamEvent
from promptlab.config import get_platform
from promptlab.config.defaults import DASHSCOPE_BASE_URL
from promptlab.openai_compatible import OpenAICompatibleProvider

REQUEST = PromptRequest(prompt="hi", platform_id="dashscope", model_name="qwen-plus")


def _chunk(content: Optional[str], finish_reason: Optional[str] = None) -> Any:
    delta = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(delta=delta, finish_reason=finish_reason)])


class FakeStream:
    def __init__(self, chunks: List[Any]) -> None:
        self._chunks = list(chunks)
        self.closed = False

    def __aiter__(self) -> "FakeStream":
        return self

    async def __anext__(self) -> Any:
        if not self._chunks:
            raise StopAsyncIteration
        return self._chunks.pop(0)

    async def close(self) -> None:
        self.closed = True


class FakeCompletions:
    def __init__(self, stream: Optional[FakeStream] = None, error: Optional[Exception] = None, delay: float = 0.0) -> None:
        self.stream = stream
        self.error = error
        self.delay = delay
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **params: Any) -> FakeStream:
        self.calls.append(params)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        assert self.stream is not None
        return self.stream


def _provider(monkeypatch: pytest.MonkeyPatch, completions: FakeCompletions) -> OpenAICompatibleProvider:
    provider = OpenAICompatibleProvider(get_platform("dashscope"), "sk-test")
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    monkeypatch.setattr(provider, "_make_client", lambda: client)
    return provider


async def _collect(provider: OpenAICompatibleProvider) -> List[ChatStreamEvent]:
    events = await provider.open_stream(REQUEST)
    return [ev async for ev in events]


def test_streams_content_deltas_then_terminal(monkeypatch):
    stream = FakeStream([_chunk("He"), _chunk("llo"), _chunk(""), _chunk(None, "stop")])
    completions = FakeCompletions(stream)
    provider = _provider(monkeypatch, completions)

    events = asyncio.run(_collect(provider))

    assert [e.delta for e in events if not e.finish] == ["He", "llo"]
    assert events[-1].finish is True
    assert events[-1].finish_reason == "stop"
    assert sum(1 for e in events if e.finish) == 1
    assert stream.closed is True
    assert completions.calls == [
        {
            "model": "qwen-plus",
            "messages": [{"role": "user", "content": "hi"}],
            "stream": True,
            "temperature": 0.7,
        }
    ]


def test_closing_unread_stream_releases_upstream(monkeypatch):
    stream = FakeStream([_chunk("He"), _chunk(None, "stop")])
    provider = _provider(monkeypatch, FakeCompletions(stream))

    async def scenario() -> None:
        events = await provider.open_stream(REQUEST)
        await events.aclose()

    asyncio.run(scenario())

    assert stream.closed is True


def test_content_on_finish_chunk_is_still_a_delta(monkeypatch):
    stream = FakeStream([_chunk("a"), _chunk("b", "length"), _chunk("ignored")])
    provider = _provider(monkeypatch, FakeCompletions(stream))

    events = asyncio.run(_collect(provider))

    assert [e.delta for e in events if not e.finish] == ["a", "b"]
    assert events[-1].finish_reason == "length"


def test_chunks_without_choices_are_skipped(monkeypatch):
    usage_only = SimpleNamespace(choices=[])
    stream = FakeStream([usage_only, _chunk("x"), _chunk(None, "stop")])
    provider = _provider(monkeypatch, FakeCompletions(stream))

    events = asyncio.run(_collect(provider))

    assert [e.delta for e in events if not e.finish] == ["x"]


def test_missing_finish_reason_synthesizes_terminal(monkeypatch, log_capture):
    stream = FakeStream([_chunk("x")])
    provider = _provider(monkeypatch, FakeCompletions(stream))

    events = asyncio.run(_collect(provider))

    assert events[-1].finish is True
    assert events[-1].finish_reason == "stop"
    assert "stream.finish_missing" in log_capture.events()


def test_start_error_maps_status_to_provider_error(monkeypatch):
    exc = RuntimeError("Incorrect API key provided")
    exc.status_code = 401  # type: ignore[attr-defined]
    provider = _provider(monkeypatch, FakeCompletions(error=exc))

    with pytest.raises(ProviderError) as info:
        asyncio.run(_collect(provider))

    assert info.value.code is ErrorCode.AUTH
    assert info.value.status_code == 401
    assert info.value.provider == "dashscope"
    assert info.value.model == "qwen-plus"


def test_start_phase_timeout(monkeypatch):
    monkeypatch.setenv("PROMPTLAB_TIMEOUT_START_SECONDS", "0.05")
    provider = _provider(monkeypatch, FakeCompletions(FakeStream([]), delay=2.0))

    with pytest.raises(ProviderError) as info:
        asyncio.run(_collect(provider))

    assert info.value.code is ErrorCode.TIMEOUT


def test_make_client_uses_platform_base_url_and_proxy():
    provider = OpenAICompatibleProvider(get_platform("dashscope"), "sk-test", proxy_url="http://127.0.0.1:8118")
    client = provider._make_client()
    try:
        assert str(client.base_url).startswith(DASHSCOPE_BASE_URL)
        assert client.api_key == "sk-test"
        assert isinstance(provider._http_client, httpx.AsyncClient)
    finally:
        asyncio.run(aclose_quietly(provider._http_client))


def test_default_model_is_first_supported():
    provider = OpenAICompatibleProvider(get_platform("dashscope"), "sk-test")
    assert provider.default_model() == "qwen-flash"
    assert provider.provider_name == "dashscope"
