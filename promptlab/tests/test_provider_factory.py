from __future__ import annotations

import pytest

from promptlab.base.factory import ProviderFactory, UnknownProviderError
from promptlab.base.interfaces import SupportsStreaming
from promptlab.config import PlatformConfig, get_platform
from promptlab.gemini import GeminiProvider
from promptlab.openai_compatible import OpenAICompatibleProvider


def test_supported_types():
    assert ProviderFactory.supported() == ("openai", "gemini")


def test_openai_type_builds_compatible_adapter():
    adapter = ProviderFactory.create(get_platform("dashscope"), "sk-test", proxy_url="http://proxy:8118")
    assert isinstance(adapter, OpenAICompatibleProvider)
    assert isinstance(adapter, SupportsStreaming)
    assert adapter.provider_name == "dashscope"
    assert adapter.default_model() == "qwen-flash"


def test_gemini_type_builds_gemini_adapter():
    adapter = ProviderFactory.create(get_platform("gemini"), "g-key")
    assert isinstance(adapter, GeminiProvider)
    assert adapter.provider_name == "gemini"
    assert adapter.default_model() == "gemini-2.5-flash"


def test_custom_openai_platform_reuses_compatible_adapter():
    platform = PlatformConfig(
        id="doubao",
        name="火山云豆包",
        type="openai",
        api_key_env="DOUBAO_API_KEY",
        base_url="https://ark.example.invalid/api/v3",
        supported_models=("doubao-pro",),
    )
    adapter = ProviderFactory.create(platform, "k")
    assert isinstance(adapter, OpenAICompatibleProvider)
    assert adapter.default_model() == "doubao-pro"


def test_unknown_type_raises():
    platform = PlatformConfig(id="x", name="X", type="bogus", api_key_env="X_KEY")
    with pytest.raises(UnknownProviderError) as info:
        ProviderFactory.create(platform, "k")
    assert "bogus" in str(info.value)
