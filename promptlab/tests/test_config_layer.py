"""Configuration layer tests: registry, credentials, settings and timeouts."""
from __future__ import annotations

import json

import promptlab.config as config_mod
from promptlab.base.timeouts import get_timeout_config
from promptlab.config import (
    DEFAULT_PLATFORM,
    get_platform,
    get_settings,
    load_platforms,
    resolve_platform_key,
)
from promptlab.config.env import is_placeholder, resolve_env_key


def test_builtin_registry_entries():
    dashscope = get_platform("dashscope")
    assert dashscope is not None
    assert dashscope.type == "openai"
    assert dashscope.name == "阿里百炼"
    assert dashscope.api_key_env == "DASHSCOPE_API_KEY"
    assert dashscope.default_model == "qwen-flash"
    gemini = get_platform("gemini")
    assert gemini.type == "gemini"
    assert "gemini-2.5-flash" in gemini.supported_models
    assert DEFAULT_PLATFORM == "dashscope"
    assert get_platform("foo") is None


def test_to_dict_uses_camel_case_keys():
    data = get_platform("dashscope").to_dict(configured=False)
    assert data["apiKeyEnv"] == "DASHSCOPE_API_KEY"
    assert data["supportedModels"][0] == "qwen-flash"
    assert data["configured"] is False
    assert "configured" not in get_platform("dashscope").to_dict()


def test_platform_key_resolution(monkeypatch):
    assert resolve_platform_key(get_platform("dashscope")) == (None, None)
    monkeypatch.setenv("DASHSCOPE_API_KEY", "  sk-live  ")
    assert resolve_platform_key(get_platform("dashscope")) == ("sk-live", "DASHSCOPE_API_KEY")


def test_gemini_key_accepts_google_alias(monkeypatch):
    monkeypatch.setenv("GOOGLE_API_KEY", "g-alias")
    assert resolve_platform_key(get_platform("gemini")) == ("g-alias", "GOOGLE_API_KEY")
    monkeypatch.setenv("GEMINI_API_KEY", "g-declared")
    assert resolve_platform_key(get_platform("gemini")) == ("g-declared", "GEMINI_API_KEY")


def test_blank_key_is_treated_as_missing(monkeypatch):
    monkeypatch.setenv("DASHSCOPE_API_KEY", "   ")
    assert resolve_env_key("DASHSCOPE_API_KEY") == (None, None)


def test_is_placeholder():
    assert is_placeholder("your-placeholder-key")
    assert is_placeholder("test_abc")
    assert not is_placeholder("sk-123")
    assert not is_placeholder(None)


def test_json_platforms_file_adds_and_overrides(monkeypatch, tmp_path):
    path = tmp_path / "platforms.json"
    path.write_text(
        json.dumps(
            {
                "doubao": {
                    "name": "火山云豆包",
                    "type": "openai",
                    "base_url": "https://ark.example.invalid/api/v3",
                    "api_key_env": "DOUBAO_API_KEY",
                    "supported_models": ["doubao-pro"],
                },
                "dashscope": {"supported_models": ["qwen-max"]},
            }
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("PROMPTLAB_PLATFORMS_FILE", str(path))

    registry = load_platforms()

    assert registry["doubao"].default_model == "doubao-pro"
    assert registry["dashscope"].supported_models == ("qwen-max",)
    assert registry["dashscope"].api_key_env == "DASHSCOPE_API_KEY"


def test_yaml_platforms_file_and_invalid_entry(monkeypatch, tmp_path, log_capture):
    path = tmp_path / "platforms.yaml"
    path.write_text(
        "kimi:\n"
        "  name: Moonshot\n"
        "  type: openai\n"
        "  base_url: https://api.example.invalid/v1\n"
        "  api_key_env: KIMI_API_KEY\n"
        "  supported_models: [moonshot-v1-8k]\n"
        "broken:\n"
        "  type: telepathy\n"
        "  api_key_env: NOPE\n",
        encoding="utf-8",
    )
    monkeypatch.setenv("PROMPTLAB_PLATFORMS_FILE", str(path))

    registry = load_platforms()

    assert registry["kimi"].supported_models == ("moonshot-v1-8k",)
    assert "broken" not in registry
    assert "config.platform.invalid" in log_capture.events()


def test_missing_platforms_file_keeps_builtins(monkeypatch, tmp_path, log_capture):
    monkeypatch.setenv("PROMPTLAB_PLATFORMS_FILE", str(tmp_path / "absent.yaml"))
    assert set(load_platforms()) == {"dashscope", "gemini"}
    assert "config.platforms_file.missing" in log_capture.events()


def test_settings_defaults():
    settings = get_settings()
    assert settings.log_dir == "logs"
    assert settings.proxy_url is None
    assert settings.cors_origins == ["http://localhost:3000", "http://127.0.0.1:3000"]
    assert settings.host == "127.0.0.1"
    assert settings.port == 8000
    assert settings.reload is False


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("PROMPTLAB_LOG_DIR", "/var/log/promptlab")
    monkeypatch.setenv("HTTPS_PROXY", "http://127.0.0.1:8118")
    monkeypatch.setenv("PROMPTLAB_CORS_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("PROMPTLAB_PORT", "not-a-port")
    monkeypatch.setenv("PROMPTLAB_RELOAD", "yes")

    settings = get_settings()

    assert settings.log_dir == "/var/log/promptlab"
    assert settings.proxy_url == "http://127.0.0.1:8118"
    assert settings.cors_origins == ["https://a.example", "https://b.example"]
    assert settings.port == 8000
    assert settings.reload is True


def test_dotenv_file_is_loaded_once(monkeypatch, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text('# credentials\nDASHSCOPE_API_KEY="sk-from-file"\nPROMPTLAB_PORT=9001\n', encoding="utf-8")
    monkeypatch.setattr(config_mod, "_DOTENV_LOADED", False)
    monkeypatch.setenv("DOTENV_FILE", str(env_file))
    monkeypatch.setenv("PROMPTLAB_PORT", "8123")
    # monkeypatch restores these after the loader writes them
    monkeypatch.setenv("DASHSCOPE_API_KEY", "changeme")

    settings = get_settings()

    assert settings.port == 8123
    assert resolve_platform_key(get_platform("dashscope")) == ("sk-from-file", "DASHSCOPE_API_KEY")
    assert config_mod._DOTENV_LOADED is True


def test_timeout_config_reads_environment(monkeypatch):
    monkeypatch.setenv("PROMPTLAB_TIMEOUT_START_SECONDS", "5")
    monkeypatch.setenv("PROMPTLAB_TIMEOUT_STREAM_SECONDS", "-1")
    monkeypatch.setenv("PROMPTLAB_TIMEOUT_HTTP_SECONDS", "abc")

    cfg = get_timeout_config()

    assert cfg.start_timeout_seconds == 5.0
    assert cfg.stream_timeout_seconds == 60.0
    assert cfg.http_timeout_seconds == 120.0
