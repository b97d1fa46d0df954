"""Platform registry.

Maps a platform id to the data needed to reach it: the adapter ``type``
(``openai`` or ``gemini``), base URL, credential variable and supported
models. Built-in entries can be extended or overridden by a JSON (or YAML,
parsed with PyYAML) file named by ``PROMPTLAB_PLATFORMS_FILE``:

```
doubao:
  name: 火山云豆包
  type: openai
  base_url: https://ark.cn-beijing.volces.com/api/v3
  api_key_env: DOUBAO_API_KEY
  supported_models: [doubao-pro]
```

Unknown keys in the file are ignored; malformed entries are skipped with a
warning on the operational logger.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from ..base.logging import get_logger, log_event
from .defaults import (
    DASHSCOPE_BASE_URL,
    DASHSCOPE_MODELS,
    DEFAULT_PLATFORM_ID,
    FALLBACK_MODEL,
    GEMINI_BASE_URL,
    GEMINI_MODELS,
)


_logger = get_logger("promptlab.config")

PLATFORM_TYPES = ("openai", "gemini")


@dataclass(frozen=True)
class PlatformConfig:
    """One registry entry."""

    id: str
    name: str
    type: str
    api_key_env: str
    base_url: Optional[str] = None
    supported_models: Tuple[str, ...] = field(default_factory=tuple)
    description: str = ""

    @property
    def default_model(self) -> str:
        """First supported model; the platform's default."""
        return self.supported_models[0] if self.supported_models else FALLBACK_MODEL

    def to_dict(self, *, configured: Optional[bool] = None) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "baseUrl": self.base_url,
            "apiKeyEnv": self.api_key_env,
            "supportedModels": list(self.supported_models),
            "description": self.description,
        }
        if configured is not None:
            data["configured"] = configured
        return data


BUILTIN_PLATFORMS: Dict[str, PlatformConfig] = {
    "dashscope": PlatformConfig(
        id="dashscope",
        name="阿里百炼",
        type="openai",
        base_url=DASHSCOPE_BASE_URL,
        api_key_env="DASHSCOPE_API_KEY",
        supported_models=DASHSCOPE_MODELS,
        description="阿里百炼 Qwen 系列模型",
    ),
    "gemini": PlatformConfig(
        id="gemini",
        name="Google Gemini",
        type="gemini",
        base_url=GEMINI_BASE_URL,
        api_key_env="GEMINI_API_KEY",
        supported_models=GEMINI_MODELS,
        description="Google Gemini 系列模型",
    ),
}

DEFAULT_PLATFORM = DEFAULT_PLATFORM_ID

_CACHE: Optional[Dict[str, PlatformConfig]] = None
_CACHE_GUARD: Optional[str] = None


def _read_platforms_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        data = yaml.safe_load(text) or {}
    if not isinstance(data, dict):
        raise ValueError(f"platforms file {path} must hold a mapping")
    return data


def _entry_from_mapping(platform_id: str, raw: Dict[str, Any], base: Optional[PlatformConfig]) -> PlatformConfig:
    merged: Dict[str, Any] = {}
    if base is not None:
        merged = {
            "name": base.name,
            "type": base.type,
            "base_url": base.base_url,
            "api_key_env": base.api_key_env,
            "supported_models": base.supported_models,
            "description": base.description,
        }
    merged |= {k: v for k, v in raw.items() if k in {"name", "type", "base_url", "api_key_env", "supported_models", "description"}}
    kind = str(merged.get("type") or "openai").lower()
    if kind not in PLATFORM_TYPES:
        raise ValueError(f"unknown platform type '{kind}'")
    if not merged.get("api_key_env"):
        raise ValueError("api_key_env is required")
    return PlatformConfig(
        id=platform_id,
        name=str(merged.get("name") or platform_id),
        type=kind,
        base_url=merged.get("base_url"),
        api_key_env=str(merged["api_key_env"]),
        supported_models=tuple(str(m) for m in (merged.get("supported_models") or ())),
        description=str(merged.get("description") or ""),
    )


def load_platforms() -> Dict[str, PlatformConfig]:
    """Return the registry: built-ins overlaid by ``PROMPTLAB_PLATFORMS_FILE``.

    The result is cached until the variable changes.
    """
    global _CACHE, _CACHE_GUARD  # noqa: PLW0603 - module cache
    path = os.getenv("PROMPTLAB_PLATFORMS_FILE") or ""
    if _CACHE is not None and _CACHE_GUARD == path:
        return _CACHE
    registry = dict(BUILTIN_PLATFORMS)
    if path:
        p = Path(path)
        if p.is_file():
            for platform_id, raw in _read_platforms_file(p).items():
                if not isinstance(raw, dict):
                    continue
                try:
                    registry[platform_id] = _entry_from_mapping(platform_id, raw, registry.get(platform_id))
                except ValueError as exc:
                    log_event(_logger, "config.platform.invalid", level=logging.WARNING, platform=platform_id, error=str(exc))
        else:
            log_event(_logger, "config.platforms_file.missing", level=logging.WARNING, path=path)
    _CACHE = registry
    _CACHE_GUARD = path
    return registry


def get_platform(platform_id: str) -> Optional[PlatformConfig]:
    """Return the registry entry for ``platform_id`` or ``None``."""
    return load_platforms().get(platform_id)


def reset_platform_cache() -> None:
    global _CACHE, _CACHE_GUARD  # noqa: PLW0603 - module cache
    _CACHE = None
    _CACHE_GUARD = None


__all__ = [
    "PlatformConfig",
    "BUILTIN_PLATFORMS",
    "DEFAULT_PLATFORM",
    "PLATFORM_TYPES",
    "load_platforms",
    "get_platform",
    "reset_platform_cache",
]
