"""Unified configuration layer.

Goals
-----
* Centralize defaults (service address, log directory, platform registry).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. A ``.env`` file in the working directory (loaded once; see below)
    3. Environment variables
* Provide single call sites: ``get_settings()`` for the service and
  ``get_platform(platform_id)`` for the registry.

Environment Variables
---------------------
PROMPTLAB_LOG_DIR, HTTPS_PROXY, PROMPTLAB_CORS_ORIGINS, PROMPTLAB_HOST,
PROMPTLAB_PORT, PROMPTLAB_RELOAD, PROMPTLAB_PLATFORMS_FILE, PROMPTLAB_LOG_LEVEL
and the per-platform credential variables (e.g. DASHSCOPE_API_KEY).

Public API
----------
* get_settings() -> Settings
* get_platform(platform_id) -> PlatformConfig | None
* resolve_platform_key(platform) -> (value, env_var_used)
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from .defaults import (
    SERVICE_CORS_DEFAULT_ORIGINS,
    SERVICE_DEFAULT_HOST,
    SERVICE_DEFAULT_PORT,
    TELEMETRY_DEFAULT_LOG_DIR,
)
from .env import is_placeholder, resolve_platform_key
from .platforms import (
    DEFAULT_PLATFORM,
    PlatformConfig,
    get_platform,
    load_platforms,
    reset_platform_cache,
)

_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    try:
        return int(raw) if raw else default
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Process settings for the HTTP service and the telemetry sink.

    Attributes:
        log_dir: Directory of the JSONL request log.
        proxy_url: Egress proxy handed to adapter HTTP clients (``HTTPS_PROXY``).
        cors_origins: Origins allowed by the CORS middleware.
        host / port / reload: uvicorn dev server options.
    """

    log_dir: str = TELEMETRY_DEFAULT_LOG_DIR
    proxy_url: Optional[str] = None
    cors_origins: List[str] = field(default_factory=list)
    host: str = SERVICE_DEFAULT_HOST
    port: int = SERVICE_DEFAULT_PORT
    reload: bool = False


def get_settings() -> Settings:
    """Build :class:`Settings` from the environment (after the ``.env`` file)."""
    _load_dotenv_once()
    origins = os.getenv("PROMPTLAB_CORS_ORIGINS", SERVICE_CORS_DEFAULT_ORIGINS)
    return Settings(
        log_dir=os.getenv("PROMPTLAB_LOG_DIR") or TELEMETRY_DEFAULT_LOG_DIR,
        proxy_url=os.getenv("HTTPS_PROXY") or os.getenv("https_proxy") or None,
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        host=os.getenv("PROMPTLAB_HOST") or SERVICE_DEFAULT_HOST,
        port=_env_int("PROMPTLAB_PORT", SERVICE_DEFAULT_PORT),
        reload=_env_bool("PROMPTLAB_RELOAD"),
    )


__all__ = [
    "Settings",
    "get_settings",
    "PlatformConfig",
    "DEFAULT_PLATFORM",
    "get_platform",
    "load_platforms",
    "reset_platform_cache",
    "resolve_platform_key",
]
