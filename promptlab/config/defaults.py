"""promptlab.config.defaults
=========================

Central place for small, stable default values used across promptlab and the
HTTP service. These defaults can be overridden via environment variables or
the platform registry file, but provide sensible fallbacks for local
development and tests.

This module intentionally avoids importing from other promptlab packages to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# ---- Service / HTTP layer ----

# Comma-separated list of allowed origins for the dev server (browser UI).
SERVICE_CORS_DEFAULT_ORIGINS = "http://localhost:3000,http://127.0.0.1:3000"
SERVICE_DEFAULT_HOST = "127.0.0.1"
SERVICE_DEFAULT_PORT = 8000

# Directory holding the day-partitioned request log.
TELEMETRY_DEFAULT_LOG_DIR = "logs"

# ---- Platform registry ----
DEFAULT_PLATFORM_ID = "dashscope"

DASHSCOPE_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"
DASHSCOPE_MODELS = (
    "qwen-flash",
    "qwen-plus",
    "qwen-turbo",
    "qwen-max",
    "qwen3-30b-a3b-instruct-2507",
    "qwen3-235b-a22b-instruct-2507",
    "qwen3-14b",
    "qwen3-8b",
    "qwen3-4b",
    "qwen3-1.7b",
)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
GEMINI_MODELS = (
    "gemini-2.5-flash",
    "gemini-2.5-pro",
    "gemini-2.0-flash",
)

# Model used when a platform lists no supported models.
FALLBACK_MODEL = "qwen-flash"

# Sampling temperature sent to OpenAI-compatible platforms.
OPENAI_STYLE_TEMPERATURE = 0.7


__all__ = [
    "SERVICE_CORS_DEFAULT_ORIGINS",
    "SERVICE_DEFAULT_HOST",
    "SERVICE_DEFAULT_PORT",
    "TELEMETRY_DEFAULT_LOG_DIR",
    "DEFAULT_PLATFORM_ID",
    "DASHSCOPE_BASE_URL",
    "DASHSCOPE_MODELS",
    "GEMINI_BASE_URL",
    "GEMINI_MODELS",
    "FALLBACK_MODEL",
    "OPENAI_STYLE_TEMPERATURE",
]
