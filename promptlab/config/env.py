"""promptlab.config.env
====================

Environment variable helpers for platform credentials.

Purpose
-------
- Resolve a platform's API key from the variable named by its registry entry.
- Accept historical aliases for some variables (Gemini keys have been
  published as both ``GEMINI_API_KEY`` and ``GOOGLE_API_KEY``); the declared
  name always wins.

Failure Modes
-------------
- Helpers never raise on unset variables; ``(None, None)`` is returned and the
  HTTP layer turns it into a 401.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Tuple

if TYPE_CHECKING:
    from .platforms import PlatformConfig

# Declared env var → ordered tuple of acceptable names (declared first)
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "GEMINI_API_KEY": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "GOOGLE_API_KEY": ("GOOGLE_API_KEY", "GEMINI_API_KEY"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. Case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_candidates(env_name: str) -> Iterable[str]:
    """Yield acceptable environment variable names for ``env_name``, declared first."""
    yield env_name
    for alias in ENV_ALIASES.get(env_name, ()):  # pragma: no branch - small tuples
        if alias != env_name:
            yield alias


def resolve_env_key(env_name: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for the first non-blank candidate."""
    for name in get_env_var_candidates(env_name):
        val = os.environ.get(name)
        if val and val.strip():
            return val.strip(), name
    return None, None


def resolve_platform_key(platform: PlatformConfig) -> Tuple[Optional[str], Optional[str]]:
    """Resolve the API key for a platform registry entry."""
    return resolve_env_key(platform.api_key_env)


__all__ = [
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_env_key",
    "resolve_platform_key",
]
