"""Provider Factory utilities.

Purpose
-------
Centralize creation of adapter instances implementing ``SupportsStreaming``
from a platform registry entry. The platform ``type`` tag selects the adapter
class; adding a provider means adding an adapter and a registry entry here.
Adapters are imported lazily using ``importlib`` to keep SDK imports out of
module import time.

Timeout and fallback semantics
------------------------------
- No timeouts are introduced here. The factory performs no retries or
  fallbacks; it either returns an instance or raises a clear error.
"""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple, Type

from .interfaces import SupportsStreaming

if TYPE_CHECKING:
    from ..config.platforms import PlatformConfig


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized.

    Failure modes include:
    - The platform type is not registered in the factory mapping.
    - The adapter module cannot be imported or the adapter class is missing.
    - The adapter constructor raised an exception during initialization.
    """


def _openai_kwargs(platform: PlatformConfig, api_key: str, proxy_url: Optional[str]) -> Dict[str, Any]:
    return {"platform": platform, "api_key": api_key, "proxy_url": proxy_url}


def _gemini_kwargs(platform: PlatformConfig, api_key: str, proxy_url: Optional[str]) -> Dict[str, Any]:
    return {
        "api_key": api_key,
        "model": platform.default_model,
        "platform_id": platform.id,
        "proxy_url": proxy_url,
    }


class ProviderFactory:
    """Create provider adapters based on a platform's ``type`` tag."""

    # Map platform types to import paths, class names and constructor builders
    _PROVIDERS: Dict[str, Dict[str, Any]] = {
        "openai": {
            "module": "promptlab.openai_compatible.client",
            "class": "OpenAICompatibleProvider",
            "kwargs": _openai_kwargs,
        },
        "gemini": {
            "module": "promptlab.gemini.client",
            "class": "GeminiProvider",
            "kwargs": _gemini_kwargs,
        },
    }

    @classmethod
    def create(
        cls,
        platform: PlatformConfig,
        api_key: str,
        *,
        proxy_url: Optional[str] = None,
    ) -> SupportsStreaming:
        """Create the adapter serving ``platform``.

        Raises
        ------
        UnknownProviderError
            If the platform type is unknown, the adapter module fails to
            import, the adapter class is missing, or the constructor raises.
        """
        kind = (platform.type or "").lower().strip()
        entry = cls._PROVIDERS.get(kind)
        if not entry:
            raise UnknownProviderError(f"Unknown provider type '{platform.type}' for platform '{platform.id}'")

        module_path, class_name = entry["module"], entry["class"]
        try:
            mod = import_module(module_path)
        except Exception as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Failed to import module '{module_path}' for platform '{platform.id}': {exc}"
            ) from exc

        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"Adapter class '{class_name}' not found in '{module_path}' for platform '{platform.id}'"
            ) from exc

        try:
            return klass(**entry["kwargs"](platform, api_key, proxy_url))
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for '{kind}' adapter constructor: {exc}"
            ) from exc
        except Exception as exc:  # pragma: no cover - adapter runtime init error
            raise UnknownProviderError(
                f"Failed to initialize provider for platform '{platform.id}': {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return the supported platform types in deterministic order."""
        return tuple(cls._PROVIDERS.keys())


__all__ = ["ProviderFactory", "UnknownProviderError"]
