"""OpenAI-compatible provider adapter built on BaseOpenAIStyleProvider.

Serves every platform of registry type ``openai`` (DashScope compatible mode
by default) through ``openai.AsyncOpenAI`` pointed at the platform base URL.
The SDK receives an explicit ``httpx.AsyncClient`` so the egress proxy is a
per-adapter setting rather than process-global state.

Timeout and terminal semantics match the base class.
"""

from __future__ import annotations

from typing import Optional

from openai import AsyncOpenAI

from ..base.http import build_async_http_client
from ..base.openai_style_parts.base import BaseOpenAIStyleProvider
from ..base.openai_style_parts.provider_init import _ProviderInit
from ..base.timeouts import get_timeout_config
from ..config.defaults import OPENAI_STYLE_TEMPERATURE
from ..config.platforms import PlatformConfig

__all__ = ["OpenAICompatibleProvider"]


class OpenAICompatibleProvider(BaseOpenAIStyleProvider):
    """Adapter for one OpenAI-compatible platform registry entry."""

    def __init__(
        self,
        platform: PlatformConfig,
        api_key: str,
        *,
        proxy_url: Optional[str] = None,
        temperature: float = OPENAI_STYLE_TEMPERATURE,
    ) -> None:
        init = _ProviderInit(
            provider_name=platform.id,
            api_key=api_key,
            base_url=platform.base_url,
            default_model=platform.default_model,
            logger_name=f"providers.{platform.id}",
            proxy_url=proxy_url,
            temperature=temperature,
        )
        super().__init__(init)

    def _make_client(self) -> AsyncOpenAI:
        """Create the SDK client with a dedicated HTTP transport."""
        self._http_client = build_async_http_client(
            self._proxy_url, timeout=get_timeout_config().http_timeout_seconds
        )
        return AsyncOpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            http_client=self._http_client,
            max_retries=0,
        )
