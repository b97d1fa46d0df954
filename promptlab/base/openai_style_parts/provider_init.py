"""Initialization dataclass for OpenAI-style providers.

Encapsulates common constructor parameters used by ``BaseOpenAIStyleProvider``.
No I/O occurs here; this is a pure data container.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class _ProviderInit:
    """Initialization bundle for ``BaseOpenAIStyleProvider``.

    Attributes:
        provider_name: Platform id the adapter serves (e.g. ``dashscope``).
        api_key: Credential string used by the SDK client.
        base_url: Platform base URL for the OpenAI-compatible API.
        default_model: Model used when a request doesn't name one.
        logger_name: Structured logger name (e.g., ``providers.dashscope``).
        proxy_url: Optional egress proxy handed to the HTTP client.
        temperature: Sampling temperature sent with every request.
    """

    provider_name: str
    api_key: str
    base_url: Optional[str]
    default_model: str
    logger_name: str
    proxy_url: Optional[str] = None
    temperature: float = 0.7


__all__ = ["_ProviderInit"]
