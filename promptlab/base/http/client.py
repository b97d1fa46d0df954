"""Async HTTP client construction for provider adapters.

Purpose:
    Build the ``httpx.AsyncClient`` each OpenAI-compatible adapter hands to
    its SDK. Egress proxy and timeout are explicit arguments so nothing in
    the process-wide networking state is mutated.

External dependencies:
    - ``httpx`` for the underlying asynchronous HTTP client.

Timeout strategy:
    - The client timeout defaults to ``get_timeout_config().http_timeout_seconds``.
      Start and idle deadlines are still enforced by the callers with
      :func:`operation_timeout`.

Lifecycle:
    - One client per adapter instance; adapters are built per request, so the
      client is released with the adapter (see ``aclose_quietly``).
"""

from __future__ import annotations

from contextlib import suppress
from typing import Optional

import httpx

from ..timeouts import get_timeout_config


def build_async_http_client(proxy_url: Optional[str] = None, timeout: Optional[float] = None) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient`` routed through ``proxy_url`` when given.

    Parameters:
        proxy_url: Optional egress proxy URL (``http://host:port``). ``None``
            connects directly.
        timeout: Per-operation timeout in seconds; defaults to the configured
            HTTP timeout.
    """
    if timeout is None:
        timeout = get_timeout_config().http_timeout_seconds
    if proxy_url:
        return httpx.AsyncClient(proxy=proxy_url, timeout=timeout)
    return httpx.AsyncClient(timeout=timeout)


async def aclose_quietly(client: Optional[httpx.AsyncClient]) -> None:
    """Close ``client`` ignoring transport errors raised during teardown."""
    if client is None:
        return
    with suppress(httpx.HTTPError, RuntimeError):
        await client.aclose()


__all__ = ["build_async_http_client", "aclose_quietly"]
