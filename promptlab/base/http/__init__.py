"""HTTP utilities package for providers.

Exposes the async httpx client builder used by the SDK adapters.
"""

from .client import aclose_quietly, build_async_http_client

__all__ = ["build_async_http_client", "aclose_quietly"]
