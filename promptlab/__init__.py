"""promptlab package

Prompt-testing back end: forwards a prompt to one of several LLM platforms,
streams the answer back as plain text and records latency telemetry once
per request.

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode`,
      :class:`PromptRejected`, :class:`StreamAborted`
    - Request DTO: :class:`PromptRequest`

The HTTP service lives in ``promptlab.service.app``; provider adapters are
built through ``promptlab.base.factory.ProviderFactory``.
"""

from .base.errors import ErrorCode, PromptRejected, ProviderError, StreamAborted
from .base.models import PromptRequest

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ErrorCode",
    "PromptRejected",
    "ProviderError",
    "StreamAborted",
    "PromptRequest",
]
