"""
Providers Base Package

Provider-agnostic contracts shared by the adapters and the HTTP service:

- Errors: normalized error taxonomy and classification
- Models (DTOs): the validated prompt request
- Timeouts & cancellation: start/idle deadlines and the cooperative token

Streaming, interfaces and the provider factory live in their own submodules
(``promptlab.base.streaming``, ``promptlab.base.interfaces``,
``promptlab.base.factory``) and are imported from there.
"""

from .errors import ErrorCode, PromptRejected, ProviderError, StreamAborted, classify_exception
from .models import PromptRequest
from .timeouts import TimeoutConfig, get_timeout_config, operation_timeout
from .cancellation import CancellationToken, StreamCancelled

__all__ = [
    # Errors
    "ErrorCode",
    "ProviderError",
    "PromptRejected",
    "StreamAborted",
    "classify_exception",
    # Models
    "PromptRequest",
    # Timeouts & Cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "operation_timeout",
    "CancellationToken",
    "StreamCancelled",
]
