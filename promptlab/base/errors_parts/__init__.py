"""Errors parts package public surface.

Prefer importing from `promptlab.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .stream_aborted import StreamAborted
from .prompt_rejected import PromptRejected
from .classification import classify_exception, extract_status

__all__ = [
    "ErrorCode",
    "ProviderError",
    "StreamAborted",
    "PromptRejected",
    "classify_exception",
    "extract_status",
]
