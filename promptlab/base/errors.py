"""Unified error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``promptlab.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import LOG_MESSAGE_LIMIT, ProviderError
from .errors_parts.stream_aborted import StreamAborted
from .errors_parts.prompt_rejected import PromptRejected
from .errors_parts.classification import classify_exception, extract_status

__all__ = [
    "ErrorCode",
    "LOG_MESSAGE_LIMIT",
    "ProviderError",
    "StreamAborted",
    "PromptRejected",
    "classify_exception",
    "extract_status",
]
