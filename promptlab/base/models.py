"""
Provider-agnostic domain models (DTOs) public surface.

Re-exports the one-class-per-file implementations under
``promptlab.base.models_parts``.
"""

from .models_parts.prompt_request import PromptRequest

__all__ = ["PromptRequest"]
