"""One-class-per-file DTO implementations."""

from .prompt_request import PromptRequest

__all__ = ["PromptRequest"]
