"""
PromptRequest DTO handed to provider adapters.

Built once per inbound call after validation; frozen so nothing downstream of
adapter dispatch can mutate it.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PromptRequest:
    """Validated single-prompt request.

    Attributes:
        prompt: User prompt; guaranteed non-blank by the HTTP layer.
        platform_id: Platform registry id (e.g. ``"dashscope"``).
        model_name: Upstream model identifier.
    """

    prompt: str
    platform_id: str
    model_name: str

    def __post_init__(self) -> None:
        if not self.prompt.strip():
            raise ValueError("prompt must not be blank")


__all__ = ["PromptRequest"]
