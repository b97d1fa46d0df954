"""
OpenAI-compatible provider package.

Exports:
- OpenAICompatibleProvider: adapter for platforms of registry type ``openai``
"""

from .client import OpenAICompatibleProvider

__all__ = ["OpenAICompatibleProvider"]
