"""OpenAI-style provider support split into small modules."""

from .base import BaseOpenAIStyleProvider
from .provider_init import _ProviderInit

__all__ = ["BaseOpenAIStyleProvider", "_ProviderInit"]
