"""Interfaces (Protocols) split into single-class modules."""

from .supports_streaming import SupportsStreaming

__all__ = ["SupportsStreaming"]
