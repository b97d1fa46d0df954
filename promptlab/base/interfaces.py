"""
Provider-agnostic interfaces for the providers layer.

Re-exports the Protocols under ``promptlab.base.interfaces_parts`` to keep
imports stable for adapters and the service.
"""

from __future__ import annotations

from .interfaces_parts import SupportsStreaming

__all__ = ["SupportsStreaming"]
