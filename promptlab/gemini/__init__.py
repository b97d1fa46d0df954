"""Gemini provider adapter package."""

from .client import GeminiProvider, extract_chunk_text

__all__ = ["GeminiProvider", "extract_chunk_text"]
