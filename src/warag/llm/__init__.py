"""Embedding service abstraction layer for warag.

This package provides a unified interface for multiple embedding providers:
- OllamaService: Local embeddings via Ollama
- GeminiService: Google Gemini API

Usage:
    from warag.llm import get_embedding_service, EmbeddingService

    # Create service from environment config
    service = get_embedding_service()

    # Or with explicit config
    service = get_embedding_service({"service": "gemini", "model": "text-embedding-004"})
"""

from warag.llm.base import EmbeddingService
from warag.llm.factory import get_embedding_service
from warag.llm.gemini import GeminiService
from warag.llm.ollama import OllamaService

__all__ = [
    "EmbeddingService",
    "OllamaService",
    "GeminiService",
    "get_embedding_service",
]
