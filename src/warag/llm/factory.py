"""Factory function for creating embedding service instances."""

import logging
import os

from dotenv import load_dotenv

from warag.constants import (
    DEFAULT_EMBEDDING_TIMEOUT_SECONDS,
    DEFAULT_OLLAMA_HOST,
    get_embedding_service_name,
)
from warag.llm.base import EmbeddingService
from warag.llm.gemini import GeminiService
from warag.llm.ollama import OllamaService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


def get_embedding_service(config: dict | None = None) -> EmbeddingService:
    """Factory function to create an embedding service instance.

    Args:
        config: Optional configuration dictionary. If None, uses environment variables.
                Expected keys:
                - 'service': Service type (default: EMBEDDING_SERVICE or LLM_SERVICE env, or "ollama")
                - 'host': Ollama host URL (default: from OLLAMA_HOST env)
                - 'model': Embedding model name (default: from EMBEDDING_MODEL env)
                - 'timeout': Per-request timeout in seconds (default: EMBEDDING_TIMEOUT_SECONDS env)

    Returns:
        EmbeddingService: An instance implementing the EmbeddingService protocol.
    """
    if config is None:
        config = {}

    service_type = config.get("service", get_embedding_service_name())
    model = config.get("model", os.getenv("EMBEDDING_MODEL"))
    timeout = float(
        config.get(
            "timeout", os.getenv("EMBEDDING_TIMEOUT_SECONDS", str(DEFAULT_EMBEDDING_TIMEOUT_SECONDS))
        )
    )

    if service_type == "ollama":
        host = config.get("host", os.getenv("OLLAMA_HOST", DEFAULT_OLLAMA_HOST))
        return OllamaService(host=host, model=model, timeout=timeout)

    if service_type == "gemini":
        return GeminiService(model=model, timeout=timeout)

    raise ValueError(f"Unsupported embedding service type: {service_type}")
