"""Ollama embedding service implementation."""

import logging

import ollama

from warag.constants import DEFAULT_EMBEDDING_TIMEOUT_SECONDS, get_embedding_model

logger = logging.getLogger(__name__)


class OllamaService:
    """Ollama embedding service implementation.

    This service uses the Ollama API to embed text with locally served models.
    Each call sends the whole batch of texts in a single request.
    """

    def __init__(
        self,
        host: str,
        model: str | None = None,
        timeout: float = DEFAULT_EMBEDDING_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the Ollama service.

        Args:
            host: The Ollama server host URL (e.g., "http://localhost:11434")
            model: Embedding model name (defaults to EMBEDDING_MODEL env or "nomic-embed-text")
            timeout: Per-request timeout in seconds
        """
        self.host = host
        self.model = model or get_embedding_model("ollama")
        self.timeout = timeout
        logger.info(f"🤖 Initializing OllamaService: host={host}, model={self.model}")
        # Extra kwargs are forwarded to the underlying httpx client
        self.client = ollama.Client(host=host, timeout=timeout)

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts using Ollama.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name overriding the service default

        Returns:
            list[list[float]]: List of embedding vectors
        """
        if not texts:
            return []

        embedding_model = model or self.model
        response = self.client.embed(model=embedding_model, input=texts)
        embeddings = [list(vector) for vector in response["embeddings"]]

        logger.debug(f"Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
