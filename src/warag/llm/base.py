"""Base protocol for embedding services."""

from typing import Protocol


class EmbeddingService(Protocol):
    """Protocol defining the interface for embedding providers.

    This protocol allows multiple hosted or local providers to be swapped
    behind the sync pipeline and retrieval while keeping a consistent
    interface.
    """

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name. If None, uses a default for the service.

        Returns:
            list[list[float]]: One embedding vector per input text, in order
        """
        ...
