"""Google Gemini embedding service implementation."""

import logging

from google import genai

from warag.constants import DEFAULT_EMBEDDING_TIMEOUT_SECONDS, get_embedding_model

logger = logging.getLogger(__name__)


class GeminiService:
    """Google Gemini embedding service implementation.

    The API key is automatically retrieved from the GEMINI_API_KEY environment variable.
    """

    def __init__(
        self,
        model: str | None = None,
        timeout: float = DEFAULT_EMBEDDING_TIMEOUT_SECONDS,
    ) -> None:
        """Initialize the Gemini service.

        Args:
            model: Embedding model name (defaults to EMBEDDING_MODEL env or "text-embedding-004")
            timeout: Per-request timeout in seconds
        """
        self.model = model or get_embedding_model("gemini")
        self.timeout = timeout
        logger.info(f"🤖 Initializing GeminiService: model={self.model}")
        # HttpOptions.timeout is expressed in milliseconds
        self.client = genai.Client(
            http_options=genai.types.HttpOptions(timeout=int(timeout * 1000))
        )

    def generate_embeddings(self, texts: list[str], model: str | None = None) -> list[list[float]]:
        """Generate embeddings for a list of texts using Gemini.

        Args:
            texts: List of text strings to embed
            model: Optional embedding model name overriding the service default

        Returns:
            list[list[float]]: List of embedding vectors
        """
        if not texts:
            return []

        embedding_model = model or self.model
        try:
            response = self.client.models.embed_content(model=embedding_model, contents=texts)
        except Exception as e:
            logger.error(f"❌ Gemini embedding error: {e}", exc_info=True)
            raise

        embeddings = [list(embedding.values) for embedding in response.embeddings]
        logger.debug(f"Generated {len(embeddings)} embeddings with {embedding_model}")
        return embeddings
