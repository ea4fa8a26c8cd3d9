"""Application-wide constants and defaults for warag.

This module provides a single source of truth for configuration defaults,
magic numbers, and other constants used throughout the application.
"""

import os

# =============================================================================
# Chunking
# =============================================================================
DEFAULT_CHUNK_SIZE = 1600  # Characters per chunk
DEFAULT_CHUNK_OVERLAP = 200  # Characters shared by consecutive chunks
SHEET_CELL_SEPARATOR = " | "
DEFAULT_SHEET_RANGE = "A1:Z10000"  # Header row + up to ~10k data rows

# =============================================================================
# Embedding Applier
# =============================================================================
DEFAULT_EMBEDDING_BATCH_SIZE = 16  # Texts per provider call
DEFAULT_EMBEDDING_MAX_ATTEMPTS = 3  # Attempts per provider call
DEFAULT_EMBEDDING_RETRY_WAIT = 1.0  # Backoff multiplier in seconds
DEFAULT_EMBEDDING_RETRY_MAX_WAIT = 10.0
DEFAULT_EMBEDDING_RATE_LIMIT = 50  # Provider calls ...
DEFAULT_EMBEDDING_RATE_PERIOD_SECONDS = 60.0  # ... per this many seconds
DEFAULT_EMBEDDING_TIMEOUT_SECONDS = 30.0

# =============================================================================
# Retrieval
# =============================================================================
DEFAULT_TOP_K = 5
CONTENT_PREVIEW_LENGTH = 200  # Characters to show in content previews

# =============================================================================
# Storage
# =============================================================================
CHUNKS_COLLECTION = "Chunks"
MAPPINGS_COLLECTION = "SyncMappings"
VECTOR_INDEX_NAME = "Chunks/ByEmbedding"

# =============================================================================
# Default URLs and Hosts
# =============================================================================
DEFAULT_OLLAMA_HOST = "http://localhost:11434"
DEFAULT_MCP_HOST = "0.0.0.0"
DEFAULT_MCP_PORT = 8001
DEFAULT_RAVENDB_URL = "http://localhost:8080"
DEFAULT_RAVENDB_DATABASE = "warag"

# =============================================================================
# Google APIs
# =============================================================================
GOOGLE_DOCS_SCOPES = ["https://www.googleapis.com/auth/documents.readonly"]
GOOGLE_SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets.readonly"]

# =============================================================================
# Embedding Model Defaults
# =============================================================================
EMBEDDING_DEFAULTS = {
    "ollama": "nomic-embed-text",
    "gemini": "text-embedding-004",
}

# Default embedding dimensions (for RavenDB vector index)
DEFAULT_EMBEDDING_DIMENSIONS = 768


def get_embedding_service_name() -> str:
    """Get the configured embedding provider name.

    EMBEDDING_SERVICE wins over LLM_SERVICE; both fall back to "ollama".
    """
    return os.getenv("EMBEDDING_SERVICE") or os.getenv("LLM_SERVICE", "ollama")


def get_embedding_model(service: str | None = None) -> str:
    """Get the default embedding model for a given embedding service.

    Checks the EMBEDDING_MODEL environment variable first, then falls back
    to service-specific defaults.

    Args:
        service: The service name ("ollama" or "gemini").
                If None, uses the configured embedding service.

    Returns:
        str: The embedding model name to use.
    """
    env_model = os.getenv("EMBEDDING_MODEL")
    if env_model:
        return env_model

    if service is None:
        service = get_embedding_service_name()

    return EMBEDDING_DEFAULTS.get(service, EMBEDDING_DEFAULTS["ollama"])
