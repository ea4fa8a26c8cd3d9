"""Configuration for chunking and embedding during sync."""

import os

from dotenv import load_dotenv

from warag.constants import (
    DEFAULT_CHUNK_OVERLAP,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_EMBEDDING_BATCH_SIZE,
    DEFAULT_EMBEDDING_MAX_ATTEMPTS,
    DEFAULT_EMBEDDING_RATE_LIMIT,
    DEFAULT_EMBEDDING_RATE_PERIOD_SECONDS,
    DEFAULT_SHEET_RANGE,
)

# Load environment variables
load_dotenv()


class SyncConfig:
    """Configuration class for sync tuning knobs."""

    @staticmethod
    def get_chunk_size() -> int:
        return int(os.getenv("CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE)))

    @staticmethod
    def get_chunk_overlap() -> int:
        return int(os.getenv("CHUNK_OVERLAP", str(DEFAULT_CHUNK_OVERLAP)))

    @staticmethod
    def get_sheet_range() -> str:
        return os.getenv("SHEET_RANGE", DEFAULT_SHEET_RANGE)

    @staticmethod
    def get_batch_size() -> int:
        """Number of texts sent per embedding provider call."""
        return int(os.getenv("EMBEDDING_BATCH_SIZE", str(DEFAULT_EMBEDDING_BATCH_SIZE)))

    @staticmethod
    def get_max_attempts() -> int:
        """Attempts per embedding call before the sync is aborted."""
        return int(os.getenv("EMBEDDING_MAX_ATTEMPTS", str(DEFAULT_EMBEDDING_MAX_ATTEMPTS)))

    @staticmethod
    def get_rate_limit() -> tuple[int, float]:
        """Embedding calls allowed per period, as (calls, seconds)."""
        calls = int(os.getenv("EMBEDDING_RATE_LIMIT", str(DEFAULT_EMBEDDING_RATE_LIMIT)))
        period = float(
            os.getenv("EMBEDDING_RATE_PERIOD_SECONDS", str(DEFAULT_EMBEDDING_RATE_PERIOD_SECONDS))
        )
        return calls, period
