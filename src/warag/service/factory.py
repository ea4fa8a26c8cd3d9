"""Wiring of production sync services from environment configuration."""

import logging

from warag.llm import EmbeddingService, get_embedding_service
from warag.service.database import (
    ChunkRepository,
    RavenDBConfig,
    create_document_store,
    ensure_index_exists,
)
from warag.service.sources import GoogleDocsSource, GoogleSheetsSource
from warag.sync import EmbeddingApplier, RateLimiter, SyncService, TenantLocks
from warag.sync.config import SyncConfig

logger = logging.getLogger(__name__)


def create_sync_service(
    embedder: EmbeddingService | None = None,
    url: str | None = None,
    database: str | None = None,
) -> SyncService:
    """Build a SyncService backed by RavenDB, Google APIs and the configured embedder.

    The caller owns the returned service; close ``service.repository.store``
    on shutdown.

    Args:
        embedder: Embedding service (defaults to get_embedding_service())
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        SyncService: Ready-to-use sync service
    """
    if embedder is None:
        embedder = get_embedding_service()

    store = create_document_store(url, database)
    ensure_index_exists(store)
    repository = ChunkRepository(store)

    calls, period = SyncConfig.get_rate_limit()
    applier = EmbeddingApplier(
        embedder=embedder,
        writer=repository,
        batch_size=SyncConfig.get_batch_size(),
        max_attempts=SyncConfig.get_max_attempts(),
        rate_limiter=RateLimiter(calls, period),
        expected_dimensions=RavenDBConfig.get_embedding_dimensions(),
    )

    logger.info("✅ Sync service initialized")
    return SyncService(
        repository=repository,
        applier=applier,
        docs_source=GoogleDocsSource(),
        sheets_source=GoogleSheetsSource(),
        locks=TenantLocks(),
        chunk_size=SyncConfig.get_chunk_size(),
        chunk_overlap=SyncConfig.get_chunk_overlap(),
        sheet_range=SyncConfig.get_sheet_range(),
    )
