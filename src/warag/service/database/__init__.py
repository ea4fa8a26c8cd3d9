"""Database configuration and connection management for RavenDB.

This package provides a unified interface for RavenDB operations:
- Configuration management (RavenDBConfig)
- Document store creation and index management
- Chunk and sync-mapping persistence (ChunkRepository)
- Tenant-scoped vector search

Usage:
    from warag.service.database import (
        ChunkRepository,
        create_document_store,
        search_chunks,
    )
"""

from warag.service.database.config import RavenDBConfig
from warag.service.database.operations import (
    count_chunks,
    create_database,
    create_document_store,
    database_exists,
    delete_database,
    ensure_index_exists,
    search_chunks,
)
from warag.service.database.storage import ChunkRepository
from warag.service.database.utils import cosine_similarity

__all__ = [
    # Config
    "RavenDBConfig",
    # Operations
    "create_document_store",
    "ensure_index_exists",
    "database_exists",
    "create_database",
    "delete_database",
    "count_chunks",
    "search_chunks",
    # Storage
    "ChunkRepository",
    # Utils
    "cosine_similarity",
]
