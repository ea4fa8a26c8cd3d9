"""Database operations for RavenDB - setup, indexing, counting and vector search."""

import logging
from typing import Any

import requests
from ravendb import DocumentStore
from ravendb.documents.indexes.definitions import (
    FieldIndexing,
    FieldStorage,
    IndexDefinition,
    IndexFieldOptions,
)
from ravendb.documents.indexes.vector.options import VectorOptions
from ravendb.documents.operations.indexes import GetIndexNamesOperation, PutIndexesOperation
from ravendb.serverwide.operations.common import DeleteDatabaseOperation

from warag.constants import CHUNKS_COLLECTION, DEFAULT_TOP_K, VECTOR_INDEX_NAME
from warag.llm import EmbeddingService, get_embedding_service
from warag.service.database.config import RavenDBConfig
from warag.service.database.storage import ChunkRepository
from warag.service.database.utils import result_score
from warag.sync.models import Source

logger = logging.getLogger(__name__)


def create_document_store(url: str | None = None, database: str | None = None) -> DocumentStore:
    """Create and initialize a DocumentStore instance.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        DocumentStore: Initialized DocumentStore instance
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    store = DocumentStore([url], database)
    store.initialize()
    return store


def ensure_index_exists(store: DocumentStore) -> None:
    """Ensure the chunk vector search index exists in RavenDB.

    Creates a static index with the embedding as a vector field and the
    tenant/source fields available for filtering.

    Args:
        store: Initialized DocumentStore instance
    """
    existing_indexes = store.maintenance.send(GetIndexNamesOperation(0, 100))
    if VECTOR_INDEX_NAME in existing_indexes:
        return

    index_definition = IndexDefinition()
    index_definition.name = VECTOR_INDEX_NAME
    index_definition.maps = {
        f"""from chunk in docs.{CHUNKS_COLLECTION}
        where chunk.embedding != null
        select new {{
            phone_number = chunk.phone_number,
            source = chunk.source,
            row_hash = chunk.row_hash,
            content = chunk.content,
            embedding = CreateField("embedding", chunk.embedding, new CreateFieldOptions {{ Storage = FieldStorage.Yes, Indexing = FieldIndexing.No }})
        }}"""
    }

    vector_options = VectorOptions(dimensions=RavenDBConfig.get_embedding_dimensions())
    index_definition.fields = {
        "embedding": IndexFieldOptions(
            storage=FieldStorage.YES, indexing=FieldIndexing.NO, vector=vector_options
        )
    }

    store.maintenance.send(PutIndexesOperation(index_definition))
    logger.info(f"✅ Created index {VECTOR_INDEX_NAME}")


def database_exists(url: str | None = None, database: str | None = None) -> bool:
    """Check if a database exists in RavenDB.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        bool: True if database exists, False otherwise
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    try:
        store = DocumentStore([url], database)
        store.initialize()
        with store.open_session() as session:
            list(session.query().take(0))
        store.close()
        return True
    except Exception:
        return False


def create_database(url: str | None = None, database: str | None = None) -> None:
    """Create a new database in RavenDB.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    payload = {"DatabaseName": database, "Settings": {}, "Disabled": False}
    response = requests.put(f"{url}/admin/databases", json=payload, timeout=30)
    response.raise_for_status()


def delete_database(url: str | None = None, database: str | None = None) -> None:
    """Delete a database from RavenDB.

    WARNING: This operation is irreversible and deletes every tenant's chunks and mappings.

    Args:
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())
    """
    if url is None:
        url = RavenDBConfig.get_url()
    if database is None:
        database = RavenDBConfig.get_database_name()

    store = DocumentStore([url], database)
    try:
        store.initialize()
        operation = DeleteDatabaseOperation(database_name=database, hard_delete=True)
        store.maintenance.server.send(operation)
    finally:
        store.close()


def count_chunks(
    phone_number: str | None = None,
    source: Source | None = None,
    url: str | None = None,
    database: str | None = None,
) -> int:
    """Count stored chunks, optionally for one tenant and/or source.

    Args:
        phone_number: Tenant to count for (None = all tenants)
        source: Source to count for (None = all sources)
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        int: Number of chunk documents
    """
    store = create_document_store(url, database)
    try:
        return ChunkRepository(store).count_chunks(phone_number, source)
    finally:
        store.close()


def search_chunks(
    query: str,
    phone_number: str,
    top_k: int = DEFAULT_TOP_K,
    source: Source | None = None,
    embedder: EmbeddingService | None = None,
    url: str | None = None,
    database: str | None = None,
) -> list[dict[str, Any]]:
    """Search a tenant's chunks by vector similarity.

    Args:
        query: The text query to search for
        phone_number: Tenant whose chunks are searched; other tenants are never returned
        top_k: Number of top results to return (default: 5)
        source: Restrict to one source (None = doc and sheet chunks)
        embedder: Embedding service for the query (defaults to get_embedding_service())
        url: RavenDB server URL (defaults to value from RavenDBConfig.get_url())
        database: Database name (defaults to value from RavenDBConfig.get_database_name())

    Returns:
        list[dict]: id, content, source and score of each match, best first
    """
    if embedder is None:
        embedder = get_embedding_service()
    query_embedding = embedder.generate_embeddings([query])[0]

    store = create_document_store(url, database)
    try:
        with store.open_session() as session:
            document_query = session.query_collection(CHUNKS_COLLECTION, object_type=dict)
            document_query = document_query.where_equals("phone_number", phone_number)
            if source is not None:
                document_query = document_query.and_also().where_equals("source", source.value)
            results = list(
                document_query.and_also()
                .vector_search("embedding", query_embedding)
                .order_by_score()
                .take(top_k)
            )
    finally:
        store.close()

    formatted_results = []
    for result in results:
        if result.get("phone_number", phone_number) != phone_number:
            continue
        formatted_results.append(
            {
                "id": result.get("@metadata", {}).get("@id"),
                "content": result.get("content", ""),
                "source": result.get("source", "unknown"),
                "score": result_score(result, query_embedding),
            }
        )

    formatted_results.sort(key=lambda item: item["score"], reverse=True)
    logger.info(f"🔍 Found {len(formatted_results)} chunks for {phone_number}")
    return formatted_results[:top_k]
