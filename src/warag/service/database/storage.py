"""Chunk and sync-mapping persistence in RavenDB."""

import logging
from datetime import datetime, timezone

from ravendb import DocumentStore

from warag.constants import CHUNKS_COLLECTION, MAPPINGS_COLLECTION
from warag.errors import PersistenceError
from warag.service.database.models import (
    ChunkDocument,
    SyncMappingDocument,
    chunk_document_id,
    mapping_document_id,
)
from warag.sync.models import EmbeddedChunk, Source, StoredChunk, SyncMapping

logger = logging.getLogger(__name__)


def _set_collection(session, entity, collection: str) -> None:
    metadata = session.advanced.get_metadata_for(entity)
    metadata["@collection"] = collection


class ChunkRepository:
    """Reads and writes one tenant partition at a time.

    Every method opens its own session; RavenDB errors are re-raised as
    PersistenceError so callers see a single failure type for storage.
    """

    def __init__(self, store: DocumentStore) -> None:
        """Initialize the repository.

        Args:
            store: Initialized DocumentStore (see create_document_store)
        """
        self.store = store

    def load_existing_chunks(self, phone_number: str, source: Source) -> list[StoredChunk]:
        """Load the stored chunks of one tenant and source.

        Args:
            phone_number: Tenant key
            source: Source partition

        Returns:
            list[StoredChunk]: id, hash and content of every stored chunk
        """
        rql = f"from {CHUNKS_COLLECTION} where phone_number = $phone_number and source = $source"
        try:
            with self.store.open_session() as session:
                results = list(
                    session.advanced.raw_query(rql, object_type=dict)
                    .add_parameter("phone_number", phone_number)
                    .add_parameter("source", source.value)
                    .wait_for_non_stale_results()
                )
        except Exception as e:
            raise PersistenceError(f"Failed to load existing chunks: {e}") from e

        chunks = []
        for result in results:
            row_hash = result.get("row_hash", "")
            doc_id = result.get("@metadata", {}).get("@id") or chunk_document_id(
                phone_number, source.value, row_hash
            )
            chunks.append(StoredChunk(id=doc_id, hash=row_hash, content=result.get("content", "")))

        logger.debug(f"Loaded {len(chunks)} stored {source.value} chunks for {phone_number}")
        return chunks

    def persist_chunks(
        self,
        phone_number: str,
        source: Source,
        additions: list[EmbeddedChunk],
        updates: list[EmbeddedChunk],
        deletions: list[StoredChunk],
    ) -> None:
        """Write a whole plan in one session.

        ``save_changes()`` sends all deletes and puts as a single batch, so a
        storage failure leaves the partition as it was.

        Raises:
            PersistenceError: If the batch could not be saved
        """
        created_at = datetime.now(timezone.utc).isoformat()
        try:
            with self.store.open_session() as session:
                for chunk in deletions:
                    session.delete(chunk.id)

                for item in additions + updates:
                    doc_id = item.target_id or chunk_document_id(
                        phone_number, source.value, item.candidate.hash
                    )
                    doc = ChunkDocument(
                        Id=doc_id,
                        phone_number=phone_number,
                        source=source.value,
                        content=item.candidate.content,
                        row_hash=item.candidate.hash,
                        embedding=item.embedding,
                        created_at=created_at,
                    )
                    session.store(doc, doc_id)
                    _set_collection(session, doc, CHUNKS_COLLECTION)

                session.save_changes()
        except Exception as e:
            raise PersistenceError(f"Failed to persist chunks: {e}") from e

        logger.debug(
            f"Persisted {len(additions)} added, {len(updates)} updated and "
            f"{len(deletions)} deleted {source.value} chunks for {phone_number}"
        )

    def count_chunks(self, phone_number: str | None = None, source: Source | None = None) -> int:
        """Count stored chunks, optionally narrowed to a tenant and/or source."""
        conditions = []
        if phone_number is not None:
            conditions.append("phone_number = $phone_number")
        if source is not None:
            conditions.append("source = $source")

        rql = f"from {CHUNKS_COLLECTION}"
        if conditions:
            rql += " where " + " and ".join(conditions)

        try:
            with self.store.open_session() as session:
                query = session.advanced.raw_query(rql, object_type=dict)
                if phone_number is not None:
                    query = query.add_parameter("phone_number", phone_number)
                if source is not None:
                    query = query.add_parameter("source", source.value)
                return len(list(query.wait_for_non_stale_results()))
        except Exception as e:
            raise PersistenceError(f"Failed to count chunks: {e}") from e

    def list_chunk_contents(self, phone_number: str, source: Source, limit: int = 20) -> list[str]:
        """Return the content of the first ``limit`` stored chunks, ordered by id."""
        rql = (
            f"from {CHUNKS_COLLECTION} where phone_number = $phone_number and source = $source "
            f"order by id() limit {int(limit)}"
        )
        try:
            with self.store.open_session() as session:
                results = list(
                    session.advanced.raw_query(rql, object_type=dict)
                    .add_parameter("phone_number", phone_number)
                    .add_parameter("source", source.value)
                    .wait_for_non_stale_results()
                )
        except Exception as e:
            raise PersistenceError(f"Failed to read stored chunks: {e}") from e

        return [result.get("content", "") for result in results]

    def get_mapping(self, phone_number: str, source: Source) -> SyncMapping | None:
        """Get the mapping linking a tenant to a document, or None if not linked."""
        try:
            with self.store.open_session() as session:
                data = session.load(mapping_document_id(phone_number, source.value), dict)
        except Exception as e:
            raise PersistenceError(f"Failed to load sync mapping: {e}") from e

        if not data:
            return None

        last_synced_at = data.get("last_synced_at")
        return SyncMapping(
            phone_number=phone_number,
            source=source,
            external_id=data.get("external_id", ""),
            name=data.get("name"),
            last_synced_at=datetime.fromisoformat(last_synced_at) if last_synced_at else None,
            last_chunk_count=data.get("last_chunk_count", 0),
        )

    def _write_mapping(self, mapping: SyncMapping) -> None:
        doc_id = mapping_document_id(mapping.phone_number, mapping.source.value)
        doc = SyncMappingDocument(
            Id=doc_id,
            phone_number=mapping.phone_number,
            source=mapping.source.value,
            external_id=mapping.external_id,
            name=mapping.name,
            last_synced_at=mapping.last_synced_at.isoformat() if mapping.last_synced_at else None,
            last_chunk_count=mapping.last_chunk_count,
        )
        try:
            with self.store.open_session() as session:
                session.store(doc, doc_id)
                _set_collection(session, doc, MAPPINGS_COLLECTION)
                session.save_changes()
        except Exception as e:
            raise PersistenceError(f"Failed to save sync mapping: {e}") from e

    def save_mapping(
        self, phone_number: str, source: Source, external_id: str, name: str | None = None
    ) -> SyncMapping:
        """Link a tenant to a document, resetting its sync state."""
        mapping = SyncMapping(
            phone_number=phone_number, source=source, external_id=external_id, name=name
        )
        self._write_mapping(mapping)
        logger.info(f"🔗 Linked {source.value} {external_id} to {phone_number}")
        return mapping

    def update_sync_metadata(
        self, phone_number: str, source: Source, synced_at: datetime, count: int
    ) -> SyncMapping:
        """Record a successful sync on the tenant's mapping.

        Raises:
            PersistenceError: If the mapping is missing or could not be written
        """
        mapping = self.get_mapping(phone_number, source)
        if mapping is None:
            raise PersistenceError(f"No {source.value} mapping for {phone_number}")

        mapping.last_synced_at = synced_at
        mapping.last_chunk_count = count
        self._write_mapping(mapping)
        return mapping
