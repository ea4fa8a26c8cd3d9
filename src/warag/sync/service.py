"""Sync orchestration: fetch, fragment, reconcile, apply, record."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, Protocol

from warag.constants import DEFAULT_CHUNK_OVERLAP, DEFAULT_CHUNK_SIZE, DEFAULT_SHEET_RANGE
from warag.errors import EmbeddingError, MappingNotFoundError, SyncError
from warag.sync.applier import EmbeddingApplier
from warag.sync.fingerprint import build_candidates
from warag.sync.fragmenter import chunk_text, rows_to_texts
from warag.sync.locks import TenantLocks
from warag.sync.models import ChunkCandidate, Source, StoredChunk, SyncMapping, SyncResult
from warag.sync.reconciler import reconcile

logger = logging.getLogger(__name__)


class SyncRepository(Protocol):
    """Storage operations the sync service needs."""

    def get_mapping(self, phone_number: str, source: Source) -> SyncMapping | None: ...

    def load_existing_chunks(self, phone_number: str, source: Source) -> list[StoredChunk]: ...

    def update_sync_metadata(
        self, phone_number: str, source: Source, synced_at: datetime, count: int
    ) -> Any: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SyncService:
    """Brings a tenant's stored chunks in line with its linked Google Doc or Sheet.

    All collaborators are injected; build a production instance with
    warag.service.factory.create_sync_service().
    """

    def __init__(
        self,
        repository: SyncRepository,
        applier: EmbeddingApplier,
        docs_source: Any,
        sheets_source: Any,
        locks: TenantLocks | None = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        chunk_overlap: int = DEFAULT_CHUNK_OVERLAP,
        sheet_range: str = DEFAULT_SHEET_RANGE,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.repository = repository
        self.applier = applier
        self.docs_source = docs_source
        self.sheets_source = sheets_source
        self.locks = locks or TenantLocks()
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.sheet_range = sheet_range
        self._clock = clock

    def sync_google_doc(self, phone_number: str) -> SyncResult:
        return self.sync(phone_number, Source.GOOGLE_DOC)

    def sync_google_sheet(self, phone_number: str) -> SyncResult:
        return self.sync(phone_number, Source.GOOGLE_SHEET)

    def build_candidates(self, mapping: SyncMapping) -> list[ChunkCandidate]:
        """Fetch the linked document and turn it into fingerprinted chunks.

        Raises:
            SourceFetchError: If the document cannot be read
        """
        if mapping.source is Source.GOOGLE_DOC:
            text = self.docs_source.fetch_document_text(mapping.external_id)
            texts = chunk_text(text, self.chunk_size, self.chunk_overlap)
        else:
            rows = self.sheets_source.fetch_sheet_rows(mapping.external_id, self.sheet_range)
            texts = rows_to_texts(rows)

        return build_candidates(texts)

    def sync(self, phone_number: str, source: Source | str) -> SyncResult:
        """Run one sync for a tenant and source.

        ``last_synced_at`` is only advanced after every change was persisted.

        Args:
            phone_number: Tenant key
            source: Source partition to sync

        Returns:
            SyncResult: Counts of what changed

        Raises:
            SyncInProgressError: If the same partition is already syncing
            MappingNotFoundError: If no document is linked
            SourceFetchError: If the document cannot be read
            EmbeddingError: If embedding fails; nothing was persisted
            PersistenceError: If storage fails
        """
        source = Source.parse(source)
        result = SyncResult(phone_number=phone_number, source=source)

        with self.locks.hold(phone_number, source):
            logger.info(f"🔄 Syncing {source.value} for {phone_number}")
            try:
                mapping = self.repository.get_mapping(phone_number, source)
                if mapping is None:
                    raise MappingNotFoundError(
                        f"No {source.value.replace('_', ' ').title()} configured for {phone_number}"
                    )

                candidates = self.build_candidates(mapping)
                result.total = len(candidates)

                existing = self.repository.load_existing_chunks(phone_number, source)
                plan = reconcile(candidates, existing)
                result.unchanged = len(plan.unchanged)
                logger.info(
                    f"  To add: {len(plan.to_add)}, to delete: {len(plan.to_delete)}, "
                    f"to update: {len(plan.to_update)}"
                )

                outcome = self.applier.apply(plan, phone_number, source)
                result.added = outcome.added
                result.updated = outcome.updated
                result.deleted = outcome.deleted
                result.embedded = outcome.embedded

                synced_at = self._clock()
                self.repository.update_sync_metadata(phone_number, source, synced_at, result.total)
            except SyncError as e:
                if isinstance(e, EmbeddingError):
                    result.embedded = e.embedded
                result.message = e.message
                e.result = result
                logger.error(f"❌ Sync of {source.value} for {phone_number} failed: {e}")
                raise

        result.synced_at = synced_at
        result.success = True
        result.message = f"{source.value.replace('_', ' ').title()} synced successfully"
        logger.info(
            f"✅ Synced {source.value} for {phone_number}: total={result.total} "
            f"added={result.added} updated={result.updated} deleted={result.deleted}"
        )
        return result
