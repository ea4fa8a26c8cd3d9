"""Pytest configuration and shared fixtures for the test suite."""

from datetime import datetime, timezone

import pytest
import requests

from warag.errors import EmbeddingError, PersistenceError
from warag.service.database.models import chunk_document_id
from warag.sync import EmbeddingApplier, Source, StoredChunk, SyncMapping, SyncService, TenantLocks

FIXED_NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


# Service availability checks
def ravendb_available() -> bool:
    """Check if RavenDB server is running and accessible.

    Returns:
        True if RavenDB is available, False otherwise
    """
    try:
        response = requests.get("http://localhost:8080/databases", timeout=2)
        return response.status_code == 200 or response.status_code == 401  # Auth required is OK
    except requests.RequestException:
        return False


class InMemoryRepository:
    """Dict-backed stand-in for ChunkRepository.

    Stores chunk rows as {id: {"row_hash", "content", "embedding"}} per
    (phone_number, source) partition and records every persist call.
    """

    def __init__(self):
        self.chunks: dict[tuple[str, Source], dict[str, dict]] = {}
        self.mappings: dict[tuple[str, Source], SyncMapping] = {}
        self.persist_calls = []
        self.fail_persist = False

    def partition(self, phone_number, source):
        return self.chunks.setdefault((phone_number, source), {})

    def contents(self, phone_number, source):
        return sorted(row["content"] for row in self.partition(phone_number, source).values())

    def load_existing_chunks(self, phone_number, source):
        return [
            StoredChunk(id=doc_id, hash=row["row_hash"], content=row["content"])
            for doc_id, row in self.partition(phone_number, source).items()
        ]

    def persist_chunks(self, phone_number, source, additions, updates, deletions):
        self.persist_calls.append((phone_number, source, additions, updates, deletions))
        if self.fail_persist:
            raise PersistenceError("Failed to persist chunks: storage unavailable")

        rows = self.partition(phone_number, source)
        for chunk in deletions:
            rows.pop(chunk.id, None)
        for item in additions + updates:
            doc_id = item.target_id or chunk_document_id(
                phone_number, source.value, item.candidate.hash
            )
            rows[doc_id] = {
                "row_hash": item.candidate.hash,
                "content": item.candidate.content,
                "embedding": item.embedding,
            }

    def count_chunks(self, phone_number=None, source=None):
        return sum(
            len(rows)
            for (phone, src), rows in self.chunks.items()
            if (phone_number is None or phone == phone_number) and (source is None or src == source)
        )

    def get_mapping(self, phone_number, source):
        return self.mappings.get((phone_number, source))

    def save_mapping(self, phone_number, source, external_id, name=None):
        mapping = SyncMapping(
            phone_number=phone_number, source=source, external_id=external_id, name=name
        )
        self.mappings[(phone_number, source)] = mapping
        return mapping

    def update_sync_metadata(self, phone_number, source, synced_at, count):
        mapping = self.mappings.get((phone_number, source))
        if mapping is None:
            raise PersistenceError(f"No {source.value} mapping for {phone_number}")
        mapping.last_synced_at = synced_at
        mapping.last_chunk_count = count
        return mapping


class FakeEmbedder:
    """Deterministic embedder: each text maps to [len(text), 1.0, 0.0].

    ``fail_on_call`` makes the given 1-based call numbers raise EmbeddingError.
    """

    def __init__(self, dimensions=3, fail_on_call=None):
        self.dimensions = dimensions
        self.fail_on_call = set(fail_on_call or [])
        self.calls = []

    @property
    def embedded_texts(self):
        return [text for call in self.calls for text in call]

    def generate_embeddings(self, texts, model=None):
        self.calls.append(list(texts))
        if len(self.calls) in self.fail_on_call:
            raise EmbeddingError("provider unavailable")
        return [[float(len(text)), 1.0] + [0.0] * (self.dimensions - 2) for text in texts]


class FakeDocsSource:
    """Docs source returning whatever text is assigned to ``documents[doc_id]``."""

    def __init__(self, documents=None):
        self.documents = documents or {}
        self.error = None

    def fetch_document_text(self, doc_id):
        if self.error is not None:
            raise self.error
        return self.documents.get(doc_id, "")


class FakeSheetsSource:
    """Sheets source returning whatever rows are assigned to ``sheets[sheet_id]``."""

    def __init__(self, sheets=None):
        self.sheets = sheets or {}
        self.ranges = []

    def fetch_sheet_rows(self, sheet_id, range_):
        self.ranges.append(range_)
        return self.sheets.get(sheet_id, [])


@pytest.fixture
def repository():
    """Provide an empty in-memory chunk repository."""
    return InMemoryRepository()


@pytest.fixture
def embedder():
    """Provide a deterministic fake embedder."""
    return FakeEmbedder()


@pytest.fixture
def docs_source():
    """Provide a fake Google Docs source."""
    return FakeDocsSource()


@pytest.fixture
def sheets_source():
    """Provide a fake Google Sheets source."""
    return FakeSheetsSource()


@pytest.fixture
def make_service(repository, docs_source, sheets_source):
    """Factory fixture building a SyncService over the in-memory fakes.

    Returns:
        Function taking an embedder plus optional chunk settings and applier options
    """

    def _make(embedder, chunk_size=10, chunk_overlap=2, **applier_kwargs):
        applier_kwargs.setdefault("retry_wait", 0)
        applier_kwargs.setdefault("retry_max_wait", 0)
        applier = EmbeddingApplier(embedder=embedder, writer=repository, **applier_kwargs)
        return SyncService(
            repository=repository,
            applier=applier,
            docs_source=docs_source,
            sheets_source=sheets_source,
            locks=TenantLocks(),
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            clock=lambda: FIXED_NOW,
        )

    return _make


@pytest.fixture
def ravendb_store():
    """Provide RavenDB DocumentStore, skip if RavenDB not available.

    Yields:
        Initialized DocumentStore instance

    Raises:
        pytest.skip: If RavenDB server is not running
    """
    if not ravendb_available():
        pytest.skip("RavenDB server not running on localhost:8080")

    from warag.service.database import create_document_store

    store = create_document_store()
    yield store
    store.close()
