"""Data models for RavenDB document storage."""

from dataclasses import dataclass, field

from warag.constants import CHUNKS_COLLECTION, MAPPINGS_COLLECTION


def chunk_document_id(phone_number: str, source: str, row_hash: str) -> str:
    """Content-addressed document ID: the same hash in a partition is the same document."""
    return f"{CHUNKS_COLLECTION}/{source}/{phone_number}/{row_hash}"


def mapping_document_id(phone_number: str, source: str) -> str:
    """Document ID of the sync mapping for a tenant and source."""
    return f"{MAPPINGS_COLLECTION}/{source}/{phone_number}"


@dataclass(eq=False)
class ChunkDocument:
    """A tenant's chunk with embedding for vector search.

    Note: eq=False ensures each instance is unique and hashable by identity,
    which is required for RavenDB's session entity tracking.

    Attributes:
        Id: RavenDB document ID (see chunk_document_id)
        phone_number: Tenant that owns the chunk
        source: "google_doc" or "google_sheet"
        content: The text content of the chunk
        row_hash: SHA-256 hex digest of content
        embedding: Vector embedding of the content
        created_at: ISO-8601 UTC timestamp of the first write
    """

    Id: str | None = None
    phone_number: str = ""
    source: str = ""
    content: str = ""
    row_hash: str = ""
    embedding: list[float] = field(default_factory=list)
    created_at: str | None = None

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)


@dataclass(eq=False)
class SyncMappingDocument:
    """Link between a tenant and a Google Doc or Sheet, plus last sync info."""

    Id: str | None = None
    phone_number: str = ""
    source: str = ""
    external_id: str = ""
    name: str | None = None
    last_synced_at: str | None = None
    last_chunk_count: int = 0

    def __hash__(self) -> int:
        """Hash by object identity for RavenDB session tracking."""
        return id(self)
