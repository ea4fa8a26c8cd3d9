"""Data models shared by the sync pipeline."""

from dataclasses import asdict, dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class Source(str, Enum):
    """Kind of external document a chunk was produced from."""

    GOOGLE_DOC = "google_doc"
    GOOGLE_SHEET = "google_sheet"

    @classmethod
    def parse(cls, value: "str | Source") -> "Source":
        """Parse a source from its value or a short alias ("doc", "sheet")."""
        if isinstance(value, Source):
            return value
        aliases = {"doc": cls.GOOGLE_DOC, "sheet": cls.GOOGLE_SHEET}
        normalized = value.strip().lower()
        if normalized in aliases:
            return aliases[normalized]
        return cls(normalized)


@dataclass(frozen=True)
class ChunkCandidate:
    """A freshly fragmented chunk and its fingerprint."""

    hash: str
    content: str


@dataclass(frozen=True)
class StoredChunk:
    """A chunk already persisted for a tenant and source."""

    id: str
    hash: str
    content: str


@dataclass(frozen=True)
class EmbeddedChunk:
    """A candidate with its embedding, ready to persist.

    ``target_id`` is set when the chunk overwrites an existing stored row.
    """

    candidate: ChunkCandidate
    embedding: list[float]
    target_id: str | None = None


@dataclass(frozen=True)
class SyncPlan:
    """Reconciliation of current chunks against stored chunks.

    Attributes:
        to_add: Candidates whose hash is not stored yet
        to_update: (candidate, stored) pairs sharing a hash but not content
        to_delete: Stored chunks whose hash disappeared upstream
        unchanged: Candidates already stored with identical content
        redundant: Stored rows duplicating the hash of another stored row
    """

    to_add: tuple[ChunkCandidate, ...] = ()
    to_update: tuple[tuple[ChunkCandidate, StoredChunk], ...] = ()
    to_delete: tuple[StoredChunk, ...] = ()
    unchanged: tuple[ChunkCandidate, ...] = ()
    redundant: tuple[StoredChunk, ...] = ()

    @property
    def is_noop(self) -> bool:
        return not (self.to_add or self.to_update or self.to_delete or self.redundant)


@dataclass
class SyncMapping:
    """Link between a tenant and the Google document it syncs from."""

    phone_number: str
    source: Source
    external_id: str
    name: str | None = None
    last_synced_at: datetime | None = None
    last_chunk_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "phone_number": self.phone_number,
            "source": self.source.value,
            "external_id": self.external_id,
            "name": self.name,
            "last_synced_at": self.last_synced_at.isoformat() if self.last_synced_at else None,
            "last_chunk_count": self.last_chunk_count,
        }


@dataclass
class SyncResult:
    """Outcome of one sync attempt, reported even when the attempt failed."""

    phone_number: str
    source: Source
    total: int = 0
    added: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0
    embedded: int = 0
    synced_at: datetime | None = None
    success: bool = False
    message: str = ""

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["source"] = self.source.value
        data["synced_at"] = self.synced_at.isoformat() if self.synced_at else None
        return data
