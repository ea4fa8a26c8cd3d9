"""Document sync reconciler.

Fragment a source's text, fingerprint each chunk, diff the fingerprints
against what a tenant has stored, then embed and persist the difference.

Usage:
    from warag.sync import SyncService, chunk_text, reconcile
"""

from warag.sync.applier import ApplyOutcome, EmbeddingApplier
from warag.sync.fingerprint import build_candidates, hash_content
from warag.sync.fragmenter import chunk_text, rows_to_texts
from warag.sync.locks import TenantLocks
from warag.sync.models import (
    ChunkCandidate,
    EmbeddedChunk,
    Source,
    StoredChunk,
    SyncMapping,
    SyncPlan,
    SyncResult,
)
from warag.sync.ratelimit import RateLimiter
from warag.sync.reconciler import reconcile
from warag.sync.service import SyncService

__all__ = [
    # Models
    "ChunkCandidate",
    "EmbeddedChunk",
    "Source",
    "StoredChunk",
    "SyncMapping",
    "SyncPlan",
    "SyncResult",
    # Pipeline
    "chunk_text",
    "rows_to_texts",
    "hash_content",
    "build_candidates",
    "reconcile",
    "EmbeddingApplier",
    "ApplyOutcome",
    "RateLimiter",
    "TenantLocks",
    "SyncService",
]
