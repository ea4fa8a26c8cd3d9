"""Diff freshly fetched chunks against stored chunks by content hash."""

import logging
from collections.abc import Iterable

from warag.sync.models import ChunkCandidate, StoredChunk, SyncPlan

logger = logging.getLogger(__name__)


def reconcile(current: Iterable[ChunkCandidate], existing: Iterable[StoredChunk]) -> SyncPlan:
    """Compute the add/update/delete plan that brings storage in line with the source.

    Hashes are the identity: a current chunk with no stored hash is added, a
    stored chunk whose hash disappeared is deleted. A shared hash with
    different content can only come from a digest collision and is reported
    in ``to_update``.

    Args:
        current: Candidates built from the latest fetch
        existing: Chunks currently persisted for the same tenant and source

    Returns:
        SyncPlan: Disjoint add/update/delete/unchanged sets
    """
    stored_by_hash: dict[str, StoredChunk] = {}
    redundant = []
    for chunk in existing:
        if chunk.hash in stored_by_hash:
            redundant.append(chunk)
        else:
            stored_by_hash[chunk.hash] = chunk

    current_by_hash: dict[str, ChunkCandidate] = {}
    for candidate in current:
        current_by_hash.setdefault(candidate.hash, candidate)

    to_add = []
    to_update = []
    unchanged = []
    for digest, candidate in current_by_hash.items():
        stored = stored_by_hash.get(digest)
        if stored is None:
            to_add.append(candidate)
        elif stored.content != candidate.content:
            logger.warning(
                f"⚠️ Hash {digest[:12]} maps to different content (stored id {stored.id}); "
                "treating as update"
            )
            to_update.append((candidate, stored))
        else:
            unchanged.append(candidate)

    to_delete = [chunk for digest, chunk in stored_by_hash.items() if digest not in current_by_hash]

    if redundant:
        logger.warning(f"⚠️ Found {len(redundant)} stored duplicate chunk(s), scheduling removal")

    logger.debug(
        f"Plan: add={len(to_add)} update={len(to_update)} delete={len(to_delete)} "
        f"unchanged={len(unchanged)}"
    )
    return SyncPlan(
        to_add=tuple(to_add),
        to_update=tuple(to_update),
        to_delete=tuple(to_delete),
        unchanged=tuple(unchanged),
        redundant=tuple(redundant),
    )
