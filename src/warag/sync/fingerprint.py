"""Content fingerprints used as chunk identities."""

import hashlib
import logging
from collections.abc import Iterable

from warag.sync.models import ChunkCandidate

logger = logging.getLogger(__name__)


def hash_content(content: str) -> str:
    """Return the SHA-256 hex digest of a chunk's UTF-8 content (unsalted)."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def build_candidates(texts: Iterable[str]) -> list[ChunkCandidate]:
    """Fingerprint texts, keeping the first occurrence of repeated content.

    Args:
        texts: Chunk texts in document order

    Returns:
        list[ChunkCandidate]: One candidate per distinct content, in order
    """
    candidates = []
    seen: set[str] = set()

    for text in texts:
        digest = hash_content(text)
        if digest in seen:
            logger.debug(f"Skipping duplicate chunk {digest[:12]}")
            continue
        seen.add(digest)
        candidates.append(ChunkCandidate(hash=digest, content=text))

    return candidates
