"""Embed new chunk content and persist a reconciliation plan."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from tenacity import (
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from warag.constants import (
    DEFAULT_EMBEDDING_BATCH_SIZE,
    DEFAULT_EMBEDDING_MAX_ATTEMPTS,
    DEFAULT_EMBEDDING_RETRY_MAX_WAIT,
    DEFAULT_EMBEDDING_RETRY_WAIT,
)
from warag.errors import EmbeddingError
from warag.llm.base import EmbeddingService
from warag.sync.models import ChunkCandidate, EmbeddedChunk, Source, StoredChunk, SyncPlan
from warag.sync.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


class ChunkWriter(Protocol):
    """Storage operations the applier needs."""

    def persist_chunks(
        self,
        phone_number: str,
        source: Source,
        additions: list[EmbeddedChunk],
        updates: list[EmbeddedChunk],
        deletions: list[StoredChunk],
    ) -> None: ...


@dataclass(frozen=True)
class ApplyOutcome:
    """Counts of what an applied plan changed."""

    added: int = 0
    updated: int = 0
    deleted: int = 0
    embedded: int = 0


class EmbeddingApplier:
    """Applies a SyncPlan with buffered commit.

    Every added or updated chunk is embedded before anything is written. If an
    embedding batch still fails after its retries, the whole plan is dropped
    and nothing is persisted; otherwise additions, updates and deletions are
    handed to the writer in a single call.
    """

    def __init__(
        self,
        embedder: EmbeddingService,
        writer: ChunkWriter,
        batch_size: int = DEFAULT_EMBEDDING_BATCH_SIZE,
        max_attempts: int = DEFAULT_EMBEDDING_MAX_ATTEMPTS,
        retry_wait: float = DEFAULT_EMBEDDING_RETRY_WAIT,
        retry_max_wait: float = DEFAULT_EMBEDDING_RETRY_MAX_WAIT,
        rate_limiter: RateLimiter | None = None,
        expected_dimensions: int | None = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        if max_attempts <= 0:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        self.embedder = embedder
        self.writer = writer
        self.batch_size = batch_size
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait
        self.retry_max_wait = retry_max_wait
        self.rate_limiter = rate_limiter
        self.expected_dimensions = expected_dimensions

    def _embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Make one provider call, normalizing every failure to EmbeddingError."""
        if self.rate_limiter is not None:
            self.rate_limiter.acquire()

        try:
            vectors = self.embedder.generate_embeddings(texts)
        except EmbeddingError:
            raise
        except Exception as e:
            raise EmbeddingError(f"Embedding provider error: {type(e).__name__}: {e}") from e

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Embedding provider returned {len(vectors)} vectors for {len(texts)} texts"
            )
        if self.expected_dimensions is not None:
            for vector in vectors:
                if len(vector) != self.expected_dimensions:
                    raise EmbeddingError(
                        f"Expected {self.expected_dimensions}-dimensional embeddings, "
                        f"got {len(vector)}"
                    )
        return [list(vector) for vector in vectors]

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.retry_wait, max=self.retry_max_wait),
            retry=retry_if_exception_type(EmbeddingError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def embed_candidates(self, candidates: list[ChunkCandidate]) -> list[list[float]]:
        """Embed candidates in provider batches, retrying each batch.

        Raises:
            EmbeddingError: If a batch fails after all attempts; ``embedded``
                holds how many candidates were embedded before the failure
        """
        embeddings: list[list[float]] = []

        for start in range(0, len(candidates), self.batch_size):
            batch = candidates[start : start + self.batch_size]
            batch_number = start // self.batch_size + 1
            logger.debug(f"Embedding batch {batch_number} ({len(batch)} chunks)")
            try:
                vectors = self._retrying()(self._embed_batch, [c.content for c in batch])
            except EmbeddingError as e:
                logger.error(
                    f"❌ Embedding failed after {self.max_attempts} attempt(s) "
                    f"at chunk {start + 1}/{len(candidates)}: {e}"
                )
                raise EmbeddingError(
                    f"Embedding failed at chunk {start + 1} of {len(candidates)}: {e.message}",
                    embedded=len(embeddings),
                ) from e
            embeddings.extend(vectors)

        return embeddings

    def apply(self, plan: SyncPlan, phone_number: str, source: Source) -> ApplyOutcome:
        """Embed and persist a plan for one tenant and source.

        Args:
            plan: Output of reconcile()
            phone_number: Tenant key
            source: Source partition

        Returns:
            ApplyOutcome: Counts of added, updated, deleted and embedded chunks

        Raises:
            EmbeddingError: If embedding fails; nothing has been persisted
            PersistenceError: If the writer fails
        """
        if plan.is_noop:
            logger.info(f"✅ {source.value} for {phone_number} already up to date")
            return ApplyOutcome()

        pending = list(plan.to_add) + [candidate for candidate, _ in plan.to_update]
        embeddings = self.embed_candidates(pending)

        additions = [
            EmbeddedChunk(candidate=candidate, embedding=embedding)
            for candidate, embedding in zip(plan.to_add, embeddings)
        ]
        updates = [
            EmbeddedChunk(candidate=candidate, embedding=embedding, target_id=stored.id)
            for (candidate, stored), embedding in zip(
                plan.to_update, embeddings[len(plan.to_add) :]
            )
        ]
        deletions = list(plan.to_delete) + list(plan.redundant)

        self.writer.persist_chunks(phone_number, source, additions, updates, deletions)

        outcome = ApplyOutcome(
            added=len(additions),
            updated=len(updates),
            deleted=len(plan.to_delete),
            embedded=len(embeddings),
        )
        logger.info(
            f"✅ Applied {source.value} plan for {phone_number}: "
            f"+{outcome.added} ~{outcome.updated} -{outcome.deleted}"
        )
        return outcome

    def describe(self) -> dict[str, Any]:
        """Settings summary for health and status output."""
        return {
            "batch_size": self.batch_size,
            "max_attempts": self.max_attempts,
            "expected_dimensions": self.expected_dimensions,
            "rate_limited": self.rate_limiter is not None,
        }
