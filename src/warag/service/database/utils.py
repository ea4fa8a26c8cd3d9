"""Scoring helpers for vector search results."""

import math
from collections.abc import Sequence
from typing import Any


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine similarity of two vectors, 0.0 when either is empty, zero or mismatched."""
    if not vec_a or not vec_b or len(vec_a) != len(vec_b):
        return 0.0

    norm_a = math.sqrt(math.fsum(a * a for a in vec_a))
    norm_b = math.sqrt(math.fsum(b * b for b in vec_b))
    if norm_a == 0 or norm_b == 0:
        return 0.0

    return math.fsum(a * b for a, b in zip(vec_a, vec_b)) / (norm_a * norm_b)


def result_score(result: dict[str, Any], query_embedding: Sequence[float]) -> float:
    """Score of a raw RavenDB result.

    Prefers the server-side ``@index-score``; falls back to cosine similarity
    against the stored embedding when the index did not report one.
    """
    index_score = result.get("@metadata", {}).get("@index-score")
    if index_score is not None:
        return float(index_score)
    return cosine_similarity(query_embedding, result.get("embedding") or [])
