"""Cosine similarity helpers for embedding search."""

from collections.abc import Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as sklearn_cosine


def cosine_similarities(query: Sequence[float], matrix: np.ndarray) -> np.ndarray:
    """Cosine similarity of one query vector against each row of matrix.

    Returns an array of shape (n_rows,). Zero vectors score 0.0.
    """
    if matrix.size == 0:
        return np.zeros(0, dtype=float)
    q = np.asarray(query, dtype=float).reshape(1, -1)
    return sklearn_cosine(q, matrix)[0]


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity (1 - cosine distance) between two vectors."""
    return float(cosine_similarities(a, np.asarray([b], dtype=float))[0])

