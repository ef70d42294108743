"""Cosine similarity between embedding vectors."""

from collections.abc import Sequence

import numpy as np


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Return dot(a, b) / (|a| * |b|).

    The result is not clamped. It is NaN when either vector has zero
    magnitude.

    Raises:
        ValueError: If the vectors are empty or differ in length
    """
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.ndim != 1 or vb.ndim != 1:
        raise ValueError("Embedding vectors must be one-dimensional")
    if va.size == 0 or vb.size == 0:
        raise ValueError("Embedding vectors must not be empty")
    if va.shape != vb.shape:
        raise ValueError(f"Embedding dimensions differ: {va.size} != {vb.size}")

    magnitude = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if magnitude == 0.0:
        return float("nan")
    return float(np.dot(va, vb)) / magnitude
