from __future__ import annotations

from typing import Sequence

import numpy as np


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two equal-length vectors.

    Mismatched lengths raise ValueError instead of being truncated or padded.
    """

    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    if va.ndim != 1 or vb.ndim != 1:
        raise ValueError("Vectors must be one-dimensional")
    if va.shape[0] != vb.shape[0]:
        raise ValueError(f"Vector length mismatch: {va.shape[0]} != {vb.shape[0]}")
    return float(np.sqrt(np.sum((va - vb) ** 2)))
