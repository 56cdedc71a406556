"""
models/similarity.py
════════════════════
Geometric and set-math primitives shared by the factor scorers.

  jaccard_similarity   — |A ∩ B| / |A ∪ B| over lower-cased string values
  cosine_similarity    — angle cosine between two equal-length numeric vectors
  haversine_km         — great-circle distance on a 6371 km sphere
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _sk_cosine

EARTH_RADIUS_KM = 6371.0


def jaccard_similarity(set1: Iterable[Any] | None, set2: Iterable[Any] | None) -> float:
    """
    Jaccard similarity of two collections, compared case-insensitively.
    Returns 0.0 when either side is missing or empty.
    """
    s1 = {str(item).lower() for item in (set1 or [])}
    s2 = {str(item).lower() for item in (set2 or [])}
    if not s1 or not s2:
        return 0.0
    return len(s1 & s2) / len(s1 | s2)


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Cosine similarity for numerical feature vectors.
    Returns 0.0 on a length mismatch or when either vector has zero magnitude.
    """
    if len(vec1) != len(vec2):
        return 0.0

    a = np.asarray(vec1, dtype=np.float64).reshape(1, -1)
    b = np.asarray(vec2, dtype=np.float64).reshape(1, -1)
    if a.size == 0 or not np.linalg.norm(a) or not np.linalg.norm(b):
        return 0.0

    return float(_sk_cosine(a, b)[0, 0])


def haversine_km(lat1, lon1, lat2, lon2):
    """
    Distance in kilometres between two (lat, lon) points given in decimal
    degrees. Accepts scalars or NumPy arrays; scalars come back as float.
    """
    phi1 = np.radians(lat1)
    phi2 = np.radians(lat2)
    d_phi = np.radians(np.subtract(lat2, lat1))
    d_lambda = np.radians(np.subtract(lon2, lon1))

    a = (
        np.sin(d_phi / 2) ** 2
        + np.cos(phi1) * np.cos(phi2) * np.sin(d_lambda / 2) ** 2
    )
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    distance = EARTH_RADIUS_KM * c

    if np.ndim(distance) == 0:
        return float(distance)
    return distance
