"""
models/factors.py
═════════════════
Per-factor compatibility scorers. Every function returns a float in [0, 1]
and degrades to a neutral constant when the inputs are incomplete.

  Factor                    Neutral
  ──────────────────────    ───────
  interests similarity       0.3
  location proximity         0.5
  age compatibility          0.5
  activity recency           0.1 (missing last_active)
  preference match           0.5
"""

from __future__ import annotations

import math
from datetime import datetime

from models.profile import Profile
from models.similarity import haversine_km, jaccard_similarity
from utils.logger import logger

NEUTRAL_INTERESTS = 0.3
NEUTRAL_LOCATION = 0.5
NEUTRAL_AGE = 0.5
NEUTRAL_PREFERENCES = 0.5
DEFAULT_MAX_DISTANCE_KM = 100.0

# (inclusive upper bound on |age difference|, score)
_AGE_STEPS = ((5, 1.0), (10, 0.8), (15, 0.6), (20, 0.4))
_AGE_FLOOR = 0.2

# (exclusive upper bound on hours since active, score)
_ACTIVITY_STEPS = ((1, 1.0), (6, 0.9), (24, 0.7), (72, 0.5), (168, 0.3))
_ACTIVITY_FLOOR = 0.1

# categorical field → score when the two values differ
_CATEGORICAL_MISMATCH = {
    "education":         0.5,
    "smoking":           0.3,
    "drinking":          0.5,
    "religion":          0.4,
    "relationship_type": 0.2,
}


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def score_interests_similarity(user: Profile, candidate: Profile) -> float:
    if not user.interests or not candidate.interests:
        return NEUTRAL_INTERESTS
    return jaccard_similarity(user.interests, candidate.interests)


def score_location_proximity(
    user: Profile,
    candidate: Profile,
    max_distance: float = DEFAULT_MAX_DISTANCE_KM,
) -> float:
    """
    Exponential distance decay: exp(-d / max_distance).
    A zero coordinate is treated as unknown, same as a missing location.
    """
    if user.location is None or candidate.location is None:
        return NEUTRAL_LOCATION

    try:
        u, c = user.location, candidate.location
        if not (u.lat and u.lng and c.lat and c.lng):
            return NEUTRAL_LOCATION

        distance = haversine_km(u.lat, u.lng, c.lat, c.lng)
        score = math.exp(-distance / max_distance)
        if math.isnan(score):
            raise ValueError(f"non-numeric proximity for distance={distance}")
        return _clamp(score)
    except (TypeError, ValueError, ZeroDivisionError, OverflowError) as exc:
        logger.error(f"Location scoring error for candidate {candidate.id}: {exc}")
        return NEUTRAL_LOCATION


def score_age_compatibility(user: Profile, candidate: Profile) -> float:
    if not user.age or not candidate.age:
        return NEUTRAL_AGE

    age_diff = abs(user.age - candidate.age)
    for bound, score in _AGE_STEPS:
        if age_diff <= bound:
            return score
    return _AGE_FLOOR


def hours_since(moment: datetime, now: datetime) -> float:
    return (now - moment).total_seconds() / 3600.0


def score_activity_level(candidate: Profile, now: datetime) -> float:
    """Recency decay on the candidate's last_active timestamp."""
    if candidate.last_active is None:
        return _ACTIVITY_FLOOR

    hours = hours_since(candidate.last_active, now)
    for bound, score in _ACTIVITY_STEPS:
        if hours < bound:
            return score
    return _ACTIVITY_FLOOR


def _pet_compatibility(user: Profile, candidate: Profile) -> float:
    if user.has_pets == candidate.has_pets:
        return 1.0
    if user.pet_preference == "open" or candidate.pet_preference == "open":
        return 0.7
    return 0.3


def score_preference_match(user: Profile, candidate: Profile) -> float:
    """
    Unweighted mean over the lifestyle attributes both profiles carry.
    A single shared attribute decides the whole score.
    """
    contributions: list[float] = []

    if user.has_pets is not None and candidate.has_pets is not None:
        contributions.append(_pet_compatibility(user, candidate))

    for attr, mismatch in _CATEGORICAL_MISMATCH.items():
        mine, theirs = getattr(user, attr), getattr(candidate, attr)
        if mine and theirs:
            contributions.append(1.0 if mine == theirs else mismatch)

    if user.languages and candidate.languages:
        contributions.append(jaccard_similarity(user.languages, candidate.languages))

    if user.favorite_books and candidate.favorite_books:
        contributions.append(jaccard_similarity(user.book_titles, candidate.book_titles))

    if not contributions:
        return NEUTRAL_PREFERENCES
    return _clamp(sum(contributions) / len(contributions))
