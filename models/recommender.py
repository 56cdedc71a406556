"""
models/recommender.py
═════════════════════
Explainable match recommendations: combines the five factor scores into a
single 0–1 score, attaches human-readable reasons and ranks candidates.

Factor weights
──────────────
  interests     0.25   Jaccard overlap of interests
  location      0.20   exp(-distance / max_distance)
  age           0.15   step function on |age difference|
  activity      0.15   step function on hours since last active
  preferences   0.25   mean lifestyle compatibility

Usage
─────
  from models.recommender import get_top_recommendations, explain_recommendation

  top = get_top_recommendations(user, candidates, limit=10, settings=settings)
  for rec in top:
      print(explain_recommendation(rec))    # "82% match - Strong shared interests, ..."
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from models.factors import (
    DEFAULT_MAX_DISTANCE_KM,
    score_activity_level,
    score_age_compatibility,
    score_interests_similarity,
    score_location_proximity,
    score_preference_match,
)
from models.profile import Profile, UserSettings

FACTOR_WEIGHTS = {
    "interests":   0.25,
    "location":    0.20,
    "age":         0.15,
    "activity":    0.15,
    "preferences": 0.25,
}

FALLBACK_REASON = "New match for you"


def _as_utc(now: Optional[datetime]) -> datetime:
    """Current UTC time when `now` is None; naive values are taken as UTC."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


@dataclass
class ScoreBreakdown:
    interests_similarity: float
    location_proximity: float
    age_compatibility: float
    activity_score: float
    preference_match: float

    def to_dict(self) -> dict[str, float]:
        return {
            "interestsSimilarity": self.interests_similarity,
            "locationProximity":   self.location_proximity,
            "ageCompatibility":    self.age_compatibility,
            "activityScore":       self.activity_score,
            "preferenceMatch":     self.preference_match,
        }


@dataclass
class RecommendationScore:
    user_id: str
    score: float
    breakdown: ScoreBreakdown
    reasons: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "userId":    self.user_id,
            "score":     self.score,
            "reasons":   list(self.reasons),
            "breakdown": self.breakdown.to_dict(),
        }


def _reasons_for(breakdown: ScoreBreakdown, candidate: Profile) -> list[str]:
    reasons: list[str] = []

    if breakdown.interests_similarity > 0.6:
        reasons.append("Strong shared interests")
    elif breakdown.interests_similarity > 0.3:
        reasons.append("Some common interests")

    if breakdown.location_proximity > 0.7:
        reasons.append("Very close by")
    elif breakdown.location_proximity > 0.4:
        reasons.append("Nearby location")

    if breakdown.age_compatibility > 0.8:
        reasons.append("Similar age")

    if breakdown.activity_score > 0.7:
        reasons.append("Recently active")

    if breakdown.preference_match > 0.7:
        reasons.append("Highly compatible lifestyle")
    elif breakdown.preference_match > 0.5:
        reasons.append("Compatible preferences")

    if candidate.is_premium:
        reasons.append("Premium member")
    if candidate.is_verified:
        reasons.append("Verified profile")

    return reasons or [FALLBACK_REASON]


def calculate_recommendation_score(
    user: Profile,
    candidate: Profile,
    settings: Optional[UserSettings] = None,
    now: Optional[datetime] = None,
) -> RecommendationScore:
    """Score one candidate against `user`. Pure apart from the default `now`."""
    max_distance = (settings.max_distance if settings else None) or DEFAULT_MAX_DISTANCE_KM
    now = _as_utc(now)

    breakdown = ScoreBreakdown(
        interests_similarity=score_interests_similarity(user, candidate),
        location_proximity=score_location_proximity(user, candidate, max_distance),
        age_compatibility=score_age_compatibility(user, candidate),
        activity_score=score_activity_level(candidate, now),
        preference_match=score_preference_match(user, candidate),
    )

    total = (
        breakdown.interests_similarity * FACTOR_WEIGHTS["interests"]   +
        breakdown.location_proximity   * FACTOR_WEIGHTS["location"]    +
        breakdown.age_compatibility    * FACTOR_WEIGHTS["age"]         +
        breakdown.activity_score       * FACTOR_WEIGHTS["activity"]    +
        breakdown.preference_match     * FACTOR_WEIGHTS["preferences"]
    )

    return RecommendationScore(
        user_id=candidate.id,
        score=min(max(total, 0.0), 1.0),
        breakdown=breakdown,
        reasons=_reasons_for(breakdown, candidate),
    )


def get_top_recommendations(
    user: Profile,
    candidates: Sequence[Profile],
    limit: int = 10,
    settings: Optional[UserSettings] = None,
    now: Optional[datetime] = None,
    max_workers: int = 1,
) -> list[RecommendationScore]:
    """
    Score every candidate, sort by descending score and keep the first `limit`.
    `now` is sampled once so all candidates share the same recency reference.
    """
    now = _as_utc(now)

    def _score(candidate: Profile) -> RecommendationScore:
        return calculate_recommendation_score(user, candidate, settings, now)

    if max_workers > 1 and len(candidates) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            scores = list(pool.map(_score, candidates))
    else:
        scores = [_score(c) for c in candidates]

    scores.sort(key=lambda s: s.score, reverse=True)
    return scores[:max(limit, 0)]


def get_match_percentage(score: float) -> int:
    """Score as a whole percentage, rounding halves up."""
    return int(math.floor(score * 100 + 0.5))


def explain_recommendation(score: RecommendationScore) -> str:
    return f"{get_match_percentage(score.score)}% match - {', '.join(score.reasons)}"
