"""
models/matching_score.py
════════════════════════
Points-based compatibility score (0–100) shown on profile cards.

Components
──────────
  location        0–50   GPS distance, falling back to city names
  interests       0–25   Jaccard overlap of interests
  compatibility   0–15   smoking, drinking, children
  preferences     0–10   relationship type, looking-for overlap
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from models.profile import Profile
from models.similarity import haversine_km

DEFAULT_MAX_DISTANCE_KM = 50.0


@dataclass
class MatchingScoreResult:
    total_score: int
    location: int
    interests: int
    compatibility: int
    preferences: int

    def to_dict(self) -> dict:
        return {
            "totalScore": self.total_score,
            "breakdown": {
                "location":      self.location,
                "interests":     self.interests,
                "compatibility": self.compatibility,
                "preferences":   self.preferences,
            },
        }


@dataclass
class LocationAccuracy:
    level: str
    percentage: int
    description: str


def _js_round(value: float) -> int:
    # Math.round semantics: halves go up
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _same_city(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a and b and a.lower() == b.lower())


def location_points(user1: Profile, user2: Profile, max_distance: float = DEFAULT_MAX_DISTANCE_KM) -> float:
    if user1.location and user2.location:
        distance = haversine_km(
            user1.location.lat, user1.location.lng,
            user2.location.lat, user2.location.lng,
        )
        if distance <= max_distance:
            return max(0.0, 50 - (distance / max_distance) * 50)
        return 0.0

    # one side has GPS, the other a city name
    if (user1.location and user2.location_city) or (user2.location and user1.location_city):
        return 50.0 if _same_city(user1.location_city, user2.location_city) else 25.0

    if user1.location_city and user2.location_city:
        return 25.0 if _same_city(user1.location_city, user2.location_city) else 0.0

    return 5.0


def interest_points(user1: Profile, user2: Profile) -> int:
    if not user1.interests or not user2.interests:
        return 0

    interests1 = [i.lower() for i in user1.interests]
    interests2 = [i.lower() for i in user2.interests]
    common = [i for i in interests1 if i in interests2]
    total_unique = len(set(interests1) | set(interests2))
    if total_unique == 0:
        return 0
    return _js_round(len(common) / total_unique * 25)


def _never_vs_occasionally(a: str, b: str) -> bool:
    return {a, b} == {"never", "occasionally"}


def compatibility_points(user1: Profile, user2: Profile) -> int:
    score = 0

    for attr in ("smoking", "drinking"):
        a, b = getattr(user1, attr), getattr(user2, attr)
        if a and b:
            if a == b:
                score += 5
            elif _never_vs_occasionally(a, b):
                score += 2

    if user1.children and user2.children:
        if user1.children == user2.children:
            score += 5
        elif user1.children == "open" or user2.children == "open":
            score += 3

    return score


def preference_points(user1: Profile, user2: Profile) -> int:
    score = 0

    if user1.relationship_type and user2.relationship_type:
        if user1.relationship_type == user2.relationship_type:
            score += 5
        elif "not_sure" in (user1.relationship_type, user2.relationship_type):
            score += 2

    if user1.looking_for and user2.looking_for:
        wanted2 = [w.lower() for w in user2.looking_for]
        overlap = [w for w in (w.lower() for w in user1.looking_for) if w in wanted2]
        if overlap:
            score += min(5, len(overlap) * 2)

    return score


def calculate_matching_score(
    user1: Profile,
    user2: Profile,
    max_distance: float = DEFAULT_MAX_DISTANCE_KM,
) -> MatchingScoreResult:
    location = location_points(user1, user2, max_distance)
    interests = interest_points(user1, user2)
    compatibility = compatibility_points(user1, user2)
    preferences = preference_points(user1, user2)

    total = min(100.0, location + interests + compatibility + preferences)
    return MatchingScoreResult(
        total_score=_js_round(total),
        location=_js_round(location),
        interests=interests,
        compatibility=compatibility,
        preferences=preferences,
    )


def get_location_accuracy(profile: Profile) -> LocationAccuracy:
    if profile.location:
        return LocationAccuracy("high", 100, "GPS location enabled - Best matching accuracy")
    if profile.location_city:
        return LocationAccuracy("medium", 50, "City location only - Moderate matching accuracy")
    return LocationAccuracy("none", 0, "No location provided - Limited matching")
