"""
backend/schemas.py
──────────────────
Pydantic v2 request / response models for all FastAPI endpoints.
Fields are snake_case in Python and serialised as camelCase.

Sections
────────
  1. Recommendation models     — Breakdown, RecommendationItem, RecommendationsResponse
  2. Matching-score models     — MatchingScoreBreakdown, LocationAccuracyOut, MatchingScoreResponse
  3. Shared / util models      — HealthResponse, SwipeAction, ErrorResponse
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ─────────────────────────────────────────────────────────────────────────────
#  1. Recommendation models
# ─────────────────────────────────────────────────────────────────────────────

class Breakdown(_CamelModel):
    """Unweighted factor scores, each in [0, 1]."""
    interests_similarity: float
    location_proximity:   float
    age_compatibility:    float
    activity_score:       float
    preference_match:     float


class RecommendationItem(_CamelModel):
    """One ranked candidate with its explanation."""
    user_id:          str
    score:            float = Field(..., ge=0.0, le=1.0, description="Weighted score (0–1)")
    match_percentage: int   = Field(..., description="round(score × 100)")
    reasons:          list[str]
    explanation:      str
    breakdown:        Breakdown


class RecommendationsResponse(_CamelModel):
    """Response envelope for GET /api/recommendations."""
    recommendations: list[RecommendationItem]
    total:           Optional[int] = None
    message:         Optional[str] = None


# ─────────────────────────────────────────────────────────────────────────────
#  2. Points-based matching score models
# ─────────────────────────────────────────────────────────────────────────────

class MatchingScoreBreakdown(_CamelModel):
    location:      int = Field(..., description="0–50")
    interests:     int = Field(..., description="0–25")
    compatibility: int = Field(..., description="0–15")
    preferences:   int = Field(..., description="0–10")


class LocationAccuracyOut(_CamelModel):
    level:       str
    percentage:  int
    description: str


class MatchingScoreResponse(_CamelModel):
    user_id:                 str
    other_user_id:           str
    total_score:             int = Field(..., ge=0, le=100)
    breakdown:               MatchingScoreBreakdown
    user_location_accuracy:  LocationAccuracyOut
    other_location_accuracy: LocationAccuracyOut


# ─────────────────────────────────────────────────────────────────────────────
#  3. Shared / utility models
# ─────────────────────────────────────────────────────────────────────────────

class SwipeAction(_CamelModel):
    """Body for POST /api/swipe."""
    from_user_id: str
    to_user_id:   str
    action: str = Field(..., pattern="^(like|dislike|superlike)$")


class HealthResponse(_CamelModel):
    """Response for GET /health."""
    status:          str
    profiles_loaded: int
    store_ready:     bool
    version:         str = "1.0.0"


class ErrorResponse(BaseModel):
    """Body of every 4xx/5xx response."""
    error: str
