"""
backend/routers/recommendations.py
──────────────────────────────────
FastAPI router for recommendation endpoints.

Endpoints
─────────
GET  /api/recommendations                          — AI-ranked candidates for a user
GET  /api/matching-score/{user_id}/{other_user_id} — Points-based 0–100 score for a pair
POST /api/swipe                                    — Record a like / dislike / superlike
"""

import math
import re
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from backend.schemas import (
    Breakdown,
    ErrorResponse,
    LocationAccuracyOut,
    MatchingScoreBreakdown,
    MatchingScoreResponse,
    RecommendationItem,
    RecommendationsResponse,
    SwipeAction,
)
from config.settings import Settings, get_settings
from models.matching_score import calculate_matching_score, get_location_accuracy
from models.recommender import (
    RecommendationScore,
    explain_recommendation,
    get_match_percentage,
    get_top_recommendations,
)
from models.profile import UserSettings
from utils.data_loader import ProfileStore, get_store
from utils.logger import logger

router = APIRouter(prefix="/api", tags=["recommendations"])

_INVALID_OR_MISSING = {
    400: {"model": ErrorResponse, "description": "Invalid User ID"},
    404: {"model": ErrorResponse, "description": "User not found"},
}

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


# ── dependencies ──────────────────────────────────────────────────────────────

def _store_dep() -> ProfileStore:
    return get_store()


def _settings_dep() -> Settings:
    return get_settings()


# ── helpers ───────────────────────────────────────────────────────────────────

def sanitize_uuid(raw: Optional[str]) -> str:
    """Lower-cased UUID, or '' when `raw` is not one."""
    if not raw or not _UUID_RE.match(raw):
        return ""
    return raw.lower()


def sanitize_limit(raw: Optional[str], default: int, low: int, high: int) -> int:
    """Coerce to a number clamped to [low, high]; non-numeric gives `default`."""
    try:
        value = float(raw) if raw not in (None, "") else float(default)
    except ValueError:
        return default
    if not math.isfinite(value):
        return default
    return int(min(max(value, low), high))


def _to_item(rec: RecommendationScore) -> RecommendationItem:
    return RecommendationItem(
        user_id=rec.user_id,
        score=rec.score,
        match_percentage=get_match_percentage(rec.score),
        reasons=rec.reasons,
        explanation=explain_recommendation(rec),
        breakdown=Breakdown(**rec.breakdown.to_dict()),
    )


def _require_profile(store: ProfileStore, raw_id: str):
    user_id = sanitize_uuid(raw_id)
    if not user_id:
        raise HTTPException(400, "Invalid User ID")
    profile = store.get_profile(user_id)
    if profile is None:
        raise HTTPException(404, "User not found")
    return profile


# ── endpoints ─────────────────────────────────────────────────────────────────

@router.get(
    "/recommendations",
    response_model=RecommendationsResponse,
    response_model_exclude_none=True,
    responses={
        **_INVALID_OR_MISSING,
        500: {"model": ErrorResponse, "description": "Failed to generate recommendations"},
    },
)
def get_recommendations(
    user_id: Optional[str] = Query(None, alias="userId"),
    limit: Optional[str] = Query(None, description="Number of results (clamped to 1–50)"),
    store: ProfileStore = Depends(_store_dep),
    settings: Settings = Depends(_settings_dep),
):
    user = _require_profile(store, user_id)
    top_n = sanitize_limit(limit, settings.default_limit, 1, settings.max_limit)

    try:
        user_settings = store.get_settings(user.id) or UserSettings()
        candidates = store.list_candidates(
            user.id,
            show_me_gender=user_settings.show_me_gender,
            limit=settings.candidate_pool_size,
        )
        if not candidates:
            return RecommendationsResponse(
                recommendations=[], message="No more profiles available"
            )

        scoring_settings = UserSettings(
            max_distance=user_settings.max_distance or settings.default_max_distance_km,
            show_me_gender=user_settings.show_me_gender,
        )
        ranked = get_top_recommendations(
            user,
            candidates,
            limit=top_n,
            settings=scoring_settings,
            now=datetime.now(timezone.utc),
            max_workers=settings.scoring_workers,
        )
        items = [_to_item(rec) for rec in ranked]
    except Exception:
        logger.exception(f"Recommendations failed for user {user.id}")
        raise HTTPException(500, "Failed to generate recommendations")

    logger.info(f"Ranked {len(candidates)} candidates for {user.id}, returning {len(items)}")
    return RecommendationsResponse(recommendations=items, total=len(items))


@router.get(
    "/matching-score/{user_id}/{other_user_id}",
    response_model=MatchingScoreResponse,
    responses=_INVALID_OR_MISSING,
)
def get_matching_score(
    user_id: str,
    other_user_id: str,
    max_distance: float = Query(50.0, gt=0, description="Distance (km) that scores zero"),
    store: ProfileStore = Depends(_store_dep),
):
    user = _require_profile(store, user_id)
    other = _require_profile(store, other_user_id)

    result = calculate_matching_score(user, other, max_distance=max_distance)
    user_acc = get_location_accuracy(user)
    other_acc = get_location_accuracy(other)

    return MatchingScoreResponse(
        user_id=user.id,
        other_user_id=other.id,
        total_score=result.total_score,
        breakdown=MatchingScoreBreakdown(
            location=result.location,
            interests=result.interests,
            compatibility=result.compatibility,
            preferences=result.preferences,
        ),
        user_location_accuracy=LocationAccuracyOut(**vars(user_acc)),
        other_location_accuracy=LocationAccuracyOut(**vars(other_acc)),
    )


@router.post("/swipe", responses={400: _INVALID_OR_MISSING[400]})
def record_swipe(action: SwipeAction, store: ProfileStore = Depends(_store_dep)):
    from_id = sanitize_uuid(action.from_user_id)
    to_id = sanitize_uuid(action.to_user_id)
    if not from_id or not to_id:
        raise HTTPException(400, "Invalid User ID")

    if action.action in ("like", "superlike"):
        store.record_like(from_id, to_id)
    logger.info(f"Swipe recorded: {from_id} -> {to_id} ({action.action})")

    return {
        "status": "recorded",
        "fromUserId": from_id,
        "toUserId": to_id,
        "action": action.action,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
