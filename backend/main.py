"""
backend/main.py
═══════════════
FastAPI application for the DatingApp match recommender.

Endpoints
─────────
  GET  /health                                       — Liveness / readiness probe
  GET  /api/recommendations?userId=&limit=           — Top-N AI-ranked candidates
                                                       with reasons and breakdown
  GET  /api/matching-score/{user_id}/{other_user_id} — Points-based 0–100 score
  POST /api/swipe                                    — Record a like / dislike / superlike

  Run with:
      uvicorn backend.main:app --reload --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.routers import recommendations
from backend.schemas import HealthResponse
from utils.logger import logger

# ─────────────────────────────────────────────────────────────────────────────
#  App initialisation
# ─────────────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="DatingApp — Match Recommendation API",
    description=(
        "Explainable match recommendations combining shared interests, "
        "distance, age, activity and lifestyle compatibility."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],      # tighten in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(recommendations.router)


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render errors as {"error": "..."} bodies."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


# ─────────────────────────────────────────────────────────────────────────────
#  Health check
# ─────────────────────────────────────────────────────────────────────────────

@app.get("/health", response_model=HealthResponse, tags=["Meta"])
def health_check(request: Request) -> HealthResponse:
    """
    Liveness & readiness probe.
    Returns the number of loaded profiles and whether the store is available.
    """
    try:
        provider = request.app.dependency_overrides.get(
            recommendations._store_dep, recommendations._store_dep
        )
        store = provider()
        return HealthResponse(status="ok", profiles_loaded=len(store), store_ready=True)
    except Exception as exc:
        logger.exception("Profile store unavailable")
        return HealthResponse(
            status=f"degraded: {exc}", profiles_loaded=0, store_ready=False
        )
