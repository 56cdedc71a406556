"""
Shared fixtures for the recommender test suite.

Provides:
- a fixed "now" so activity scores are deterministic
- make_profile(): Profile factory with sparse defaults
- a small ProfileStore and a TestClient wired to it
- log_messages: captures loguru output for assertions
"""

from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from backend.main import app
from backend.routers import recommendations
from models.profile import Profile, UserSettings
from utils.data_loader import ProfileStore
from utils.logger import logger

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)

SUBJECT_ID = "11111111-1111-4111-8111-111111111111"
NEAR_ID    = "22222222-2222-4222-8222-222222222222"
FAR_ID     = "33333333-3333-4333-8333-333333333333"
LIKED_ID   = "44444444-4444-4444-8444-444444444444"
LONER_ID   = "55555555-5555-4555-8555-555555555555"


def make_profile(id="p", **overrides) -> Profile:
    """Profile with nothing but an id unless overridden."""
    return Profile(id=id, **overrides)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def log_messages():
    messages = []
    handler_id = logger.add(messages.append, level="WARNING", format="{level} {message}")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def store():
    recent = datetime.now(timezone.utc) - timedelta(minutes=5)
    profiles = [
        make_profile(
            SUBJECT_ID, age=30, gender="female", last_active=recent,
            interests=["hiking", "coffee", "travel"],
            location={"lat": 51.5072, "lng": -0.1276}, location_city="London",
            smoking="never",
        ),
        make_profile(
            NEAR_ID, age=31, gender="male", last_active=recent,
            interests=["hiking", "coffee", "travel", "yoga"],
            location={"coordinates": [-0.1180, 51.5100]}, location_city="London",
            smoking="never", is_verified=True,
        ),
        make_profile(
            FAR_ID, age=52, gender="male",
            last_active=datetime.now(timezone.utc) - timedelta(days=30),
            interests=["gaming"], location={"lat": 55.9533, "lng": -3.1883},
            location_city="Edinburgh", smoking="regularly",
        ),
        make_profile(LIKED_ID, age=29, gender="male", last_active=recent),
        make_profile(LONER_ID, age=40, gender="other"),
    ]
    settings = {
        SUBJECT_ID: UserSettings(max_distance=50, show_me_gender=["male"]),
        LONER_ID: UserSettings(show_me_gender=["nobody"]),
    }
    return ProfileStore(profiles, settings=settings, likes=[(SUBJECT_ID, LIKED_ID)])


@pytest.fixture
def client(store):
    app.dependency_overrides[recommendations._store_dep] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
