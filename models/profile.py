"""
models/profile.py
═════════════════
Read-only profile snapshots consumed by the recommendation scorer.

Types
─────
  GeoPoint         normalised (lat, lng) pair in decimal degrees
  LatLngLocation   raw {"lat": .., "lng": ..} payload
  GeoJSONPoint     raw {"type": "Point", "coordinates": [lon, lat]} payload
  FavoriteBook     title / author / cover_url
  Profile          subject or candidate profile
  UserSettings     per-user tunables (max distance, gender filter)

Raw location payloads are turned into a single GeoPoint when the Profile is
built, so the scorer never has to probe dictionary shapes itself.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Optional, Union

import pandas as pd

from utils.logger import logger


class LocationError(ValueError):
    """Raised when a raw location payload cannot be turned into a GeoPoint."""


# ─────────────────────────────────────────────────────────────────────────────
#  Location variants
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float


@dataclass(frozen=True)
class LatLngLocation:
    lat: Any
    lng: Any

    def to_point(self) -> GeoPoint:
        return _validated_point(self.lat, self.lng)


@dataclass(frozen=True)
class GeoJSONPoint:
    coordinates: tuple

    def to_point(self) -> GeoPoint:
        if len(self.coordinates) < 2:
            raise LocationError(f"GeoJSON point needs [lon, lat], got {self.coordinates!r}")
        lon, lat = self.coordinates[0], self.coordinates[1]
        return _validated_point(lat, lon)


RawLocation = Union[LatLngLocation, GeoJSONPoint]


def _coerce_coordinate(value: Any, low: float, high: float, name: str) -> float:
    if isinstance(value, bool):
        raise LocationError(f"{name} must be numeric, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise LocationError(f"{name} must be numeric, got {value!r}") from exc
    if not math.isfinite(number) or not low <= number <= high:
        raise LocationError(f"{name}={number} outside [{low}, {high}]")
    return number


def _validated_point(lat: Any, lng: Any) -> GeoPoint:
    return GeoPoint(
        lat=_coerce_coordinate(lat, -90.0, 90.0, "lat"),
        lng=_coerce_coordinate(lng, -180.0, 180.0, "lng"),
    )


def classify_location(raw: Mapping[str, Any]) -> RawLocation:
    """Decide which of the two supported payload shapes `raw` is."""
    if "coordinates" in raw and raw["coordinates"] is not None:
        geo_type = str(raw.get("type") or "Point").strip().lower()
        if geo_type != "point":
            raise LocationError(f"Unsupported GeoJSON type {raw.get('type')!r}")
        coords = raw["coordinates"]
        if not isinstance(coords, (list, tuple)):
            raise LocationError(f"GeoJSON coordinates must be a list, got {coords!r}")
        return GeoJSONPoint(coordinates=tuple(coords))

    if "lat" in raw and ("lng" in raw or "lon" in raw):
        lng = raw["lng"] if "lng" in raw else raw["lon"]
        return LatLngLocation(lat=raw["lat"], lng=lng)

    raise LocationError(f"Unrecognised location payload: {dict(raw)!r}")


def parse_location(raw: Any) -> Optional[GeoPoint]:
    """
    Normalise a raw location into a GeoPoint.

    None / empty payloads mean "no location" and return None. Anything that
    is present but malformed raises LocationError.
    """
    if raw is None or (isinstance(raw, float) and math.isnan(raw)):
        return None
    if isinstance(raw, GeoPoint):
        return raw
    if isinstance(raw, (LatLngLocation, GeoJSONPoint)):
        return raw.to_point()
    if isinstance(raw, Mapping):
        if not raw:
            return None
        return classify_location(raw).to_point()
    raise LocationError(f"Unsupported location type {type(raw).__name__}")


# ─────────────────────────────────────────────────────────────────────────────
#  Profile / settings
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FavoriteBook:
    title: str
    author: str = ""
    cover_url: Optional[str] = None


def _to_utc_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, bool):
        return None
    ts = pd.to_datetime(value, utc=True, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.to_pydatetime()


def _to_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date) and not isinstance(value, datetime):
        return value
    ts = pd.to_datetime(value, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def age_on(dob: date, today: date) -> int:
    """Whole years between date of birth and `today`."""
    years = today.year - dob.year
    if (today.month, today.day) < (dob.month, dob.day):
        years -= 1
    return years


def _to_book(item: Any) -> Optional[FavoriteBook]:
    if isinstance(item, FavoriteBook):
        return item
    if isinstance(item, Mapping):
        title = item.get("title")
        if not title:
            return None
        return FavoriteBook(
            title=str(title),
            author=str(item.get("author") or ""),
            cover_url=item.get("cover_url"),
        )
    if isinstance(item, str) and item:
        return FavoriteBook(title=item)
    return None


@dataclass
class Profile:
    id: str
    age: Optional[int] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    last_active: Optional[datetime] = None
    interests: list[str] = field(default_factory=list)
    location: Optional[GeoPoint] = None
    location_city: Optional[str] = None

    # lifestyle
    smoking: Optional[str] = None
    drinking: Optional[str] = None
    religion: Optional[str] = None
    relationship_type: Optional[str] = None
    education: Optional[str] = None
    children: Optional[str] = None
    has_pets: Optional[bool] = None
    pet_preference: Optional[str] = None
    languages: list[str] = field(default_factory=list)
    favorite_books: list[FavoriteBook] = field(default_factory=list)
    looking_for: list[str] = field(default_factory=list)

    # status flags (reason tags only)
    is_premium: bool = False
    is_verified: bool = False

    def __post_init__(self) -> None:
        self.id = str(self.id)
        self.interests = list(self.interests or [])
        self.languages = list(self.languages or [])
        self.looking_for = list(self.looking_for or [])
        self.favorite_books = [
            book for book in (_to_book(b) for b in (self.favorite_books or [])) if book
        ]
        self.last_active = _to_utc_datetime(self.last_active)
        self.date_of_birth = _to_date(self.date_of_birth)

        if not self.age and self.date_of_birth:
            self.age = age_on(self.date_of_birth, datetime.now(timezone.utc).date())

        try:
            self.location = parse_location(self.location)
        except LocationError as exc:
            logger.warning(f"Profile {self.id}: dropping malformed location ({exc})")
            self.location = None

    @property
    def book_titles(self) -> list[str]:
        return [book.title for book in self.favorite_books]


@dataclass
class UserSettings:
    max_distance: Optional[float] = None
    show_me_gender: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.show_me_gender = list(self.show_me_gender or [])
