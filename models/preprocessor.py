"""
models/preprocessor.py
──────────────────────
Turns raw profile / settings tables into the typed snapshots the scorer uses.

Key transformations
───────────────────
1. Normalise column names (camelCase / spaces → snake_case)
2. Replace NaN cells with None so optional fields read as "absent"
3. Coerce list-valued columns (interests, languages, …) to lists
4. Build Profile / UserSettings objects, skipping rows without an id
"""

import math
import re
from collections.abc import Mapping
from dataclasses import fields
from typing import Any

import pandas as pd

from models.profile import Profile, UserSettings
from utils.logger import logger

LIST_COLUMNS = ["interests", "languages", "looking_for", "favorite_books", "show_me_gender"]
BOOL_COLUMNS = ["is_premium", "is_verified"]

# source column → Profile / UserSettings field
_ALIASES = {
    "user_id":        "id",
    "distance_range": "max_distance",
    "max_distance_km": "max_distance",
}

_PROFILE_FIELDS = {f.name for f in fields(Profile)}
_SETTINGS_FIELDS = {f.name for f in fields(UserSettings)}


# ── internal helpers ──────────────────────────────────────────────────────────

def _snake(name: str) -> str:
    name = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", "_", str(name).strip())
    return re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")


def _normalise_columns(df: pd.DataFrame) -> pd.DataFrame:
    """snake_case every column name."""
    df.columns = [_snake(c) for c in df.columns]
    return df


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def _as_list(value: Any) -> list:
    if _is_missing(value):
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set)):
        return list(value)
    return [value]


def _clean_record(record: Mapping[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in record.items():
        key = _ALIASES.get(_snake(key), _snake(key))
        cleaned[key] = None if _is_missing(value) else value

    for col in LIST_COLUMNS:
        if col in cleaned:
            cleaned[col] = _as_list(cleaned[col])
    for col in BOOL_COLUMNS:
        if col in cleaned:
            cleaned[col] = bool(cleaned[col])
    if cleaned.get("has_pets") is not None:
        cleaned["has_pets"] = bool(cleaned["has_pets"])
    if cleaned.get("age") is not None:
        age = pd.to_numeric(cleaned["age"], errors="coerce")
        cleaned["age"] = None if pd.isna(age) else int(age)
    return cleaned


# ── public API ────────────────────────────────────────────────────────────────

def profile_from_record(record: Mapping[str, Any]) -> Profile:
    """Build a Profile from one raw row; unknown keys are ignored."""
    cleaned = _clean_record(record)
    if not cleaned.get("id"):
        raise ValueError("profile record has no id")
    return Profile(**{k: v for k, v in cleaned.items() if k in _PROFILE_FIELDS})


def settings_from_record(record: Mapping[str, Any]) -> UserSettings:
    cleaned = _clean_record(record)
    max_distance = cleaned.get("max_distance")
    if max_distance is not None:
        max_distance = pd.to_numeric(max_distance, errors="coerce")
        cleaned["max_distance"] = None if pd.isna(max_distance) else float(max_distance)
    return UserSettings(**{k: v for k, v in cleaned.items() if k in _SETTINGS_FIELDS})


def preprocess_profiles(df: pd.DataFrame) -> list[Profile]:
    logger.info("Preprocessing profiles …")
    df = _normalise_columns(df.copy()).dropna(how="all")

    profiles: list[Profile] = []
    for record in df.to_dict(orient="records"):
        try:
            profiles.append(profile_from_record(record))
        except (TypeError, ValueError) as exc:
            logger.warning(f"Skipping malformed profile row: {exc}")
    logger.info(f"Profiles preprocessed: {len(profiles)} of {len(df)} rows")
    return profiles


def preprocess_settings(df: pd.DataFrame) -> dict[str, UserSettings]:
    """Map user id → UserSettings."""
    df = _normalise_columns(df.copy()).dropna(how="all")
    df = df.rename(columns=_ALIASES)
    if "id" not in df.columns:
        logger.warning("Settings table has no user_id column; ignoring it")
        return {}

    settings: dict[str, UserSettings] = {}
    for record in df.to_dict(orient="records"):
        user_id = record.get("id")
        if _is_missing(user_id):
            continue
        try:
            settings[str(user_id)] = settings_from_record(record)
        except (TypeError, ValueError) as exc:
            logger.warning(f"Skipping settings for {user_id}: {exc}")
    return settings
