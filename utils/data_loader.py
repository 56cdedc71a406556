"""
utils/data_loader.py
────────────────────
Loads the profile, settings and likes tables and serves them through an
in-memory ProfileStore.
Files (inside settings.data_dir):
  - profiles.json        list of profile records
  - user_settings.json   list of {user_id, distance_range, show_me_gender}
  - likes.json           list of {from_user_id, to_user_id}
"""

from __future__ import annotations

from collections import defaultdict
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Iterable, Optional

import pandas as pd

from config.settings import get_settings
from models.preprocessor import preprocess_profiles, preprocess_settings
from models.profile import Profile, UserSettings
from utils.logger import logger


def read_table(path: Path) -> pd.DataFrame:
    """Read a JSON records file; a missing file yields an empty frame."""
    if not path.exists():
        logger.warning(f"Data file not found at {path}; treating it as empty")
        return pd.DataFrame()

    logger.info(f"Loading {path}")
    df = pd.read_json(path, orient="records", dtype=False, convert_dates=False)
    logger.info(f"'{path.name}': {len(df)} rows × {len(df.columns)} columns")
    return df


def _key(user_id) -> str:
    return str(user_id).lower()


class ProfileStore:
    """
    Read interfaces over profiles, per-user settings and likes.
    Ids are matched case-insensitively.

    Parameters
    ----------
    profiles : profile snapshots
    settings : user id → UserSettings
    likes    : (from_user_id, to_user_id) pairs
    """

    def __init__(
        self,
        profiles: Iterable[Profile] = (),
        settings: Optional[dict[str, UserSettings]] = None,
        likes: Iterable[tuple[str, str]] = (),
    ) -> None:
        self._profiles: dict[str, Profile] = {_key(p.id): p for p in profiles}
        self._settings: dict[str, UserSettings] = {
            _key(uid): value for uid, value in (settings or {}).items()
        }
        self._likes: dict[str, set[str]] = defaultdict(set)
        self._lock = Lock()
        for from_id, to_id in likes:
            self._likes[_key(from_id)].add(_key(to_id))

    def __len__(self) -> int:
        return len(self._profiles)

    def get_profile(self, user_id: str) -> Optional[Profile]:
        return self._profiles.get(_key(user_id))

    def get_settings(self, user_id: str) -> Optional[UserSettings]:
        return self._settings.get(_key(user_id))

    def liked_ids(self, user_id: str) -> set[str]:
        with self._lock:
            return set(self._likes.get(_key(user_id), ()))

    def record_like(self, from_id: str, to_id: str) -> None:
        with self._lock:
            self._likes[_key(from_id)].add(_key(to_id))

    def list_candidates(
        self,
        user_id: str,
        show_me_gender: Optional[list[str]] = None,
        limit: int = 100,
    ) -> list[Profile]:
        """Profiles other than `user_id` that it has not liked yet."""
        excluded = self.liked_ids(user_id) | {_key(user_id)}
        genders = set(show_me_gender or [])

        candidates = []
        for key, profile in self._profiles.items():
            if key in excluded:
                continue
            if genders and profile.gender not in genders:
                continue
            candidates.append(profile)
            if len(candidates) >= limit:
                break
        return candidates


def _likes_from_frame(df: pd.DataFrame) -> list[tuple[str, str]]:
    if df.empty or not {"from_user_id", "to_user_id"}.issubset(df.columns):
        return []
    pairs = df[["from_user_id", "to_user_id"]].dropna().astype(str)
    return list(pairs.itertuples(index=False, name=None))


def load_store(data_dir: Optional[Path] = None) -> ProfileStore:
    settings = get_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": Path(data_dir)})

    profiles_df = read_table(settings.profiles_path)
    settings_df = read_table(settings.settings_path)
    likes_df = read_table(settings.likes_path)

    store = ProfileStore(
        profiles=preprocess_profiles(profiles_df) if not profiles_df.empty else [],
        settings=preprocess_settings(settings_df) if not settings_df.empty else {},
        likes=_likes_from_frame(likes_df),
    )
    logger.info(f"ProfileStore ready with {len(store)} profiles")
    return store


@lru_cache(maxsize=1)
def get_store() -> ProfileStore:
    """Build the store once per process."""
    return load_store()
