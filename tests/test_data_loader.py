"""Tests for record preprocessing and the in-memory ProfileStore."""

import json

import numpy as np
import pandas as pd
import pytest

from backend.routers.recommendations import sanitize_uuid
from config.settings import Settings
from conftest import FAR_ID, LIKED_ID, LONER_ID, NEAR_ID, SUBJECT_ID
from models.preprocessor import (
    preprocess_profiles,
    preprocess_settings,
    profile_from_record,
    settings_from_record,
)
from models.profile import GeoPoint, Profile, UserSettings
from utils import data_loader
from utils.data_loader import ProfileStore, load_store, read_table


class TestProfileFromRecord:

    def test_camel_case_and_nan(self):
        profile = profile_from_record({
            "id": "a",
            "lastActive": "2026-10-18T08:30:00Z",
            "isPremium": 1,
            "hasPets": np.nan,
            "age": 33.0,
            "religion": float("nan"),
            "full_name": "ignored",
        })
        assert profile.last_active is not None
        assert profile.is_premium is True
        assert profile.has_pets is None
        assert profile.age == 33
        assert profile.religion is None

    def test_comma_separated_lists(self):
        profile = profile_from_record({"id": "a", "interests": "hiking, coffee ,", "languages": None})
        assert profile.interests == ["hiking", "coffee"]
        assert profile.languages == []

    def test_bad_age_is_dropped(self):
        assert profile_from_record({"id": "a", "age": "thirty"}).age is None

    def test_geojson_location(self):
        profile = profile_from_record({"id": "a", "location": {"type": "Point", "coordinates": [2.35, 48.85]}})
        assert profile.location == GeoPoint(48.85, 2.35)

    def test_user_id_alias(self):
        assert profile_from_record({"user_id": "xyz"}).id == "xyz"

    def test_missing_id_raises(self):
        with pytest.raises(ValueError):
            profile_from_record({"age": 30})


class TestSettingsFromRecord:

    def test_distance_range_alias(self):
        settings = settings_from_record({"user_id": "a", "distance_range": "25", "show_me_gender": ["male"]})
        assert settings.max_distance == 25.0
        assert settings.show_me_gender == ["male"]

    def test_non_numeric_distance(self):
        assert settings_from_record({"distance_range": "far"}).max_distance is None


class TestPreprocessFrames:

    def test_rows_without_id_are_skipped(self, log_messages):
        df = pd.DataFrame([
            {"id": "a", "Age": 30},
            {"id": None, "Age": 40},
            {"id": "b", "Age": None},
        ])
        profiles = preprocess_profiles(df)
        assert [p.id for p in profiles] == ["a", "b"]
        assert profiles[1].age is None
        assert any("Skipping malformed profile row" in m for m in log_messages)

    def test_settings_frame(self):
        df = pd.DataFrame([
            {"user_id": "a", "distance_range": 40, "show_me_gender": ["female"]},
            {"user_id": None, "distance_range": 10, "show_me_gender": []},
        ])
        settings = preprocess_settings(df)
        assert list(settings) == ["a"]
        assert settings["a"].max_distance == 40.0

    def test_settings_frame_without_ids(self):
        assert preprocess_settings(pd.DataFrame([{"distance_range": 10}])) == {}


class TestProfileStore:

    def test_lookup(self, store):
        assert store.get_profile(SUBJECT_ID).age == 30
        assert store.get_profile("nope") is None
        assert store.get_settings(SUBJECT_ID).max_distance == 50
        assert len(store) == 5

    def test_candidates_exclude_self_and_liked(self, store):
        ids = {p.id for p in store.list_candidates(SUBJECT_ID)}
        assert SUBJECT_ID not in ids
        assert LIKED_ID not in ids
        assert {NEAR_ID, FAR_ID, LONER_ID} <= ids

    def test_gender_filter(self, store):
        ids = {p.id for p in store.list_candidates(SUBJECT_ID, show_me_gender=["male"])}
        assert ids == {NEAR_ID, FAR_ID}

    def test_pool_limit(self, store):
        assert len(store.list_candidates(SUBJECT_ID, limit=2)) == 2

    def test_record_like(self, store):
        store.record_like(SUBJECT_ID, NEAR_ID)
        assert NEAR_ID in store.liked_ids(SUBJECT_ID)
        assert NEAR_ID not in {p.id for p in store.list_candidates(SUBJECT_ID)}

    def test_liked_ids_is_a_copy(self, store):
        store.liked_ids(SUBJECT_ID).add("mutated")
        assert "mutated" not in store.liked_ids(SUBJECT_ID)

    def test_ids_match_case_insensitively(self):
        upper = "AAAAAAAA-AAAA-4AAA-8AAA-AAAAAAAAAAAA"
        other = "BBBBBBBB-BBBB-4BBB-8BBB-BBBBBBBBBBBB"
        store = ProfileStore(
            profiles=[Profile(id=upper, age=30), Profile(id=other, age=31)],
            settings={upper: UserSettings(max_distance=25)},
            likes=[(upper, other)],
        )
        assert store.get_profile(sanitize_uuid(upper)).id == upper
        assert store.get_profile(upper).age == 30
        assert store.get_settings(upper.lower()).max_distance == 25
        assert store.liked_ids(upper.lower()) == {other.lower()}
        assert store.list_candidates(upper.lower()) == []

    def test_record_like_with_mixed_case(self, store):
        store.record_like(SUBJECT_ID.upper(), NEAR_ID.upper())
        assert NEAR_ID in store.liked_ids(SUBJECT_ID)


class TestLoadStore:

    def test_missing_files_give_empty_store(self, tmp_path):
        assert read_table(tmp_path / "absent.json").empty
        assert len(load_store(tmp_path)) == 0

    def test_reads_paths_from_settings(self, tmp_path, monkeypatch):
        (tmp_path / "people.json").write_text(json.dumps([{"id": "a", "age": 30}]))
        custom = Settings(data_dir=tmp_path, profiles_file="people.json")
        monkeypatch.setattr(data_loader, "get_settings", lambda: custom)
        store = load_store()
        assert len(store) == 1
        assert custom.profiles_path == tmp_path / "people.json"

    def test_loads_json_tables(self, tmp_path):
        (tmp_path / "profiles.json").write_text(json.dumps([
            {"id": "a", "age": 30, "gender": "female", "interests": ["x"],
             "location": {"lat": 51.5, "lng": -0.12}},
            {"id": "b", "date_of_birth": "1990-05-05", "gender": "male",
             "location": {"coordinates": [-0.1, 51.4]}},
            {"id": "c", "gender": "male", "location": {"lat": "bad"}},
        ]))
        (tmp_path / "user_settings.json").write_text(json.dumps([
            {"user_id": "a", "distance_range": 30, "show_me_gender": ["male"]},
        ]))
        (tmp_path / "likes.json").write_text(json.dumps([
            {"from_user_id": "a", "to_user_id": "c"},
        ]))

        store = load_store(tmp_path)
        assert len(store) == 3
        assert store.get_profile("b").age is not None
        assert store.get_profile("b").location == GeoPoint(51.4, -0.1)
        assert store.get_profile("c").location is None
        assert store.get_settings("a").max_distance == 30.0
        assert [p.id for p in store.list_candidates("a", ["male"])] == ["b"]
