"""Tests for profile snapshots and location normalisation."""

from datetime import date, datetime, timezone

import pytest

from models.profile import (
    GeoJSONPoint,
    GeoPoint,
    LatLngLocation,
    LocationError,
    Profile,
    age_on,
    classify_location,
    parse_location,
)


class TestParseLocation:

    def test_lat_lng_payload(self):
        assert parse_location({"lat": 40.7, "lng": -74.0}) == GeoPoint(40.7, -74.0)

    def test_lon_alias(self):
        assert parse_location({"lat": 40.7, "lon": -74.0}) == GeoPoint(40.7, -74.0)

    def test_geojson_payload_is_lon_lat(self):
        point = parse_location({"type": "Point", "coordinates": [-74.0, 40.7]})
        assert point == GeoPoint(lat=40.7, lng=-74.0)

    def test_geojson_without_type(self):
        assert parse_location({"coordinates": [2.35, 48.85]}) == GeoPoint(48.85, 2.35)

    def test_classify_dispatches_on_shape(self):
        assert isinstance(classify_location({"lat": 1, "lng": 2}), LatLngLocation)
        assert isinstance(classify_location({"coordinates": [2, 1]}), GeoJSONPoint)

    @pytest.mark.parametrize("raw", [None, {}, float("nan")])
    def test_absent_is_none(self, raw):
        assert parse_location(raw) is None

    def test_geopoint_passthrough(self):
        point = GeoPoint(1.0, 2.0)
        assert parse_location(point) is point

    @pytest.mark.parametrize("raw", [
        {"city": "London"},
        {"lat": "north", "lng": 1.0},
        {"lat": 95.0, "lng": 1.0},
        {"lat": 10.0, "lng": 200.0},
        {"coordinates": [1.0]},
        {"type": "Polygon", "coordinates": [[0, 0], [1, 1]]},
        {"coordinates": "1,2"},
        "51.5,-0.12",
    ])
    def test_malformed_raises(self, raw):
        with pytest.raises(LocationError):
            parse_location(raw)

    def test_location_error_is_value_error(self):
        assert issubclass(LocationError, ValueError)


class TestProfile:

    def test_raw_location_is_normalised(self):
        profile = Profile(id="a", location={"coordinates": [-0.12, 51.5]})
        assert profile.location == GeoPoint(51.5, -0.12)

    def test_malformed_location_dropped_and_logged(self, log_messages):
        profile = Profile(id="a", location={"where": "somewhere"})
        assert profile.location is None
        assert any("malformed location" in m for m in log_messages)

    def test_last_active_parsed_as_utc(self):
        profile = Profile(id="a", last_active="2026-10-18T08:30:00Z")
        assert profile.last_active == datetime(2026, 10, 18, 8, 30, tzinfo=timezone.utc)

    def test_naive_last_active_assumed_utc(self):
        profile = Profile(id="a", last_active=datetime(2026, 1, 1, 9, 0))
        assert profile.last_active.tzinfo is not None
        assert profile.last_active.hour == 9

    def test_unparseable_last_active_is_none(self):
        assert Profile(id="a", last_active="not a date").last_active is None

    def test_age_derived_from_date_of_birth(self):
        profile = Profile(id="a", date_of_birth="1990-01-01")
        today = datetime.now(timezone.utc).date()
        assert profile.age == age_on(date(1990, 1, 1), today)

    def test_explicit_age_wins(self):
        assert Profile(id="a", age=25, date_of_birth="1970-01-01").age == 25

    def test_books_accept_dicts_and_titles(self):
        profile = Profile(id="a", favorite_books=[
            {"title": "Dune", "author": "Frank Herbert", "cover_url": None},
            "Emma",
            {"author": "no title"},
        ])
        assert profile.book_titles == ["Dune", "Emma"]

    def test_none_lists_become_empty(self):
        profile = Profile(id=7, interests=None, languages=None)
        assert profile.id == "7"
        assert profile.interests == []
        assert profile.languages == []


class TestAgeOn:

    def test_before_birthday(self):
        assert age_on(date(1990, 6, 15), date(2020, 6, 14)) == 29

    def test_on_birthday(self):
        assert age_on(date(1990, 6, 15), date(2020, 6, 15)) == 30
