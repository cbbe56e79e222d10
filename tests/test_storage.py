# tests/test_storage.py
from datetime import datetime, timedelta, timezone

import pytest

from route_planner.models.geo import MapPoint, RouteProfile
from route_planner.models.places import RecentRouteRecord, SavedPlace
from route_planner.services.storage import (
    RECENT_ROUTES_KEY,
    SAVED_PLACES_KEY,
    JsonFileStore,
    MemoryStore,
    PlacesRepository,
    RecentRoutesRepository,
)

NOW = datetime(2026, 10, 1, 12, 0, tzinfo=timezone.utc)


def make_place(place_id: str, lat: float = 48.62, lon: float = 22.29) -> SavedPlace:
    return SavedPlace(id=place_id, name=f"Place {place_id}", lat=lat, lon=lon, created_at=NOW)


def make_record(record_id: str, end_lat: float = 48.61, profile: RouteProfile = RouteProfile.CAR, minutes: int = 0) -> RecentRouteRecord:
    return RecentRouteRecord(
        id=record_id,
        start=MapPoint(lat=48.6208, lon=22.2879, label="Центр"),
        end=MapPoint(lat=end_lat, lon=22.301),
        profile=profile,
        distance_meters=1500.0,
        duration_seconds=180.0,
        created_at=NOW + timedelta(minutes=minutes),
    )


def test_places_prepend_and_dedupe_by_id_or_coordinates():
    repo = PlacesRepository(MemoryStore())

    assert repo.add(make_place("a", lat=48.1))
    assert repo.add(make_place("b", lat=48.2))
    assert not repo.add(make_place("a", lat=48.3))
    assert not repo.add(make_place("c", lat=48.2))

    assert [p.id for p in repo.list()] == ["b", "a"]


def test_places_remove():
    repo = PlacesRepository(MemoryStore())
    repo.add(make_place("a", lat=48.1))
    repo.add(make_place("b", lat=48.2))

    repo.remove("a")

    assert [p.id for p in repo.list()] == ["b"]


def test_recent_routes_dedupe_moves_to_front():
    repo = RecentRoutesRepository(MemoryStore())
    repo.add(make_record("first"))
    repo.add(make_record("other", end_lat=48.60))
    repo.add(make_record("again", minutes=5))

    routes = repo.list()

    assert [r.id for r in routes] == ["again", "other"]
    assert routes[0].created_at == NOW + timedelta(minutes=5)


def test_recent_routes_profile_is_part_of_identity():
    repo = RecentRoutesRepository(MemoryStore())
    repo.add(make_record("car"))
    repo.add(make_record("walk", profile=RouteProfile.WALK))

    assert [r.id for r in repo.list()] == ["walk", "car"]


def test_recent_routes_bounded():
    repo = RecentRoutesRepository(MemoryStore(), limit=10)
    for i in range(12):
        repo.add(make_record(str(i), end_lat=48.5 + i / 1000))

    routes = repo.list()

    assert len(routes) == 10
    assert routes[0].id == "11"
    assert routes[-1].id == "2"


def test_recent_routes_clear():
    repo = RecentRoutesRepository(MemoryStore())
    repo.add(make_record("a"))
    repo.clear()

    assert repo.list() == []


@pytest.mark.parametrize("raw", ["not json", '{"id": 1}', '[{"id": "x"}]'])
def test_corrupt_values_read_as_empty(raw):
    store = MemoryStore({SAVED_PLACES_KEY: raw, RECENT_ROUTES_KEY: raw})

    assert PlacesRepository(store).list() == []
    assert RecentRoutesRepository(store).list() == []


def test_stored_json_uses_camel_case_keys():
    store = MemoryStore()
    RecentRoutesRepository(store).add(make_record("a"))

    raw = store.get(RECENT_ROUTES_KEY)

    assert '"distanceMeters"' in raw
    assert '"createdAt"' in raw


def test_json_file_store_round_trips_and_survives_corruption(tmp_path):
    path = tmp_path / "state" / "planner.json"
    repo = PlacesRepository(JsonFileStore(path))
    repo.add(make_place("a"))

    assert [p.id for p in PlacesRepository(JsonFileStore(path)).list()] == ["a"]

    path.write_text("{broken", encoding="utf-8")

    assert PlacesRepository(JsonFileStore(path)).list() == []
    assert repo.add(make_place("b"))
    assert [p.id for p in repo.list()] == ["b"]
