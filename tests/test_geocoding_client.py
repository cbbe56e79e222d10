# tests/test_geocoding_client.py
import asyncio
from typing import List
from unittest.mock import AsyncMock

import httpx
import pytest

from route_planner.core.exceptions import UpstreamServiceError
from route_planner.models.places import GeocodingResult
from route_planner.services.geocoding_client import (
    GeocodingClient,
    normalize_query,
    parse_coordinate_literal,
    with_city_bias,
)
from route_planner.services.nominatim_client import NominatimClient

KORZO = GeocodingResult(place_id="101", display_name="Корзо, Ужгород", lat=48.6216, lon=22.2985, type="street")


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def place_search() -> AsyncMock:
    search = AsyncMock()
    search.search = AsyncMock(return_value=[KORZO])
    return search


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def client(place_search: AsyncMock, clock: FakeClock) -> GeocodingClient:
    return GeocodingClient(place_search, ttl_seconds=300, result_limit=7, clock=clock)


def test_normalize_query_collapses_whitespace():
    assert normalize_query("  вул.   Корзо \t 5 ") == "вул. Корзо 5"


@pytest.mark.parametrize(
    "query, expected",
    [
        ("Корзо", "Корзо, Ужгород"),
        ("Корзо, Ужгород", "Корзо, Ужгород"),
        ("Korzo UZHHOROD", "Korzo UZHHOROD"),
        ("castle uzhgorod", "castle uzhgorod"),
    ],
)
def test_city_bias(query, expected):
    assert with_city_bias(query) == expected


def test_coordinate_literal_out_of_range_is_not_a_point():
    assert parse_coordinate_literal("95.1,22.2") is None
    assert parse_coordinate_literal("48.6,190") is None
    assert parse_coordinate_literal("48.6;22.2") is None


@pytest.mark.asyncio
async def test_short_query_never_hits_network(client: GeocodingClient, place_search: AsyncMock):
    assert await client.search(" a ") == []
    place_search.search.assert_not_called()


@pytest.mark.asyncio
async def test_coordinate_literal_short_circuits(client: GeocodingClient, place_search: AsyncMock):
    results = await client.search("48.6208, 22.2879")

    assert len(results) == 1
    assert results[0].lat == 48.6208
    assert results[0].lon == 22.2879
    assert results[0].type == "coordinates"
    place_search.search.assert_not_called()


@pytest.mark.asyncio
async def test_search_sends_city_biased_query(client: GeocodingClient, place_search: AsyncMock):
    results = await client.search("  Корзо  ")

    assert results == [KORZO]
    place_search.search.assert_awaited_once_with("Корзо, Ужгород", limit=7)


@pytest.mark.asyncio
async def test_identical_search_within_ttl_is_cached(client: GeocodingClient, place_search: AsyncMock, clock: FakeClock):
    await client.search("Корзо")
    clock.now += 299
    second = await client.search("КОРЗО")

    assert second == [KORZO]
    assert place_search.search.await_count == 1


@pytest.mark.asyncio
async def test_cache_expires_after_ttl(client: GeocodingClient, place_search: AsyncMock, clock: FakeClock):
    await client.search("Корзо")
    clock.now += 301
    await client.search("Корзо")

    assert place_search.search.await_count == 2


@pytest.mark.asyncio
async def test_empty_results_are_not_cached(client: GeocodingClient, place_search: AsyncMock):
    place_search.search.return_value = []

    assert await client.search("Невідоме місце") == []
    assert await client.search("Невідоме місце") == []

    assert place_search.search.await_count == 2


@pytest.mark.asyncio
async def test_upstream_failure_yields_empty_list(client: GeocodingClient, place_search: AsyncMock):
    place_search.search.side_effect = UpstreamServiceError("Nominatim API error: 503")

    assert await client.search("Корзо") == []


@pytest.mark.asyncio
async def test_new_search_cancels_previous(place_search: AsyncMock, clock: FakeClock):
    release_first = asyncio.Event()
    calls: List[str] = []

    async def search(query: str, limit: int = 5) -> List[GeocodingResult]:
        calls.append(query)
        if len(calls) == 1:
            await release_first.wait()
        return [KORZO]

    place_search.search = AsyncMock(side_effect=search)
    client = GeocodingClient(place_search, clock=clock)

    first = asyncio.create_task(client.search("Ужгородський замок"))
    await asyncio.sleep(0)
    await asyncio.sleep(0)
    second = await client.search("Корзо")
    release_first.set()

    assert second == [KORZO]
    assert await first == []
    assert calls == ["Ужгородський замок", "Корзо, Ужгород"]


@pytest.mark.asyncio
async def test_cancelling_the_caller_propagates(place_search: AsyncMock, clock: FakeClock):
    async def hang(query: str, limit: int = 5) -> List[GeocodingResult]:
        await asyncio.Event().wait()
        return []

    place_search.search = AsyncMock(side_effect=hang)
    client = GeocodingClient(place_search, clock=clock)

    task = asyncio.create_task(client.search("Корзо"))
    await asyncio.sleep(0)
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_malformed_nominatim_payload_yields_empty_list(mock_http, clock: FakeClock):
    payload = [{"place_id": 1, "display_name": "x", "lat": "n/a", "lon": "22.29"}]
    nominatim = NominatimClient(
        "https://nominatim.test",
        http_client=mock_http(lambda request: httpx.Response(200, json=payload)),
    )
    client = GeocodingClient(nominatim, clock=clock)

    assert await client.search("Корзо") == []


@pytest.mark.asyncio
async def test_unexpected_search_error_yields_empty_list(client: GeocodingClient, place_search: AsyncMock):
    place_search.search.side_effect = KeyError("lat")

    assert await client.search("Корзо") == []
