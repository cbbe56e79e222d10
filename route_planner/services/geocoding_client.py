# route_planner/services/geocoding_client.py

import asyncio
import re
import time
from typing import Callable, Dict, List, Optional, Protocol, Tuple

from route_planner.core.config import settings
from route_planner.core.exceptions import UpstreamServiceError
from route_planner.core.logger import logger
from route_planner.models.places import GeocodingResult

# Known spellings of the city; a query containing any of them is not biased again.
CITY_NAMES = ("ужгород", "uzhhorod", "uzhgorod")
CITY_QUALIFIER = "Ужгород"

_NUMBER = r"[-+]?\d+(?:\.\d+)?"
COORDINATE_LITERAL = re.compile(rf"^({_NUMBER}),({_NUMBER})$")


class PlaceSearch(Protocol):
    async def search(self, query: str, limit: int = ...) -> List[GeocodingResult]:
        ...


def normalize_query(query: str) -> str:
    return " ".join(query.split())


def with_city_bias(query: str) -> str:
    lower = query.lower()
    if any(name in lower for name in CITY_NAMES):
        return query
    return f"{query}, {CITY_QUALIFIER}"


def parse_coordinate_literal(query: str) -> Optional[GeocodingResult]:
    """
    Recognise a typed "lat,lon" pair and turn it into a synthetic result.
    """
    match = COORDINATE_LITERAL.match("".join(query.split()))
    if match is None:
        return None

    lat_text, lon_text = match.groups()
    lat, lon = float(lat_text), float(lon_text)
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None

    return GeocodingResult(
        place_id=f"coords:{lat_text},{lon_text}",
        display_name=f"{lat_text}, {lon_text}",
        lat=lat,
        lon=lon,
        type="coordinates",
    )


class GeocodingClient:
    """
    Per-session search client.

    Owns its own result cache and the handle of the single in-flight
    lookup. Starting a new lookup cancels the previous one, whose caller
    then gets an empty list. Empty results are never cached.
    """

    def __init__(
        self,
        place_search: PlaceSearch,
        ttl_seconds: Optional[float] = None,
        result_limit: Optional[int] = None,
        min_query_length: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.place_search = place_search
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.GEOCODE_CACHE_TTL_SECONDS
        self.result_limit = result_limit or settings.GEOCODE_RESULT_LIMIT
        self.min_query_length = min_query_length or settings.GEOCODE_MIN_QUERY_LENGTH
        self._clock = clock
        self._cache: Dict[str, Tuple[float, List[GeocodingResult]]] = {}
        self._active: Optional["asyncio.Task[List[GeocodingResult]]"] = None

    async def search(self, query: str) -> List[GeocodingResult]:
        q = normalize_query(query)
        if len(q) < self.min_query_length:
            return []

        literal = parse_coordinate_literal(q)
        if literal is not None:
            return [literal]

        cache_key = q.lower()
        cached = self._get_cached(cache_key)
        if cached is not None:
            return cached

        if self._active is not None and not self._active.done():
            self._active.cancel()

        task = asyncio.ensure_future(self._fetch(with_city_bias(q)))
        self._active = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            # The caller itself was cancelled, not superseded.
            task.cancel()
            raise
        finally:
            if self._active is task and task.done():
                self._active = None

        if task.cancelled():
            logger.debug("Geocoding lookup for {!r} superseded by a newer search", q)
            return []

        results = task.result()
        if results:
            self._cache[cache_key] = (self._clock(), results)
        return list(results)

    def clear_cache(self) -> None:
        self._cache.clear()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _get_cached(self, key: str) -> Optional[List[GeocodingResult]]:
        entry = self._cache.get(key)
        if entry is None:
            return None

        stored_at, results = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            del self._cache[key]
            return None
        return list(results)

    async def _fetch(self, query: str) -> List[GeocodingResult]:
        try:
            return await self.place_search.search(query, limit=self.result_limit)
        except UpstreamServiceError as exc:
            logger.error("Geocoding error for {!r}: {}", query, exc.message)
            return []
        except Exception:
            logger.exception("Unexpected geocoding failure for {!r}", query)
            return []
