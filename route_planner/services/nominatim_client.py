# route_planner/services/nominatim_client.py

from typing import Any, Callable, Dict, List, Optional, TypeVar

import httpx

from route_planner.core.config import settings
from route_planner.core.exceptions import UpstreamServiceError
from route_planner.core.logger import logger
from route_planner.models.places import (
    GeocodingAddress,
    GeocodingResult,
    PoiCategory,
    PointOfInterest,
)
from route_planner.services.http import send_request

# Nominatim viewbox for Uzhhorod: west,north,east,south
UZHHOROD_VIEWBOX = "22.20,48.68,22.38,48.55"

POI_CATEGORY_QUERIES: Dict[PoiCategory, str] = {
    PoiCategory.CAFE: "cafe",
    PoiCategory.RESTAURANT: "restaurant",
    PoiCategory.SHOP: "supermarket",
    PoiCategory.PHARMACY: "pharmacy",
    PoiCategory.BANK: "bank",
    PoiCategory.HOTEL: "hotel",
}

T = TypeVar("T")

MAX_POI_LIMIT = 50
UNNAMED_PLACE = "Без назви"


class NominatimClient:
    """
    Place search over Nominatim, bounded to the Uzhhorod viewbox.

    Unlike the routing adapters this raises UpstreamServiceError on failure;
    callers decide whether that becomes an empty list or an HTTP 500.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = (base_url or settings.NOMINATIM_BASE_URL).rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    async def search(self, query: str, limit: int = 5) -> List[GeocodingResult]:
        params = {
            "q": query,
            "format": "jsonv2",
            "limit": str(limit),
            "addressdetails": "1",
            "bounded": "1",
            "viewbox": UZHHOROD_VIEWBOX,
            "accept-language": "uk,en",
        }
        items = await self._search(params)
        results = self._map_items(items, self._to_geocoding_result)
        logger.info("Nominatim search {!r}: {} results", query, len(results))
        return results

    async def search_pois(self, category: PoiCategory, limit: int = MAX_POI_LIMIT) -> List[PointOfInterest]:
        params = {
            "q": POI_CATEGORY_QUERIES[category],
            "format": "jsonv2",
            "limit": str(max(1, min(limit, MAX_POI_LIMIT))),
            "bounded": "1",
            "viewbox": UZHHOROD_VIEWBOX,
            "addressdetails": "1",
            "namedetails": "1",
            "extratags": "1",
            "accept-language": "uk",
        }
        items = await self._search(params)
        pois = self._map_items(items, lambda item: self._to_poi(item, category))
        logger.info("Nominatim POI {}: {} places", category.value, len(pois))
        return pois

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    async def _search(self, params: Dict[str, str]) -> List[Dict[str, Any]]:
        try:
            response = await send_request(
                "GET",
                f"{self.base_url}/search",
                client=self.http_client,
                timeout=self.timeout,
                params=params,
            )
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(f"Nominatim request failed: {exc}") from exc

        if not response.is_success:
            raise UpstreamServiceError(f"Nominatim API error: {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamServiceError("Nominatim returned invalid JSON") from exc

        if not isinstance(data, list):
            raise UpstreamServiceError("Nominatim returned an unexpected payload")
        return [item for item in data if isinstance(item, dict)]

    @staticmethod
    def _map_items(items: List[Dict[str, Any]], convert: Callable[[Dict[str, Any]], T]) -> List[T]:
        """
        Convert raw items, skipping those without coordinates.

        Any other malformed item fails the whole search as an upstream error.
        """
        mapped: List[T] = []
        for item in items:
            if item.get("lat") in (None, "") or item.get("lon") in (None, ""):
                continue
            try:
                mapped.append(convert(item))
            except (KeyError, TypeError, ValueError) as exc:
                raise UpstreamServiceError("Nominatim returned a malformed place") from exc
        return mapped

    @staticmethod
    def _to_geocoding_result(item: Dict[str, Any]) -> GeocodingResult:
        address = item.get("address")
        return GeocodingResult(
            place_id=str(item.get("place_id") or ""),
            display_name=item.get("display_name") or "",
            lat=float(item["lat"]),
            lon=float(item["lon"]),
            type=item.get("type") or "",
            address=GeocodingAddress(
                road=address.get("road"),
                city=address.get("city") or address.get("town") or address.get("village"),
                county=address.get("county"),
                state=address.get("state"),
                country=address.get("country"),
            )
            if isinstance(address, dict)
            else None,
        )

    @staticmethod
    def _to_poi(item: Dict[str, Any], category: PoiCategory) -> PointOfInterest:
        display_name = item.get("display_name")
        namedetails = item.get("namedetails") or {}
        name = namedetails.get("name") or (display_name.split(",")[0] if display_name else "") or UNNAMED_PLACE

        address = None
        parts = item.get("address")
        if isinstance(parts, dict):
            address = " ".join(p for p in (parts.get("road"), parts.get("house_number")) if p) or None

        return PointOfInterest(
            id=str(item.get("place_id")),
            name=name,
            lat=float(item["lat"]),
            lon=float(item["lon"]),
            type=item.get("type") or category.value,
            category=category,
            address=address,
            display_name=display_name,
        )
