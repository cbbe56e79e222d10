# route_planner/services/ors_client.py

from typing import Optional

import httpx
from pydantic import ValidationError

from route_planner.core.logger import logger
from route_planner.models.geo import GeoPoint
from route_planner.models.providers import OrsResponse, OrsRoute
from route_planner.services.http import send_request


class OrsClient:
    """
    Adapter for the OpenRouteService foot-walking directions API.

    Like the OSRM adapter, it never raises: any failure yields None.
    """

    WALKING_PATH = "/v2/directions/foot-walking"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.http_client = http_client
        self.timeout = timeout

    async def try_walking(self, start: GeoPoint, end: GeoPoint) -> Optional[OrsRoute]:
        body = {
            "coordinates": [
                [start.lon, start.lat],
                [end.lon, end.lat],
            ],
            "format": "geojson",
        }

        try:
            response = await send_request(
                "POST",
                f"{self.base_url}{self.WALKING_PATH}",
                client=self.http_client,
                timeout=self.timeout,
                params={"api_key": self.api_key},
                json=body,
            )
        except httpx.HTTPError as exc:
            logger.warning("ORS walking request failed: {}", exc)
            return None

        if not response.is_success:
            logger.warning("ORS walking answered HTTP {}", response.status_code)
            return None

        try:
            data = OrsResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("ORS walking returned an unreadable body: {}", exc)
            return None

        if not data.features:
            logger.warning("ORS walking returned no features")
            return None

        return data.features[0]
