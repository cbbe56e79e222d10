# route_planner/services/osrm_client.py

from typing import Optional

import httpx
from pydantic import ValidationError

from route_planner.core.logger import logger
from route_planner.models.geo import GeoPoint
from route_planner.models.providers import OsrmResponse, OsrmRoute
from route_planner.services.http import send_request


class OsrmClient:
    """
    Adapter for one OSRM-compatible directions server.

    Every failure (transport error, non-2xx status, a `code` other than
    "Ok", an empty route list, an unreadable body) is a soft failure:
    `try_profile` returns None and never raises.
    """

    def __init__(
        self,
        base_url: str,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    def build_route_url(self, profile_name: str, start: GeoPoint, end: GeoPoint) -> str:
        # OSRM wants lon,lat;lon,lat
        coordinates = f"{start.lon},{start.lat};{end.lon},{end.lat}"
        return f"{self.base_url}/route/v1/{profile_name}/{coordinates}"

    async def try_profile(
        self,
        profile_name: str,
        start: GeoPoint,
        end: GeoPoint,
    ) -> Optional[OsrmRoute]:
        url = self.build_route_url(profile_name, start, end)
        params = {
            "overview": "full",
            "geometries": "geojson",
            "steps": "true",
        }

        try:
            response = await send_request(
                "GET",
                url,
                client=self.http_client,
                timeout=self.timeout,
                params=params,
            )
        except httpx.HTTPError as exc:
            logger.warning("OSRM {} request to {} failed: {}", profile_name, self.base_url, exc)
            return None

        if not response.is_success:
            logger.warning(
                "OSRM {} answered HTTP {} ({})", profile_name, response.status_code, self.base_url
            )
            return None

        try:
            data = OsrmResponse.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("OSRM {} returned an unreadable body: {}", profile_name, exc)
            return None

        if data.code != "Ok" or not data.routes:
            logger.warning(
                "OSRM {} returned no route (code={}, message={})",
                profile_name,
                data.code,
                data.message,
            )
            return None

        route = data.routes[0]
        logger.info(
            "OSRM {} route: distance={:.1f} m, duration={:.1f} s",
            profile_name,
            route.distance or 0.0,
            route.duration or 0.0,
        )
        return route
