# route_planner/api/v1/routes_routing.py
from typing import Optional

from fastapi import APIRouter, Depends, Response

from route_planner.api.v1.deps import get_routing_service
from route_planner.core.exceptions import InvalidInputError, RoutePlannerError, UpstreamServiceError
from route_planner.core.logger import logger
from route_planner.models.geo import GeoPoint, RouteProfile
from route_planner.models.routing import NormalizedRoute, RouteQuery
from route_planner.services.routing_service import RoutingService
from route_planner.services.sharing import parse_point

router = APIRouter(
    prefix="/route",
    tags=["routing"],
)

NO_STORE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate, proxy-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def parse_route_query(
    start: Optional[str],
    end: Optional[str],
    profile: Optional[str],
) -> RouteQuery:
    """
    Validate raw `start`/`end`/`profile` query parameters.
    """
    if not start or not end:
        raise InvalidInputError("Start and end coordinates are required")

    start_point: Optional[GeoPoint] = parse_point(start)
    end_point: Optional[GeoPoint] = parse_point(end)
    if start_point is None or end_point is None:
        raise InvalidInputError("Invalid coordinates format")

    try:
        route_profile = RouteProfile(profile or RouteProfile.CAR.value)
    except ValueError:
        raise InvalidInputError(f"Unknown profile: {profile}")

    return RouteQuery(start=start_point, end=end_point, profile=route_profile)


@router.get(
    "",
    response_model=NormalizedRoute,
    summary="Compute a route between start and end",
)
async def compute_route(
    response: Response,
    start: Optional[str] = None,
    end: Optional[str] = None,
    profile: Optional[str] = "car",
    routing_service: RoutingService = Depends(get_routing_service),
) -> NormalizedRoute:
    """
    Compute a car or walking route between two `lat,lon` points.

    - car: OSRM driving profile.
    - walk: pedestrian OSRM, OpenRouteService, then the driving route with
      a recalculated walking time (flagged in `warnings`).
    """
    query = parse_route_query(start, end, profile)

    try:
        result = await routing_service.route(query)
    except RoutePlannerError:
        raise
    except Exception as exc:
        logger.exception("Routing proxy error")
        raise UpstreamServiceError("Failed to calculate route") from exc

    response.headers.update(NO_STORE_HEADERS)
    return result
