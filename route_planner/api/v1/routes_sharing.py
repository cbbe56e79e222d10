# route_planner/api/v1/routes_sharing.py
from typing import Optional

from fastapi import APIRouter, Depends, Request, Response

from route_planner.api.v1.deps import get_routing_service
from route_planner.core.exceptions import InvalidInputError
from route_planner.models.geo import MapPoint
from route_planner.models.routing import RouteQuery, ShareLink
from route_planner.services.routing_service import RoutingService
from route_planner.services.sharing import (
    build_share_url,
    generate_gpx,
    parse_share_params,
    qr_code_url,
)

router = APIRouter(
    prefix="/share",
    tags=["sharing"],
)


def _query_from_request(request: Request) -> RouteQuery:
    query = parse_share_params(request.query_params)
    if query is None:
        raise InvalidInputError("Share link must contain valid start and end coordinates")
    return query


@router.get("", response_model=ShareLink, summary="Decode a shared route link")
async def decode_share_link(request: Request) -> ShareLink:
    """
    Rebuild the route query from `a`/`b`/`m` (or `s`/`e`/`m`) and return
    the canonical share URL with its QR code link.
    """
    query = _query_from_request(request)
    share_url = build_share_url(str(request.base_url), query)
    return ShareLink(query=query, share_url=share_url, qr_code_url=qr_code_url(share_url))


@router.get("/gpx", summary="Export a shared route as GPX")
async def export_gpx(
    request: Request,
    start_label: Optional[str] = None,
    end_label: Optional[str] = None,
    routing_service: RoutingService = Depends(get_routing_service),
) -> Response:
    query = _query_from_request(request)
    route = await routing_service.route(query)

    gpx = generate_gpx(
        route,
        MapPoint(lat=query.start.lat, lon=query.start.lon, label=start_label),
        MapPoint(lat=query.end.lat, lon=query.end.lon, label=end_label),
    )
    return Response(
        content=gpx,
        media_type="application/gpx+xml",
        headers={"Content-Disposition": 'attachment; filename="route.gpx"'},
    )
