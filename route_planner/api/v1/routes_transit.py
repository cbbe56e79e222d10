# route_planner/api/v1/routes_transit.py
from fastapi import APIRouter

from route_planner.core.config import settings

router = APIRouter(
    prefix="/transit",
    tags=["transit"],
)


@router.get("/routes", summary="Public transport routes")
async def transit_routes():
    """
    Public transport needs a GTFS feed; until one is wired in the module
    reports itself as disabled.
    """
    if not settings.TRANSIT_ENABLED:
        return {
            "enabled": False,
            "message": "Модуль транспорту вимкнений (потрібні GTFS/реальний API).",
            "routes": [],
        }

    return {"enabled": True, "routes": []}
