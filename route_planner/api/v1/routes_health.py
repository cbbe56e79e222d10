# route_planner/api/v1/routes_health.py
from fastapi import APIRouter
from route_planner.core.config import settings

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("/", summary="Health check")
async def health_check():
    """
    Report that the API is up and which routing backends it will use.
    """
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "providers": {
            "osrm_car": settings.OSRM_BASE_URL,
            "osrm_walk": settings.walk_base_url,
            "ors_walking": settings.ors_enabled,
        },
        "transit_enabled": settings.TRANSIT_ENABLED,
    }
