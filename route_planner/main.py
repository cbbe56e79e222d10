# route_planner/main.py

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from route_planner.api.v1 import (
    routes_geocoding,
    routes_health,
    routes_routing,
    routes_sharing,
    routes_transit,
)
from route_planner.core.config import settings
from route_planner.core.exceptions import RoutePlannerError
from route_planner.core.logger import logger


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Route planning proxy for Uzhhorod over OSRM, OpenRouteService and Nominatim.",
    )

    # Routers
    app.include_router(routes_health.router)
    app.include_router(routes_routing.router)
    app.include_router(routes_geocoding.router)
    app.include_router(routes_sharing.router)
    app.include_router(routes_transit.router)

    @app.exception_handler(RoutePlannerError)
    async def route_planner_error_handler(request: Request, exc: RoutePlannerError) -> JSONResponse:
        """
        Render domain errors as {"error": message} with their status code.
        """
        if exc.status_code >= 500:
            logger.error("{} {} failed: {}", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "query")
        message = f"Invalid parameter {field}: {first.get('msg', 'invalid value')}"
        return JSONResponse(status_code=400, content={"error": message})

    logger.info("{} {} ready ({})", settings.APP_NAME, settings.APP_VERSION, settings.ENVIRONMENT)
    return app


app = create_app()
