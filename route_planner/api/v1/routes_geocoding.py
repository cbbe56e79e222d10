# route_planner/api/v1/routes_geocoding.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from route_planner.api.v1.deps import get_place_search
from route_planner.core.exceptions import InvalidInputError, UpstreamServiceError
from route_planner.core.logger import logger
from route_planner.models.places import GeocodingResult, PoiCategory, PointOfInterest
from route_planner.services.nominatim_client import MAX_POI_LIMIT, NominatimClient

router = APIRouter(tags=["geocoding"])


@router.get(
    "/geocode",
    response_model=List[GeocodingResult],
    summary="Search places in Uzhhorod",
)
async def geocode(
    q: Optional[str] = None,
    limit: int = Query(5, ge=1, le=MAX_POI_LIMIT),
    place_search: NominatimClient = Depends(get_place_search),
) -> List[GeocodingResult]:
    if not q or not q.strip():
        raise InvalidInputError('Query parameter "q" is required')

    try:
        return await place_search.search(q.strip(), limit=limit)
    except UpstreamServiceError as exc:
        logger.error("Geocoding proxy error: {}", exc.message)
        raise UpstreamServiceError("Failed to geocode location") from exc


@router.get(
    "/poi",
    response_model=List[PointOfInterest],
    summary="Points of interest of one category",
)
async def points_of_interest(
    category: Optional[str] = None,
    limit: int = Query(MAX_POI_LIMIT, ge=1),
    place_search: NominatimClient = Depends(get_place_search),
) -> List[PointOfInterest]:
    try:
        poi_category = PoiCategory(category)
    except ValueError:
        raise InvalidInputError("Invalid category")

    try:
        return await place_search.search_pois(poi_category, limit=limit)
    except UpstreamServiceError as exc:
        logger.error("POI fetch error: {}", exc.message)
        raise UpstreamServiceError(
            "Не вдалося завантажити POI (Nominatim). Спробуйте пізніше."
        ) from exc
