# route_planner/api/v1/deps.py
from functools import lru_cache

from route_planner.services.nominatim_client import NominatimClient
from route_planner.services.routing_service import RoutingService


# Single shared instances, created on first use


@lru_cache(maxsize=1)
def get_routing_service() -> RoutingService:
    return RoutingService.from_settings()


@lru_cache(maxsize=1)
def get_place_search() -> NominatimClient:
    return NominatimClient()
