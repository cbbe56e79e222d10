# route_planner/models/providers.py
"""
Provider-shaped route payloads.

These mirror what each external directions service sends back and are
only used between the adapters and the routing service, which turns
them into a NormalizedRoute.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from route_planner.models.routing import RouteGeometry


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


# ---------------------------------------------------------------------- #
# OSRM
# ---------------------------------------------------------------------- #


class OsrmManeuver(_ProviderModel):
    type: Optional[str] = None
    modifier: Optional[str] = None
    instruction: Optional[str] = None


class OsrmStep(_ProviderModel):
    maneuver: Optional[OsrmManeuver] = None
    name: Optional[str] = None
    distance: Optional[float] = None
    duration: Optional[float] = None


class OsrmLeg(_ProviderModel):
    steps: List[OsrmStep] = []


class OsrmRoute(_ProviderModel):
    geometry: RouteGeometry
    distance: Optional[float] = None
    duration: Optional[float] = None
    legs: List[OsrmLeg] = []


class OsrmResponse(_ProviderModel):
    code: Optional[str] = None
    message: Optional[str] = None
    routes: List[OsrmRoute] = []


# ---------------------------------------------------------------------- #
# OpenRouteService (GeoJSON directions)
# ---------------------------------------------------------------------- #


class OrsStep(_ProviderModel):
    instruction: Optional[str] = None
    # ORS encodes the maneuver kind as an integer code
    type: Optional[int] = None
    name: Optional[str] = None
    distance: Optional[float] = None
    duration: Optional[float] = None


class OrsSegment(_ProviderModel):
    steps: List[OrsStep] = []


class OrsSummary(_ProviderModel):
    distance: Optional[float] = None
    duration: Optional[float] = None


class OrsProperties(_ProviderModel):
    summary: OrsSummary = OrsSummary()
    segments: List[OrsSegment] = []


class OrsRoute(_ProviderModel):
    """One GeoJSON feature of the ORS FeatureCollection."""

    geometry: RouteGeometry
    properties: OrsProperties = OrsProperties()


class OrsResponse(_ProviderModel):
    features: List[OrsRoute] = []


ProviderRoute = Union[OsrmRoute, OrsRoute]
