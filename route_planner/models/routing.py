# route_planner/models/routing.py

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel

from route_planner.models.geo import GeoPoint, RouteProfile


class RouteProvider(str, Enum):
    OSRM = "osrm"
    ORS = "ors"


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class RouteQuery(BaseModel):
    """
    Identifies a single routing attempt.
    """

    model_config = ConfigDict(frozen=True)

    start: GeoPoint
    end: GeoPoint
    profile: RouteProfile = RouteProfile.CAR


class Maneuver(_CamelModel):
    type: str
    modifier: Optional[str] = None


class RouteStep(_CamelModel):
    """
    One instruction along the route, in traversal order.
    """

    instruction: str
    distance_meters: float = Field(default=0.0, ge=0.0)
    duration_seconds: float = Field(default=0.0, ge=0.0)
    road_name: str = ""
    maneuver: Optional[Maneuver] = None


class RouteGeometry(BaseModel):
    """
    GeoJSON LineString of the route.

    coordinates is a list of [lon, lat] pairs, exactly as GeoJSON
    and OSRM order them:
    [
        [22.2879, 48.6208],
        [22.2901, 48.6215],
        ...
    ]
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["LineString"] = "LineString"
    coordinates: List[List[float]] = Field(min_length=2)


class NormalizedRoute(_CamelModel):
    """
    Provider-independent route returned by /route.

    - `warnings` is non-empty only when a fallback path produced the route.
    - `distance`, `duration` and `fallback` are serialized alongside the
      camelCase fields for older front ends.
    """

    provider: RouteProvider
    profile: RouteProfile
    geometry: RouteGeometry
    distance_meters: float = Field(ge=0.0)
    duration_seconds: float = Field(ge=0.0)
    steps: List[RouteStep] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def fallback(self) -> bool:
        return bool(self.warnings)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def distance(self) -> float:
        return self.distance_meters

    @computed_field  # type: ignore[prop-decorator]
    @property
    def duration(self) -> float:
        return self.duration_seconds


class ShareLink(_CamelModel):
    """
    Everything needed to hand a route to someone else.
    """

    query: RouteQuery
    share_url: str
    qr_code_url: str
