# route_planner/models/geo.py

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RouteProfile(str, Enum):
    CAR = "car"
    WALK = "walk"


class GeoPoint(BaseModel):
    """
    Latitude/longitude pair in degrees.

    Immutable and hashable; two points are equal only if both
    coordinates are exactly equal.
    """

    model_config = ConfigDict(frozen=True)

    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)

    def as_query_value(self) -> str:
        """`lat,lon` as used in query strings."""
        return f"{self.lat},{self.lon}"

    def same_position(self, other: "GeoPoint") -> bool:
        return self.lat == other.lat and self.lon == other.lon


class MapPoint(GeoPoint):
    """
    A point picked on the map or from search, optionally labelled.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    label: Optional[str] = None
    place_id: Optional[str] = None

    def to_geo_point(self) -> GeoPoint:
        return GeoPoint(lat=self.lat, lon=self.lon)
