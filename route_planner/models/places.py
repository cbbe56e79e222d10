# route_planner/models/places.py

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from route_planner.models.geo import MapPoint, RouteProfile


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class GeocodingAddress(_CamelModel):
    road: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None


class GeocodingResult(_CamelModel):
    """
    One place candidate returned by search, most relevant first.
    """

    place_id: str
    display_name: str
    lat: float
    lon: float
    type: str = ""
    address: Optional[GeocodingAddress] = None


class PoiCategory(str, Enum):
    CAFE = "cafe"
    RESTAURANT = "restaurant"
    SHOP = "shop"
    PHARMACY = "pharmacy"
    BANK = "bank"
    HOTEL = "hotel"


class PointOfInterest(_CamelModel):
    id: str
    name: str
    lat: float
    lon: float
    type: str
    category: PoiCategory
    address: Optional[str] = None
    display_name: Optional[str] = None


class SavedPlace(_CamelModel):
    """
    A favourite place; unique by id and by exact coordinates.
    """

    id: str
    name: str
    lat: float
    lon: float
    created_at: datetime


class RecentRouteRecord(_CamelModel):
    """
    One entry of the recent-routes history.
    """

    id: str
    start: MapPoint
    end: MapPoint
    profile: RouteProfile
    distance_meters: float = Field(default=0.0, ge=0.0)
    duration_seconds: float = Field(default=0.0, ge=0.0)
    created_at: datetime

    def same_route(self, other: "RecentRouteRecord") -> bool:
        return (
            self.start.same_position(other.start)
            and self.end.same_position(other.end)
            and self.profile == other.profile
        )
