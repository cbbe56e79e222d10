# route_planner/services/sharing.py

from datetime import datetime, timezone
from typing import Mapping, Optional, Tuple
from urllib.parse import urlencode
from xml.dom import minidom
from xml.etree.ElementTree import Element, SubElement, tostring

from pydantic import ValidationError

from route_planner.core.config import settings
from route_planner.models.geo import GeoPoint, MapPoint, RouteProfile
from route_planner.models.routing import NormalizedRoute, RouteQuery

GPX_CREATOR = "UzhRoutePlanner"
DEFAULT_START_NAME = "Початок"
DEFAULT_END_NAME = "Кінець"


def build_share_url(base_url: str, query: RouteQuery) -> str:
    """
    Encode a route as `?a=lat,lon&b=lat,lon&m=profile` on top of `base_url`.
    """
    params = urlencode(
        {
            "a": query.start.as_query_value(),
            "b": query.end.as_query_value(),
            "m": query.profile.value,
        }
    )
    return f"{base_url.split('?', 1)[0]}?{params}"


def parse_point(value: Optional[str]) -> Optional[GeoPoint]:
    """
    Parse "lat,lon"; None if missing, malformed or out of range.
    """
    if not value:
        return None

    parts = value.split(",")
    if len(parts) != 2:
        return None

    try:
        return GeoPoint(lat=float(parts[0]), lon=float(parts[1]))
    except (ValueError, ValidationError):
        return None


def parse_share_params(params: Mapping[str, str]) -> Optional[RouteQuery]:
    """
    Rebuild a RouteQuery from share parameters.

    Start is read from `s` or `a`, end from `e` or `b`; `m=walk` selects
    walking and anything else driving.
    """
    start = parse_point(params.get("s") or params.get("a"))
    end = parse_point(params.get("e") or params.get("b"))
    if start is None or end is None:
        return None

    profile = RouteProfile.WALK if params.get("m") == RouteProfile.WALK.value else RouteProfile.CAR
    return RouteQuery(start=start, end=end, profile=profile)


def qr_code_url(share_url: str, size: int = 200) -> str:
    query = urlencode({"size": f"{size}x{size}", "data": share_url})
    return f"{settings.QR_SERVICE_URL}?{query}"


def _labels(start: Optional[MapPoint], end: Optional[MapPoint]) -> Tuple[str, str]:
    start_name = start.label if start is not None and start.label else DEFAULT_START_NAME
    end_name = end.label if end is not None and end.label else DEFAULT_END_NAME
    return start_name, end_name


def generate_gpx(
    route: NormalizedRoute,
    start: Optional[MapPoint] = None,
    end: Optional[MapPoint] = None,
    now: Optional[datetime] = None,
) -> str:
    """
    Export the route geometry as a GPX 1.1 track.
    """
    start_name, end_name = _labels(start, end)
    timestamp = (now or datetime.now(timezone.utc)).isoformat()

    gpx = Element("gpx", {
        "version": "1.1",
        "creator": GPX_CREATOR,
        "xmlns": "http://www.topografix.com/GPX/1/1",
    })

    metadata = SubElement(gpx, "metadata")
    SubElement(metadata, "name").text = f"Маршрут: {start_name} → {end_name}"
    SubElement(metadata, "time").text = timestamp

    trk = SubElement(gpx, "trk")
    SubElement(trk, "name").text = "Маршрут"
    trkseg = SubElement(trk, "trkseg")

    # GeoJSON positions are [lon, lat]
    for position in route.geometry.coordinates:
        SubElement(trkseg, "trkpt", {
            "lat": str(position[1]),
            "lon": str(position[0]),
        })

    xml_str = tostring(gpx, encoding="unicode")
    return minidom.parseString(xml_str).toprettyxml(indent="  ", encoding="UTF-8").decode("utf-8")
