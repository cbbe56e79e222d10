# tests/conftest.py
import os
import sys
from typing import Any, Callable, Dict, List, Optional

import httpx
import pytest

# Add the project root directory to sys.path so that "import route_planner" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Keep the optional OpenRouteService fallback off unless a test wires it in
os.environ.setdefault("ORS_API_KEY", "DISABLED")
os.environ.setdefault("ENVIRONMENT", "test")

# Central Uzhhorod and the railway station
CENTER = {"lat": 48.6208, "lon": 22.2879}
STATION = {"lat": 48.6115, "lon": 22.3010}


def _osrm_route(
    distance: float = 1500.0,
    duration: float = 180.0,
    steps: Optional[List[Dict[str, Any]]] = None,
) -> Dict[str, Any]:
    return {
        "geometry": {
            "type": "LineString",
            "coordinates": [
                [CENTER["lon"], CENTER["lat"]],
                [22.2950, 48.6160],
                [STATION["lon"], STATION["lat"]],
            ],
        },
        "distance": distance,
        "duration": duration,
        "legs": [{"steps": steps if steps is not None else []}],
    }


@pytest.fixture
def osrm_route() -> Callable[..., Dict[str, Any]]:
    """Factory for one OSRM route object."""
    return _osrm_route


@pytest.fixture
def osrm_payload() -> Callable[..., Dict[str, Any]]:
    """Factory for a full OSRM /route response."""

    def build(**kwargs: Any) -> Dict[str, Any]:
        return {"code": "Ok", "routes": [_osrm_route(**kwargs)]}

    return build


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by `handler`."""

    def build(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return build
