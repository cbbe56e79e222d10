# route_planner/core/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables (.env file).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    APP_NAME: str = "Uzhhorod Route Planner API"
    APP_VERSION: str = "0.2.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # External services
    OSRM_BASE_URL: str = "https://router.project-osrm.org"
    # Pedestrian OSRM server; falls back to OSRM_BASE_URL when unset
    OSRM_WALK_BASE_URL: Optional[str] = None
    ORS_BASE_URL: str = "https://api.openrouteservice.org"
    # "DISABLED" switches the OpenRouteService fallback off explicitly
    ORS_API_KEY: Optional[str] = None
    NOMINATIM_BASE_URL: str = "https://nominatim.openstreetmap.org"
    QR_SERVICE_URL: str = "https://api.qrserver.com/v1/create-qr-code/"
    USER_AGENT: str = "UzhRoutePlanner/1.0"
    HTTP_TIMEOUT_SECONDS: float = 10.0

    # Geocoding
    GEOCODE_CACHE_TTL_SECONDS: float = 300.0
    GEOCODE_RESULT_LIMIT: int = 7
    GEOCODE_MIN_QUERY_LENGTH: int = 2

    # Routing
    WALKING_SPEED_MPS: float = 1.3889  # ~5 km/h

    # Planner session
    RECENT_ROUTES_LIMIT: int = 10
    DRAG_DEBOUNCE_SECONDS: float = 0.15
    # "keep" leaves the last good route visible after a failed request, "clear" drops it
    ROUTE_FAILURE_POLICY: str = "keep"

    TRANSIT_ENABLED: bool = False

    @property
    def walk_base_url(self) -> str:
        return self.OSRM_WALK_BASE_URL or self.OSRM_BASE_URL

    @property
    def ors_enabled(self) -> bool:
        return bool(self.ORS_API_KEY) and self.ORS_API_KEY != "DISABLED"


settings = Settings()
