# route_planner/services/routing_service.py

from functools import partial
from time import perf_counter
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from route_planner.core.config import settings
from route_planner.core.exceptions import RouteNotFoundError
from route_planner.core.logger import logger
from route_planner.models.geo import GeoPoint, RouteProfile
from route_planner.models.providers import OrsRoute, OsrmRoute, ProviderRoute
from route_planner.models.routing import (
    Maneuver,
    NormalizedRoute,
    RouteProvider,
    RouteQuery,
    RouteStep,
)
from route_planner.services.maneuvers import format_maneuver
from route_planner.services.ors_client import OrsClient
from route_planner.services.osrm_client import OsrmClient

# Profile names tried in order on the pedestrian OSRM server. Some servers
# only expose "foot", and some pedestrian servers only answer to "driving".
WALK_PROFILE_NAMES = ("walking", "foot", "driving")

WALKING_FALLBACK_WARNING = (
    "Пішохідний профіль недоступний. "
    "Показано альтернативний маршрут з перерахованим часом пішки."
)


class RoutingService:
    """
    High-level routing service:
    - car: a single OSRM "driving" attempt
    - walk: a fixed fallback chain over the pedestrian OSRM server,
      OpenRouteService (when configured) and finally the car route with
      a recalculated walking time
    - normalizes whichever provider answered into a NormalizedRoute
    """

    def __init__(
        self,
        car_client: OsrmClient,
        walk_client: OsrmClient,
        ors_client: Optional[OrsClient] = None,
        walking_speed_mps: Optional[float] = None,
    ) -> None:
        self.car_client = car_client
        self.walk_client = walk_client
        self.ors_client = ors_client
        self.walking_speed_mps = walking_speed_mps or settings.WALKING_SPEED_MPS
        logger.info(
            "RoutingService initialised (car={}, walk={}, ors={}).",
            car_client.base_url,
            walk_client.base_url,
            "on" if ors_client is not None else "off",
        )

    @classmethod
    def from_settings(cls, http_client: Optional[httpx.AsyncClient] = None) -> "RoutingService":
        ors_client = None
        if settings.ors_enabled:
            ors_client = OrsClient(settings.ORS_BASE_URL, settings.ORS_API_KEY, http_client=http_client)

        return cls(
            car_client=OsrmClient(settings.OSRM_BASE_URL, http_client=http_client),
            walk_client=OsrmClient(settings.walk_base_url, http_client=http_client),
            ors_client=ors_client,
        )

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def route(self, query: RouteQuery) -> NormalizedRoute:
        """
        Main entry point for the /route endpoint.

        Raises RouteNotFoundError once every attempt for the profile has
        failed; individual provider failures never escape.
        """
        t0 = perf_counter()

        logger.info(
            "Received {} routing request from ({:.6f}, {:.6f}) -> ({:.6f}, {:.6f})",
            query.profile.value,
            query.start.lat,
            query.start.lon,
            query.end.lat,
            query.end.lon,
        )

        if query.profile == RouteProfile.WALK:
            result = await self._route_walking(query.start, query.end)
            missing_message = "No route found"
        else:
            result = await self._route_driving(query.start, query.end)
            missing_message = "No route found between these points"

        logger.info("Total routing time: {:.2f} ms", (perf_counter() - t0) * 1000.0)

        if result is None:
            logger.warning("No {} route found after exhausting all providers", query.profile.value)
            raise RouteNotFoundError(missing_message)

        logger.info(
            "Route summary: provider={}, distance={:.1f} m, duration={:.1f} s, warnings={}",
            result.provider.value,
            result.distance_meters,
            result.duration_seconds,
            len(result.warnings),
        )
        return result

    def estimate_walking_duration(self, distance_m: float) -> float:
        """
        Walking time in whole seconds for a distance at the fixed pedestrian speed.
        """
        if distance_m <= 0:
            return 0.0
        return float(round(distance_m / self.walking_speed_mps))

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    async def _route_driving(self, start: GeoPoint, end: GeoPoint) -> Optional[NormalizedRoute]:
        return await self._attempt(
            "osrm-car:driving",
            partial(self.car_client.try_profile, "driving", start, end),
            partial(normalize_route, profile=RouteProfile.CAR),
        )

    async def _route_walking(self, start: GeoPoint, end: GeoPoint) -> Optional[NormalizedRoute]:
        as_walk = partial(normalize_route, profile=RouteProfile.WALK)

        # 1-3) Pedestrian OSRM server under each profile name
        for profile_name in WALK_PROFILE_NAMES:
            route = await self._attempt(
                f"osrm-walk:{profile_name}",
                partial(self.walk_client.try_profile, profile_name, start, end),
                as_walk,
            )
            if route is not None:
                return route

        # 4) OpenRouteService, only when a usable key is configured
        if self.ors_client is not None:
            route = await self._attempt(
                "ors:foot-walking",
                partial(self.ors_client.try_walking, start, end),
                as_walk,
            )
            if route is not None:
                return route

        # 5) Car route with a synthetic walking time
        return await self._attempt(
            "osrm-car:driving (walking fallback)",
            partial(self.car_client.try_profile, "driving", start, end),
            self._as_walking_fallback,
        )

    def _as_walking_fallback(self, raw: ProviderRoute) -> NormalizedRoute:
        duration_s = self.estimate_walking_duration(raw.distance or 0.0)
        logger.info(
            "Pedestrian profile unavailable; using driving geometry with walking time {:.0f} s",
            duration_s,
        )
        return normalize_route(
            raw,
            RouteProfile.WALK,
            warnings=[WALKING_FALLBACK_WARNING],
            duration_seconds=duration_s,
        )

    @staticmethod
    async def _attempt(
        label: str,
        call: Callable[[], Awaitable[Optional[ProviderRoute]]],
        normalize: Callable[[ProviderRoute], NormalizedRoute],
    ) -> Optional[NormalizedRoute]:
        """
        Run one provider attempt and normalize its answer.

        An unexpected error, including a payload that does not normalize,
        counts as a failed attempt.
        """
        try:
            raw = await call()
            if raw is None:
                return None
            return normalize(raw)
        except Exception:
            logger.exception("Routing attempt {} raised; trying the next provider", label)
            return None


# ---------------------------------------------------------------------- #
# Normalization
# ---------------------------------------------------------------------- #


def normalize_route(
    raw: ProviderRoute,
    profile: RouteProfile,
    warnings: Optional[Sequence[str]] = None,
    duration_seconds: Optional[float] = None,
) -> NormalizedRoute:
    """
    Convert an OSRM- or ORS-shaped route into a NormalizedRoute.

    `duration_seconds` overrides the provider's duration (used by the
    walking fallback).
    """
    if isinstance(raw, OrsRoute):
        provider = RouteProvider.ORS
        distance = raw.properties.summary.distance
        duration = raw.properties.summary.duration
        steps = _steps_from_ors(raw)
    else:
        provider = RouteProvider.OSRM
        distance = raw.distance
        duration = raw.duration
        steps = _steps_from_osrm(raw)

    if duration_seconds is not None:
        duration = duration_seconds

    return NormalizedRoute(
        provider=provider,
        profile=profile,
        geometry=raw.geometry,
        distance_meters=distance or 0.0,
        duration_seconds=duration or 0.0,
        steps=steps,
        warnings=list(warnings or []),
    )


def _steps_from_osrm(raw: OsrmRoute) -> List[RouteStep]:
    steps: List[RouteStep] = []

    for leg in raw.legs:
        for step in leg.steps:
            maneuver = None
            instruction = None
            if step.maneuver is not None:
                maneuver = Maneuver(type=step.maneuver.type or "", modifier=step.maneuver.modifier)
                instruction = step.maneuver.instruction

            steps.append(
                RouteStep(
                    instruction=instruction or format_maneuver(maneuver),
                    distance_meters=step.distance or 0.0,
                    duration_seconds=step.duration or 0.0,
                    road_name=step.name or "",
                    maneuver=maneuver,
                )
            )

    return steps


def _steps_from_ors(raw: OrsRoute) -> List[RouteStep]:
    if not raw.properties.segments:
        return []

    steps: List[RouteStep] = []
    for step in raw.properties.segments[0].steps:
        maneuver = Maneuver(type=str(step.type)) if step.type is not None else None
        steps.append(
            RouteStep(
                instruction=step.instruction or format_maneuver(maneuver),
                distance_meters=step.distance or 0.0,
                duration_seconds=step.duration or 0.0,
                road_name=step.name or "",
                maneuver=maneuver,
            )
        )
    return steps
