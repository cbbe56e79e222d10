# route_planner/services/route_state.py

import asyncio
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Protocol

from route_planner.core.config import settings
from route_planner.core.exceptions import RoutePlannerError
from route_planner.core.logger import logger
from route_planner.models.geo import MapPoint, RouteProfile
from route_planner.models.places import RecentRouteRecord, SavedPlace
from route_planner.models.routing import NormalizedRoute, RouteQuery
from route_planner.services.sharing import build_share_url, parse_share_params
from route_planner.services.storage import PlacesRepository, RecentRoutesRepository


class Router(Protocol):
    async def route(self, query: RouteQuery) -> NormalizedRoute:
        ...


class NoticeLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    message: str


class RouteFailurePolicy(str, Enum):
    """What happens to the shown route when a newer request fails."""

    KEEP = "keep"
    CLEAR = "clear"


class RouteStateController:
    """
    Session state behind the route panel.

    Any change of start, end or profile triggers one routing call. Each
    call carries a sequence number and its outcome is applied only while
    that number is still the latest one, so a slow stale response can
    never overwrite a newer route.
    """

    def __init__(
        self,
        router: Router,
        places: PlacesRepository,
        history: RecentRoutesRepository,
        failure_policy: Optional[RouteFailurePolicy] = None,
        debounce_seconds: Optional[float] = None,
        on_notice: Optional[Callable[[Notice], None]] = None,
    ) -> None:
        self.router = router
        self.places = places
        self.history = history
        self.failure_policy = failure_policy or RouteFailurePolicy(settings.ROUTE_FAILURE_POLICY)
        self.debounce_seconds = (
            debounce_seconds if debounce_seconds is not None else settings.DRAG_DEBOUNCE_SECONDS
        )
        self.on_notice = on_notice

        self.start: Optional[MapPoint] = None
        self.end: Optional[MapPoint] = None
        self.profile = RouteProfile.CAR
        self.route: Optional[NormalizedRoute] = None
        self.is_loading = False
        self.notices: List[Notice] = []

        self.saved_places: List[SavedPlace] = places.list()
        self.recent_routes: List[RecentRouteRecord] = history.list()

        self._sequence = 0
        self._route_task: Optional["asyncio.Task[None]"] = None
        self._pending_drags: Dict[str, asyncio.TimerHandle] = {}

    # ------------------------------------------------------------------ #
    # Inputs
    # ------------------------------------------------------------------ #

    def set_start(self, point: Optional[MapPoint]) -> Optional["asyncio.Task[None]"]:
        self.start = point
        return self._refresh()

    def set_end(self, point: Optional[MapPoint]) -> Optional["asyncio.Task[None]"]:
        self.end = point
        return self._refresh()

    def set_profile(self, profile: RouteProfile) -> Optional["asyncio.Task[None]"]:
        self.profile = profile
        return self._refresh()

    def set_points(
        self,
        start: Optional[MapPoint],
        end: Optional[MapPoint],
        profile: Optional[RouteProfile] = None,
    ) -> Optional["asyncio.Task[None]"]:
        """Change several inputs at once with a single routing call."""
        self.start = start
        self.end = end
        if profile is not None:
            self.profile = profile
        return self._refresh()

    def reverse_points(self) -> Optional["asyncio.Task[None]"]:
        return self.set_points(self.end, self.start)

    def restore_route(self, record: RecentRouteRecord) -> Optional["asyncio.Task[None]"]:
        return self.set_points(record.start, record.end, record.profile)

    def apply_share_params(self, params: Mapping[str, str]) -> Optional["asyncio.Task[None]"]:
        query = parse_share_params(params)
        if query is None:
            logger.debug("Share parameters {} do not describe a route", dict(params))
            return None

        return self.set_points(
            MapPoint(lat=query.start.lat, lon=query.start.lon),
            MapPoint(lat=query.end.lat, lon=query.end.lon),
            query.profile,
        )

    def clear_route(self) -> None:
        self._cancel_drags()
        self.start = None
        self.end = None
        self._refresh()

    # Map marker drags commit only after a quiet period (trailing edge).

    def drag_start(self, point: MapPoint) -> None:
        self._debounce("start", point)

    def drag_end(self, point: MapPoint) -> None:
        self._debounce("end", point)

    async def wait_for_route(self) -> None:
        """Wait for the most recently issued routing call to settle."""
        if self._route_task is not None:
            await self._route_task

    # ------------------------------------------------------------------ #
    # Places and sharing
    # ------------------------------------------------------------------ #

    def save_place(self, point: MapPoint, name: str) -> SavedPlace:
        place = SavedPlace(
            id=uuid.uuid4().hex,
            name=name,
            lat=point.lat,
            lon=point.lon,
            created_at=datetime.now(timezone.utc),
        )
        self.places.add(place)
        self.saved_places = self.places.list()
        self._notify(NoticeLevel.INFO, "Місце збережено", name)
        return place

    def delete_place(self, place_id: str) -> None:
        self.places.remove(place_id)
        self.saved_places = self.places.list()

    def share_url(self, base_url: str) -> Optional[str]:
        if self.start is None or self.end is None:
            return None
        query = RouteQuery(
            start=self.start.to_geo_point(),
            end=self.end.to_geo_point(),
            profile=self.profile,
        )
        return build_share_url(base_url, query)

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _refresh(self) -> Optional["asyncio.Task[None]"]:
        self._sequence += 1

        if self.start is None or self.end is None:
            self.route = None
            self.is_loading = False
            self._route_task = None
            return None

        query = RouteQuery(
            start=self.start.to_geo_point(),
            end=self.end.to_geo_point(),
            profile=self.profile,
        )
        self.is_loading = True
        task = asyncio.get_running_loop().create_task(
            self._fetch(self._sequence, query, self.start, self.end)
        )
        self._route_task = task
        return task

    async def _fetch(
        self,
        sequence: int,
        query: RouteQuery,
        start: MapPoint,
        end: MapPoint,
    ) -> None:
        try:
            route = await self.router.route(query)
        except RoutePlannerError as exc:
            logger.warning("Route request #{} failed: {}", sequence, exc.message)
            self._apply_failure(sequence)
            return
        except Exception:
            logger.exception("Route request #{} failed unexpectedly", sequence)
            self._apply_failure(sequence)
            return

        if sequence != self._sequence:
            logger.debug("Dropping result of superseded route request #{}", sequence)
            return

        self.route = route
        self.is_loading = False

        if route.warnings:
            self._notify(NoticeLevel.WARNING, "Увага", route.warnings[0])

        self.history.add(
            RecentRouteRecord(
                id=uuid.uuid4().hex,
                start=start,
                end=end,
                profile=query.profile,
                distance_meters=route.distance_meters,
                duration_seconds=route.duration_seconds,
                created_at=datetime.now(timezone.utc),
            )
        )
        self.recent_routes = self.history.list()

    def _apply_failure(self, sequence: int) -> None:
        if sequence != self._sequence:
            logger.debug("Dropping failure of superseded route request #{}", sequence)
            return

        self.is_loading = False
        if self.failure_policy == RouteFailurePolicy.CLEAR:
            self.route = None
        self._notify(NoticeLevel.ERROR, "Помилка маршруту", "Не вдалося розрахувати маршрут")

    def _debounce(self, endpoint: str, point: MapPoint) -> None:
        handle = self._pending_drags.pop(endpoint, None)
        if handle is not None:
            handle.cancel()

        loop = asyncio.get_running_loop()
        self._pending_drags[endpoint] = loop.call_later(
            self.debounce_seconds, self._commit_drag, endpoint, point
        )

    def _commit_drag(self, endpoint: str, point: MapPoint) -> None:
        self._pending_drags.pop(endpoint, None)
        if endpoint == "start":
            self.set_start(point)
        else:
            self.set_end(point)

    def _cancel_drags(self) -> None:
        for handle in self._pending_drags.values():
            handle.cancel()
        self._pending_drags.clear()

    def _notify(self, level: NoticeLevel, title: str, message: str) -> None:
        notice = Notice(level=level, title=title, message=message)
        self.notices.append(notice)
        if self.on_notice is not None:
            self.on_notice(notice)
