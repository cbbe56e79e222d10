# route_planner/services/storage.py
"""
Flat key-value persistence for saved places and recent routes.

Values are JSON arrays stored under two fixed keys. Anything unreadable
is treated as an empty list rather than an error.
"""

import json
from pathlib import Path
from typing import Dict, Generic, List, Optional, Protocol, Type, TypeVar, Union

from pydantic import BaseModel, TypeAdapter, ValidationError

from route_planner.core.config import settings
from route_planner.core.logger import logger
from route_planner.models.places import RecentRouteRecord, SavedPlace

SAVED_PLACES_KEY = "uzh-route-saved-places"
RECENT_ROUTES_KEY = "uzh-route-recent-routes"

T = TypeVar("T", bound=BaseModel)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """
    All keys live in one JSON object on disk.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def get(self, key: str) -> Optional[str]:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")

    def _read(self) -> Dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Store file {} is unreadable, starting empty: {}", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}


class _ListRepository(Generic[T]):
    key: str
    model: Type[T]

    def __init__(self, store: KeyValueStore) -> None:
        self.store = store
        self._adapter = TypeAdapter(List[self.model])  # type: ignore[name-defined]

    def list(self) -> List[T]:
        raw = self.store.get(self.key)
        if not raw:
            return []
        try:
            return self._adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning("Ignoring corrupt data under {!r}: {}", self.key, exc.error_count())
            return []

    def _write(self, items: List[T]) -> None:
        self.store.set(self.key, self._adapter.dump_json(items, by_alias=True).decode("utf-8"))


class PlacesRepository(_ListRepository[SavedPlace]):
    key = SAVED_PLACES_KEY
    model = SavedPlace

    def add(self, place: SavedPlace) -> bool:
        """
        Prepend a place unless one with the same id or coordinates exists.
        """
        places = self.list()
        exists = any(
            p.id == place.id or (p.lat == place.lat and p.lon == place.lon)
            for p in places
        )
        if exists:
            return False

        places.insert(0, place)
        self._write(places)
        return True

    def remove(self, place_id: str) -> None:
        self._write([p for p in self.list() if p.id != place_id])


class RecentRoutesRepository(_ListRepository[RecentRouteRecord]):
    key = RECENT_ROUTES_KEY
    model = RecentRouteRecord

    def __init__(self, store: KeyValueStore, limit: Optional[int] = None) -> None:
        super().__init__(store)
        self.limit = limit or settings.RECENT_ROUTES_LIMIT

    def add(self, record: RecentRouteRecord) -> None:
        """
        Put the record first, dropping any earlier entry for the same route.
        """
        routes = [r for r in self.list() if not r.same_route(record)]
        routes.insert(0, record)
        self._write(routes[: self.limit])

    def clear(self) -> None:
        self._write([])
