"""User location tracking with throttling and a usable fallback."""
from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional

from . import config
from .models import Coordinates, is_valid_coordinate
from .storage import KeyValueStore, StorageError

logger = logging.getLogger(__name__)


class GeolocationErrorCode(IntEnum):
    UNSUPPORTED = 0
    PERMISSION_DENIED = 1
    POSITION_UNAVAILABLE = 2
    TIMEOUT = 3


@dataclass(frozen=True)
class GeolocationError:
    code: GeolocationErrorCode
    message: str = ""


class LocationTracker:
    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        persist_last_location: bool = False,
        min_update_interval: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        key: str = config.LAST_LOCATION_KEY,
        timeout: Optional[float] = None,
    ) -> None:
        self.store = store
        self.persist_last_location = persist_last_location and store is not None
        self.min_update_interval = (
            config.GEOLOCATION_MIN_UPDATE_INTERVAL_SECONDS
            if min_update_interval is None
            else float(min_update_interval)
        )
        self.clock = clock
        self.key = key
        self.timeout = config.GEOLOCATION_TIMEOUT_SECONDS if timeout is None else float(timeout)
        self._started = clock()
        self.loading = True
        self.error: Optional[GeolocationError] = None
        self._last_update: Optional[float] = None
        self.coordinates = self._initial_coordinates()

    def _initial_coordinates(self) -> Coordinates:
        lat, lng = config.default_center()
        fallback = Coordinates(lat, lng)
        if not self.persist_last_location:
            return fallback
        last = self.last_known_location()
        return last if last is not None else fallback

    def last_known_location(self) -> Optional[Coordinates]:
        if self.store is None:
            return None
        try:
            raw = self.store.get(self.key)
        except StorageError as exc:
            logger.warning("Cannot read last location: %s", exc)
            return None
        if not raw:
            return None
        try:
            data = json.loads(raw)
            lat, lng = data.get("lat"), data.get("lng")
        except (ValueError, AttributeError):
            logger.warning("Ignoring corrupt last location value")
            return None
        if not is_valid_coordinate(lat, lng):
            return None
        return Coordinates(float(lat), float(lng))

    def _persist(self, coords: Coordinates) -> None:
        if not self.persist_last_location or self.store is None:
            return
        try:
            self.store.set(self.key, json.dumps(coords.to_dict()))
        except StorageError as exc:
            logger.warning("Cannot persist last location: %s", exc)

    def update(self, lat: float, lng: float) -> bool:
        """Accept a position fix unless it arrives within the minimum interval."""
        now = self.clock()
        if self._last_update is not None and now - self._last_update < self.min_update_interval:
            return False
        if not is_valid_coordinate(lat, lng):
            logger.warning("Ignoring invalid position fix (%s, %s)", lat, lng)
            return False
        coords = Coordinates(float(lat), float(lng))
        self.coordinates = coords
        self.loading = False
        self._last_update = now
        self._persist(coords)
        return True

    def fail(self, code: GeolocationErrorCode, message: str = "") -> GeolocationError:
        error = GeolocationError(code=GeolocationErrorCode(code), message=message)
        self.error = error
        self.loading = False
        logger.warning("Geolocation error %s: %s", error.code.name, message)
        return error

    def check_timeout(self) -> Optional[GeolocationError]:
        """Record a TIMEOUT error if no fix arrived within ``timeout`` seconds."""
        if not self.loading or self.error is not None:
            return None
        if self.clock() - self._started < self.timeout:
            return None
        return self.fail(GeolocationErrorCode.TIMEOUT, "Timed out waiting for a position fix")

    def set_custom_coordinates(self, coords: Coordinates) -> bool:
        if not is_valid_coordinate(coords.lat, coords.lng):
            logger.warning("Ignoring invalid custom coordinates (%s, %s)", coords.lat, coords.lng)
            return False
        self.coordinates = coords
        self.loading = False
        self._persist(coords)
        return True
