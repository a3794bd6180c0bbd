from __future__ import annotations

import threading
from typing import Optional, Protocol

from timezonefinder import TimezoneFinder


class TimezoneLookup(Protocol):
    def timezone_at(self, latitude: float, longitude: float) -> Optional[str]:
        """IANA zone id for a point, or None when unknown."""

        raise NotImplementedError


class TimezoneFinderLookup(TimezoneLookup):
    """Offline coordinate -> IANA zone lookup backed by timezonefinder.

    The polygon data is loaded on first use and shared across threads.
    """

    def __init__(self):
        self._finder: Optional[TimezoneFinder] = None
        self._lock = threading.Lock()

    def _get_finder(self) -> TimezoneFinder:
        with self._lock:
            if self._finder is None:
                self._finder = TimezoneFinder()
            return self._finder

    def timezone_at(self, latitude: float, longitude: float) -> Optional[str]:
        return self._get_finder().timezone_at(lng=float(longitude), lat=float(latitude))
