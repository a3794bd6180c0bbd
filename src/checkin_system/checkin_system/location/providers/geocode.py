from __future__ import annotations

from typing import Any, Callable, Optional

from ...core.constants import DEFAULT_PROVIDER_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from ..chain import Provider
from ..http import fetch_json
from ..model import Coordinates, GeocodeResult

Fetch = Callable[..., Any]


class ReverseGeocodeProvider(Provider[Coordinates, GeocodeResult]):
    """Coordinates -> place label over HTTP."""

    def __init__(self, *, timeout_seconds: Optional[float] = None, fetch: Fetch = fetch_json):
        self.timeout_seconds = timeout_seconds
        self._fetch = fetch

    def _get(self, url: str, **kwargs) -> Any:
        return self._fetch(url, timeout=self.timeout_seconds or DEFAULT_PROVIDER_TIMEOUT_SECONDS, **kwargs)

    def _result(self, label: object) -> Optional[GeocodeResult]:
        if not isinstance(label, str) or not label.strip():
            return None
        return GeocodeResult(label=label.strip(), source=self.name)


class NominatimProvider(ReverseGeocodeProvider):
    """OpenStreetMap Nominatim; needs no key but requires an identifying User-Agent."""

    name = "nominatim"
    URL = "https://nominatim.openstreetmap.org/reverse"

    def __init__(self, *, user_agent: str = DEFAULT_USER_AGENT, language: str = "en", **kwargs):
        super().__init__(**kwargs)
        self._user_agent = user_agent
        self._language = language

    def attempt(self, query: Coordinates) -> Optional[GeocodeResult]:
        data = self._get(
            self.URL,
            params={
                "format": "jsonv2",
                "lat": query.latitude,
                "lon": query.longitude,
                "zoom": 18,
                "addressdetails": 1,
            },
            headers={"User-Agent": self._user_agent, "Accept-Language": self._language},
        )
        if not isinstance(data, dict):
            return None
        return self._result(data.get("display_name"))


class MapboxProvider(ReverseGeocodeProvider):
    name = "mapbox"
    URL = "https://api.mapbox.com/geocoding/v5/mapbox.places/{lng},{lat}.json"

    def __init__(self, *, token: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self._token = token

    def attempt(self, query: Coordinates) -> Optional[GeocodeResult]:
        if not self._token:
            return None

        data = self._get(
            self.URL.format(lng=query.longitude, lat=query.latitude),
            params={"access_token": self._token},
        )
        features = data.get("features") if isinstance(data, dict) else None
        if not features or not isinstance(features[0], dict):
            return None
        return self._result(features[0].get("place_name"))


class GoogleProvider(ReverseGeocodeProvider):
    name = "google"
    URL = "https://maps.googleapis.com/maps/api/geocode/json"

    def __init__(self, *, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self._api_key = api_key

    def attempt(self, query: Coordinates) -> Optional[GeocodeResult]:
        if not self._api_key:
            return None

        data = self._get(
            self.URL,
            params={"latlng": f"{query.latitude},{query.longitude}", "key": self._api_key},
        )
        if not isinstance(data, dict):
            return None
        if data.get("status") and data["status"] != "OK":
            return None
        results = data.get("results") or []
        if not results or not isinstance(results[0], dict):
            return None
        return self._result(results[0].get("formatted_address"))
