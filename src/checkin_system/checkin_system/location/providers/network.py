from __future__ import annotations

from abc import abstractmethod
from typing import Any, Callable, Optional

from ...common.validators import to_number
from ...core.constants import DEFAULT_PROVIDER_TIMEOUT_SECONDS
from ..chain import Provider
from ..http import fetch_json
from ..model import NetworkLocation

Fetch = Callable[..., Any]


class IpLocationProvider(Provider[None, NetworkLocation]):
    """IP geolocation service; the looked-up address is the caller's (this server's)."""

    URL = ""

    def __init__(self, *, timeout_seconds: Optional[float] = None, fetch: Fetch = fetch_json):
        self.timeout_seconds = timeout_seconds
        self._fetch = fetch

    @abstractmethod
    def parse(self, data: dict) -> Optional[dict]:
        """Map the payload to city/region/country/latitude/longitude; None when the service reports failure."""

        raise NotImplementedError

    def attempt(self, query: None = None) -> Optional[NetworkLocation]:
        data = self._fetch(self.URL, timeout=self.timeout_seconds or DEFAULT_PROVIDER_TIMEOUT_SECONDS)
        if not isinstance(data, dict):
            return None

        parsed = self.parse(data)
        if parsed is None:
            return None

        parts = [str(parsed[k]) for k in ("city", "region", "country") if parsed.get(k)]
        label = f"IP {', '.join(parts)}" if parts else "IP location"
        return NetworkLocation(
            label=label,
            source=self.name,
            latitude=to_number(parsed.get("latitude")),
            longitude=to_number(parsed.get("longitude")),
        )


class IpApiCoProvider(IpLocationProvider):
    name = "ipapi"
    URL = "https://ipapi.co/json/"

    def parse(self, data: dict) -> Optional[dict]:
        if data.get("error"):
            return None
        return {
            "city": data.get("city"),
            "region": data.get("region"),
            "country": data.get("country_name"),
            "latitude": data.get("latitude"),
            "longitude": data.get("longitude"),
        }


class IpWhoIsProvider(IpLocationProvider):
    name = "ipwhois"
    URL = "https://ipwho.is/"

    def parse(self, data: dict) -> Optional[dict]:
        if data.get("success") is False:
            return None
        return {
            "city": data.get("city"),
            "region": data.get("region"),
            "country": data.get("country"),
            "latitude": data.get("latitude"),
            "longitude": data.get("longitude"),
        }


class IpApiComProvider(IpLocationProvider):
    name = "ip-api"
    URL = "http://ip-api.com/json/"

    def parse(self, data: dict) -> Optional[dict]:
        if data.get("status") != "success":
            return None
        return {
            "city": data.get("city"),
            "region": data.get("regionName"),
            "country": data.get("country"),
            "latitude": data.get("lat"),
            "longitude": data.get("lon"),
        }
