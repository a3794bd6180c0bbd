from __future__ import annotations

import logging
from typing import Iterable, Optional, Union

from ..core.constants import DEFAULT_GEOCODE_PROVIDER, DEFAULT_PROVIDER_TIMEOUT_SECONDS, DEFAULT_USER_AGENT
from .chain import ProviderChain
from .model import Coordinates, GeocodeResult, NetworkLocation
from .providers.geocode import GoogleProvider, MapboxProvider, NominatimProvider, ReverseGeocodeProvider
from .providers.network import IpApiComProvider, IpApiCoProvider, IpWhoIsProvider

logger = logging.getLogger(__name__)

GEOCODE_PROVIDER_NAMES = ("nominatim", "mapbox", "google")


def parse_provider_names(value: Union[str, Iterable[str], None]) -> list[str]:
    """Split e.g. "mapbox, nominatim" into ordered names; unknown names map to the default provider."""

    if value is None:
        items: list[str] = []
    elif isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value)

    names: list[str] = []
    for item in items:
        name = item.strip().lower()
        if not name:
            continue
        if name not in GEOCODE_PROVIDER_NAMES:
            logger.warning("Unknown reverse geocode provider %r, using %s", name, DEFAULT_GEOCODE_PROVIDER)
            name = DEFAULT_GEOCODE_PROVIDER
        if name not in names:
            names.append(name)
    return names or [DEFAULT_GEOCODE_PROVIDER]


def build_reverse_geocoder(
    *,
    providers: Union[str, Iterable[str], None] = DEFAULT_GEOCODE_PROVIDER,
    mapbox_token: Optional[str] = None,
    google_maps_key: Optional[str] = None,
    user_agent: str = DEFAULT_USER_AGENT,
    language: str = "en",
    timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS,
) -> ProviderChain[Coordinates, GeocodeResult]:
    chain: list[ReverseGeocodeProvider] = []
    for name in parse_provider_names(providers):
        if name == "mapbox":
            chain.append(MapboxProvider(token=mapbox_token, timeout_seconds=timeout_seconds))
        elif name == "google":
            chain.append(GoogleProvider(api_key=google_maps_key, timeout_seconds=timeout_seconds))
        else:
            chain.append(NominatimProvider(user_agent=user_agent, language=language, timeout_seconds=timeout_seconds))

    return ProviderChain(chain, name="reverse-geocode", timeout_seconds=timeout_seconds)


def build_network_locator(
    *, timeout_seconds: float = DEFAULT_PROVIDER_TIMEOUT_SECONDS
) -> ProviderChain[None, NetworkLocation]:
    return ProviderChain(
        [
            IpApiCoProvider(timeout_seconds=timeout_seconds),
            IpWhoIsProvider(timeout_seconds=timeout_seconds),
            IpApiComProvider(timeout_seconds=timeout_seconds),
        ],
        name="network-location",
        timeout_seconds=timeout_seconds,
    )
