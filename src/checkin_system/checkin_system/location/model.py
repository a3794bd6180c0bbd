from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class GeocodeResult:
    """Human-readable place name for a coordinate pair."""

    label: str
    source: str


@dataclass(frozen=True)
class NetworkLocation:
    """Approximate location of the server's public IP."""

    label: str
    source: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_dict(self) -> dict:
        data = {
            "label": self.label,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "source": self.source,
        }
        return {k: v for k, v in data.items() if v is not None}
