from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_RADIUS_METERS


@dataclass(frozen=True)
class Location:
    """An authorized work site with a circular perimeter."""

    location_id: int
    name: str
    latitude: float
    longitude: float
    radius_meters: int = DEFAULT_RADIUS_METERS
    is_default: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.location_id,
            "name": self.name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius_meters": self.radius_meters,
            "is_default": self.is_default,
        }
