from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.constants import EARTH_RADIUS_METERS
from .model import Location


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


@dataclass(frozen=True)
class GeofenceResult:
    is_valid: bool
    location: Optional[Location]
    distance_meters: Optional[float]

    def to_dict(self) -> dict:
        return {
            "is_valid": self.is_valid,
            "location": self.location.to_dict() if self.location else None,
            "distance": round(self.distance_meters) if self.distance_meters is not None else None,
        }


def check_position(latitude: float, longitude: float, locations: Iterable[Location]) -> GeofenceResult:
    """Closest location whose radius contains the point; otherwise report the nearest one."""

    inside: Optional[tuple[float, Location]] = None
    nearest: Optional[tuple[float, Location]] = None

    for loc in locations:
        distance = haversine_distance(latitude, longitude, loc.latitude, loc.longitude)
        if nearest is None or distance < nearest[0]:
            nearest = (distance, loc)
        if distance <= loc.radius_meters and (inside is None or distance < inside[0]):
            inside = (distance, loc)

    if inside:
        return GeofenceResult(is_valid=True, location=inside[1], distance_meters=inside[0])
    if nearest:
        return GeofenceResult(is_valid=False, location=nearest[1], distance_meters=nearest[0])
    return GeofenceResult(is_valid=False, location=None, distance_meters=None)
