from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_non_empty, require_range
from ..core.constants import DEFAULT_RADIUS_METERS
from ..core.exceptions import GeofenceError, NotFoundError, ValidationError
from .geofence import GeofenceResult, check_position
from .model import Location
from .repository import LocationRepository

logger = logging.getLogger(__name__)


class LocationService:
    """Use cases: manage authorized sites and validate kiosk positions."""

    def __init__(self, locations: LocationRepository):
        self._locations = locations

    def list_all(self) -> Sequence[Location]:
        return self._locations.list_all()

    def get(self, location_id: int) -> Location:
        loc = self._locations.get_by_id(int(location_id))
        if not loc:
            raise NotFoundError("Location not found")
        return loc

    def default_location(self) -> Optional[Location]:
        for loc in self._locations.list_all():
            if loc.is_default:
                return loc
        return None

    def save(
        self,
        *,
        name: str,
        latitude,
        longitude,
        radius_meters=DEFAULT_RADIUS_METERS,
        is_default: bool = False,
        location_id: Optional[int] = None,
    ) -> int:
        name = require_non_empty(name, "Name")
        try:
            lat = float(latitude)
            lon = float(longitude)
            radius = int(radius_meters)
        except (TypeError, ValueError):
            raise ValidationError("Coordinates and radius must be numeric")
        require_range(lat, "Latitude", -90, 90)
        require_range(lon, "Longitude", -180, 180)
        if radius <= 0:
            raise ValidationError("Radius must be positive")

        if location_id:
            self.get(location_id)

        if is_default:
            self._locations.clear_default()

        if location_id:
            self._locations.update(
                int(location_id),
                name=name,
                latitude=lat,
                longitude=lon,
                radius_meters=radius,
                is_default=bool(is_default),
            )
            logger.info("Updated location %s", location_id)
            return int(location_id)

        new_id = self._locations.create(
            name=name, latitude=lat, longitude=lon, radius_meters=radius, is_default=bool(is_default)
        )
        logger.info("Created location %s (%s)", new_id, name)
        return new_id

    def set_default(self, location_id: int) -> None:
        loc = self.get(location_id)
        self._locations.clear_default()
        self._locations.update(
            loc.location_id,
            name=loc.name,
            latitude=loc.latitude,
            longitude=loc.longitude,
            radius_meters=loc.radius_meters,
            is_default=True,
        )

    def delete(self, location_id: int) -> None:
        if not self._locations.delete_by_id(int(location_id)):
            raise NotFoundError("Location not found")

    def check(self, latitude, longitude) -> GeofenceResult:
        try:
            lat = float(latitude)
            lon = float(longitude)
        except (TypeError, ValueError):
            raise ValidationError("Invalid GPS coordinates")
        return check_position(lat, lon, self._locations.list_all())

    def require_inside(self, latitude, longitude) -> GeofenceResult:
        result = self.check(latitude, longitude)
        if not result.is_valid:
            if result.location is None:
                raise GeofenceError("No authorized locations configured")
            raise GeofenceError(
                f"Outside authorized perimeter ({round(result.distance_meters or 0)} m from {result.location.name})"
            )
        return result
