from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Location


class LocationRepository(Protocol):
    def list_all(self) -> Sequence[Location]:
        raise NotImplementedError

    def get_by_id(self, location_id: int) -> Optional[Location]:
        raise NotImplementedError

    def create(self, *, name: str, latitude: float, longitude: float, radius_meters: int, is_default: bool) -> int:
        raise NotImplementedError

    def update(
        self,
        location_id: int,
        *,
        name: str,
        latitude: float,
        longitude: float,
        radius_meters: int,
        is_default: bool,
    ) -> bool:
        raise NotImplementedError

    def clear_default(self) -> None:
        """Unset is_default on every location."""

        raise NotImplementedError

    def delete_by_id(self, location_id: int) -> bool:
        raise NotImplementedError
