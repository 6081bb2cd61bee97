from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from ..core.exceptions import LocationUnavailable
from ..verification.proximity import GeoPoint

PERMISSION_DENIED = "Location access denied by user"
POSITION_UNAVAILABLE = "Location information unavailable"
TIMEOUT = "Location request timed out"


class GeolocationProvider(Protocol):
    """Device location source. Raises LocationUnavailable with a display reason."""

    def current_location(self) -> GeoPoint:
        raise NotImplementedError


@dataclass
class FixedLocationProvider(GeolocationProvider):
    """Returns a preset point, or fails with ``error`` when one is set."""

    point: Optional[GeoPoint] = None
    error: Optional[str] = None

    def current_location(self) -> GeoPoint:
        if self.error:
            raise LocationUnavailable(self.error)
        if self.point is None:
            raise LocationUnavailable(POSITION_UNAVAILABLE)
        return self.point
