"""Great-circle proximity checks between a student and a declared class location."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ..core.constants import EARTH_RADIUS_METERS


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
    label: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"latitude": self.latitude, "longitude": self.longitude}
        if self.label:
            data["label"] = self.label
        return data


@dataclass(frozen=True)
class ProximityResult:
    is_valid: bool
    distance_meters: int


def distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Haversine distance between two GPS points in meters."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)

    a = math.sin(delta_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    # Rounding can push a just outside [0, 1] for antipodal points.
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_METERS * c


def within_radius(student: GeoPoint, venue: GeoPoint, radius_meters: float) -> ProximityResult:
    """Inclusive radius test; the reported distance is rounded to whole meters."""
    meters = distance(student.latitude, student.longitude, venue.latitude, venue.longitude)
    return ProximityResult(is_valid=meters <= radius_meters, distance_meters=int(round(meters)))
