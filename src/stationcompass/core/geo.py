from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, degrees, isfinite, nan, radians, sin, sqrt

"""
Geospatial helpers.

A tiny spherical-earth geometry layer: great-circle distance and initial bearing.
Inputs are not validated. NaN coordinates produce NaN results, and so do infinite
ones (the `math` module would raise on `sin(inf)`, so we short-circuit instead).
"""

EARTH_RADIUS_M = 6_371_000.0


@dataclass(frozen=True)
class Position:
    """A latitude/longitude pair in decimal degrees."""

    latitude: float
    longitude: float


def _all_finite(*values: float) -> bool:
    return all(isfinite(v) for v in values)


def distance_m(origin: Position, target: Position) -> float:
    """Great-circle distance in meters (haversine formula)."""
    if not _all_finite(origin.latitude, origin.longitude, target.latitude, target.longitude):
        return nan

    lat1 = radians(origin.latitude)
    lat2 = radians(target.latitude)
    dlat = radians(target.latitude - origin.latitude)
    dlon = radians(target.longitude - origin.longitude)

    h = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    # Rounding can push h a hair outside [0, 1] for antipodal points.
    h = min(1.0, max(0.0, h))
    return EARTH_RADIUS_M * 2 * atan2(sqrt(h), sqrt(1 - h))


def bearing_deg(origin: Position, target: Position) -> float:
    """Initial bearing (forward azimuth) from origin to target, degrees in [0, 360).

    Identical points give 0 because atan2(0, 0) == 0.
    """
    if not _all_finite(origin.latitude, origin.longitude, target.latitude, target.longitude):
        return nan

    lat1 = radians(origin.latitude)
    lat2 = radians(target.latitude)
    dlon = radians(target.longitude - origin.longitude)

    y = sin(dlon) * cos(lat2)
    x = cos(lat1) * sin(lat2) - sin(lat1) * cos(lat2) * cos(dlon)
    return (degrees(atan2(y, x)) + 360.0) % 360.0
