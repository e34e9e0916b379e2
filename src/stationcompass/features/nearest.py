"""
Nearest-station search (the geo engine).

This module lives in the `features/` layer:
- `core/geo.py` provides the raw distance/bearing math.
- This module turns (position, station) pairs into `BearingResult`s and picks the nearest.

Performance note:
- `nearest()` is a plain O(N) scan over the catalog. Catalogs are hundreds of stations and
  positions arrive at roughly 1 Hz, so no spatial index is needed.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from stationcompass.core.geo import Position, bearing_deg, distance_m
from stationcompass.domain.models import Station


@dataclass(frozen=True)
class BearingResult:
    # Distance and bearing are always computed together from the same position/station pair.
    station: Station
    distance_m: float
    bearing_deg: float


def bearing_result_for(origin: Position, station: Station) -> BearingResult:
    """Distance and bearing from `origin` to a single station."""
    target = station.position
    return BearingResult(
        station=station,
        distance_m=distance_m(origin, target),
        bearing_deg=bearing_deg(origin, target),
    )


def nearest(origin: Position, catalog: Iterable[Station]) -> BearingResult | None:
    """Return the station with strictly minimal distance, or None for an empty catalog.

    Ties keep the first station in catalog order. A NaN distance never replaces a
    finite one, but if every distance is NaN the first station is still returned.
    """
    closest: BearingResult | None = None
    for station in catalog:
        candidate = bearing_result_for(origin, station)
        if closest is None or candidate.distance_m < closest.distance_m:
            closest = candidate
    return closest
