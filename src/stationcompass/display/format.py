"""
Small display formatting helpers.

Used by the CLI (and any UI collaborator) to render readings. Non-finite numbers are
rendered as the configured "unavailable" placeholder instead of "nan".
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stationcompass.session.compass import CompassReading

UNAVAILABLE = "--"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_distance(
    distance_m: float,
    *,
    km_threshold_m: float = 1000,
    km_decimals: int = 1,
    unavailable: str = UNAVAILABLE,
) -> str:
    """`999` -> "999m", `1000` -> "1.0km", `1500` -> "1.5km"."""
    if not math.isfinite(distance_m):
        return unavailable
    if distance_m < km_threshold_m:
        return f"{_round_half_up(distance_m)}m"
    return f"{distance_m / 1000:.{km_decimals}f}km"


def format_angle(degrees: float, *, unavailable: str = UNAVAILABLE) -> str:
    """Render an angle as e.g. "45° (北=0°)"."""
    if not math.isfinite(degrees):
        return unavailable
    return f"{_round_half_up(degrees) % 360}° (北=0°)"


def one_line_summary(reading: CompassReading) -> str:
    """Render a compact single-line summary for a compass reading."""
    if reading.advisory and reading.result is None:
        return reading.advisory
    if reading.result is None:
        return reading.status.value

    station = reading.station_label or ""
    parts = [
        station,
        reading.distance_text,
        f"{reading.angle_text} {reading.direction_label or UNAVAILABLE}",
        f"[{reading.mode_label}]",
    ]
    if reading.selection_mode.value == "manual":
        parts.append("(manual)")
    if reading.advisory:
        parts.append(f"! {reading.advisory}")
    return " | ".join(p for p in parts if p)
