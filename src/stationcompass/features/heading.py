"""
Heading reconciliation.

Combines a target's absolute bearing (degrees from true North) with the device heading
to get the angle an on-screen pointer should be rotated by. Many devices never report a
heading; in that case we fall back to the North-referenced bearing and report
`DisplayMode.NORTH` so the UI can say which reference it is showing.
"""

from __future__ import annotations

import math
from enum import Enum

COMPASS_LABELS: tuple[str, ...] = (
    "北",
    "北北東",
    "北東",
    "東北東",
    "東",
    "東南東",
    "南東",
    "南南東",
    "南",
    "南南西",
    "南西",
    "西南西",
    "西",
    "西北西",
    "北西",
    "北北西",
)
SECTOR_DEG = 360.0 / len(COMPASS_LABELS)


class DisplayMode(str, Enum):
    DEVICE = "device"  # relative to where the device is facing
    NORTH = "north"  # relative to true North (no heading sensor)


def normalize_deg(degrees: float) -> float:
    """Map any angle into [0, 360)."""
    # A single `% 360` is not enough: -1e-15 % 360.0 == 360.0 in float arithmetic.
    return ((degrees % 360.0) + 360.0) % 360.0


def relative_angle(absolute_bearing: float, heading: float) -> float:
    """Clockwise rotation from the device's forward direction to the target."""
    return normalize_deg(absolute_bearing - heading)


def display_mode(heading: float | None) -> DisplayMode:
    return DisplayMode.NORTH if heading is None else DisplayMode.DEVICE


def display_angle(absolute_bearing: float, heading: float | None) -> float:
    """Heading-relative angle when a heading is known, else the North-referenced bearing."""
    if heading is None:
        return normalize_deg(absolute_bearing)
    return relative_angle(absolute_bearing, heading)


def direction_label(degrees: float) -> str | None:
    """16-point compass label for `degrees`; None when the angle is not finite.

    Exact half-sector boundaries use Python's round-half-even.
    """
    if not math.isfinite(degrees):
        return None
    index = round(normalize_deg(degrees) / SECTOR_DEG) % len(COMPASS_LABELS)
    return COMPASS_LABELS[index]
