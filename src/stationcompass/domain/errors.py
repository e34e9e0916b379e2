"""Error types shared across layers."""

from __future__ import annotations


class StationCompassError(Exception):
    """Base class for station compass errors."""


class PositionUnavailable(StationCompassError):
    """The platform cannot or will not supply a location.

    `unsupported=True` means the capability is missing entirely (as opposed to a
    denied permission or a failed fix).
    """

    def __init__(self, message: str = "position unavailable", *, unsupported: bool = False):
        super().__init__(message)
        self.unsupported = unsupported


class UnknownStationError(StationCompassError, ValueError):
    """A selection referred to a station that is not in the catalog."""
