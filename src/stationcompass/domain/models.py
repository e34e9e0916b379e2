"""
Domain models.

- `Station` is a catalog entry (Pydantic, validated once at load time, frozen).
- `HeadingSample` is a live orientation reading (plain dataclass; sensor values are
  trusted and not validated).

Positions live in `stationcompass.core.geo` because the geometry layer needs them
without depending on Pydantic.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field

from stationcompass.core.geo import Position


class Station(BaseModel):
    """A station in the static catalog. Identity is `(name, line)`."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    line: str
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    line_color: str = Field("#94a3b8", alias="lineColor")

    @property
    def key(self) -> tuple[str, str]:
        return (self.name, self.line)

    @property
    def position(self) -> Position:
        return Position(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True)
class HeadingSample:
    """Device heading, degrees clockwise from North."""

    degrees_from_north: float
