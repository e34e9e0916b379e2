"""
Station catalog loader.

The catalog is a local JSON file (default: `data/catalogs/stations.json`) holding a list
of station records (`name`, `line`, `latitude`, `longitude`, `lineColor`). We validate
it into frozen Pydantic models once; the rest of the code treats the result as an
immutable sequence and never re-reads it.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import TypeAdapter

from stationcompass.core.env import resolve_project_path
from stationcompass.domain.models import Station

logger = logging.getLogger(__name__)

_STATIONS_ADAPTER = TypeAdapter(list[Station])


def parse_stations(payload: object) -> tuple[Station, ...]:
    """Validate an already-decoded JSON payload into stations (catalog order kept)."""
    return tuple(_STATIONS_ADAPTER.validate_python(payload))


def load_stations(path: str | Path) -> tuple[Station, ...]:
    """Load and validate a station catalog JSON file."""
    resolved = resolve_project_path(path)
    payload = json.loads(resolved.read_text(encoding="utf-8"))
    stations = parse_stations(payload)
    logger.info("Loaded %d stations from %s", len(stations), resolved)
    return stations
