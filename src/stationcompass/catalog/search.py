"""Station name search used by the selection UI."""

from __future__ import annotations

from typing import Sequence

from stationcompass.domain.models import Station

DEFAULT_MAX_RESULTS = 8


def search_stations(
    catalog: Sequence[Station], term: str, *, max_results: int = DEFAULT_MAX_RESULTS
) -> list[Station]:
    """Return up to `max_results` stations whose name contains `term` (case-sensitive).

    Catalog order is preserved. An empty term matches everything.
    """
    out: list[Station] = []
    if max_results <= 0:
        return out
    for station in catalog:
        if term in station.name:
            out.append(station)
            if len(out) >= max_results:
                break
    return out
