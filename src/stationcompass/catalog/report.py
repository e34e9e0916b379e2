"""
Offline catalog quality report.

Goal: a deterministic view of "is the station catalog complete and sane?" before it is
shipped to the compass. Used by the `catalog-report` CLI command.
"""

from __future__ import annotations

import json
import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from stationcompass.catalog.loader import parse_stations
from stationcompass.config.settings import Settings
from stationcompass.core.env import resolve_project_path
from stationcompass.domain.models import Station

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


@dataclass(frozen=True)
class Issue:
    severity: str  # "info" | "warning" | "error"
    code: str
    message: str
    count: int = 1
    sample: list[str] | None = None

    def as_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "code": self.code,
            "message": self.message,
            "count": int(self.count),
            "sample": list(self.sample or []),
        }


def station_issues(stations: tuple[Station, ...]) -> list[Issue]:
    issues: list[Issue] = []
    if not stations:
        issues.append(Issue(severity="warning", code="CATALOG_EMPTY", message="Catalog has no stations."))
        return issues

    keys = Counter(s.key for s in stations)
    dup = sorted(f"{name} / {line}" for (name, line), n in keys.items() if n > 1)
    if dup:
        issues.append(
            Issue(
                severity="error",
                code="DUPLICATE_STATION",
                message="Stations with the same (name, line) identity; only the first is selectable.",
                count=len(dup),
                sample=dup[:10],
            )
        )

    blank = [f"{s.line} #{i}" for i, s in enumerate(stations) if not s.name.strip()]
    if blank:
        issues.append(
            Issue(severity="error", code="BLANK_NAME", message="Stations without a name.", count=len(blank), sample=blank[:10])
        )

    bad_colors = sorted({s.line_color for s in stations if not _HEX_COLOR.match(s.line_color)})
    if bad_colors:
        issues.append(
            Issue(
                severity="warning",
                code="LINE_COLOR_NOT_HEX",
                message="Line colors that are not #rgb / #rrggbb.",
                count=len(bad_colors),
                sample=bad_colors[:10],
            )
        )

    null_island = [s.name for s in stations if s.latitude == 0 and s.longitude == 0]
    if null_island:
        issues.append(
            Issue(
                severity="warning",
                code="ZERO_COORDINATES",
                message="Stations at (0, 0); coordinates are probably missing.",
                count=len(null_island),
                sample=null_island[:10],
            )
        )
    return issues


def build_catalog_report(settings: Settings, *, path: str | Path | None = None) -> dict[str, Any]:
    """Load the catalog and summarize it; load failures become issues rather than exceptions."""
    catalog_path = resolve_project_path(path or settings.catalog.path)
    report: dict[str, Any] = {"catalog_path": str(catalog_path), "stations": 0, "lines": {}, "issues": []}

    try:
        payload = json.loads(catalog_path.read_text(encoding="utf-8"))
        stations = parse_stations(payload)
    except (OSError, ValueError, ValidationError) as e:
        report["issues"] = [Issue(severity="error", code="CATALOG_LOAD_FAILED", message=str(e)).as_dict()]
        return report

    report["stations"] = len(stations)
    report["lines"] = dict(Counter(s.line for s in stations).most_common())
    report["issues"] = [i.as_dict() for i in station_issues(stations)]
    return report
