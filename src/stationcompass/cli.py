"""
Station Compass CLI entrypoint.

This CLI is intended for quick local demos and debugging without a UI.
It delegates all compass logic to `stationcompass.session.compass.CompassSession`.
"""

from __future__ import annotations

import argparse
import json
from typing import Any

from stationcompass.catalog.loader import load_stations
from stationcompass.catalog.report import build_catalog_report
from stationcompass.config.settings import Settings, get_settings
from stationcompass.core.geo import Position
from stationcompass.core.logging import configure_logging
from stationcompass.core.streams import SampleStream
from stationcompass.display.format import one_line_summary
from stationcompass.domain.models import HeadingSample, Station
from stationcompass.session.compass import CompassReading, CompassSession
from stationcompass.session.replay import read_events, replay


def _load_catalog(args: argparse.Namespace, settings: Settings) -> tuple[Station, ...]:
    return load_stations(args.catalog or settings.catalog.path)


def _print_reading(reading: CompassReading, *, as_json: bool) -> None:
    if as_json:
        print(json.dumps(reading.as_dict(), ensure_ascii=False))
    else:
        print(one_line_summary(reading))


def _cmd_nearest(args: argparse.Namespace) -> int:
    """Handle the `nearest` subcommand: one position (+ optional heading) in, one reading out."""
    settings = get_settings()
    catalog = _load_catalog(args, settings)

    positions: SampleStream[Position] = SampleStream("position")
    headings: SampleStream[HeadingSample] = SampleStream("heading")
    with CompassSession(catalog, settings=settings) as session:
        session.attach(positions, headings)
        if args.station:
            session.select(session.find_station(args.station, args.line))
        if args.heading is not None:
            headings.push(HeadingSample(degrees_from_north=float(args.heading)))
        positions.push(Position(latitude=float(args.lat), longitude=float(args.lon)))
        reading = session.reading

    if args.json:
        print(json.dumps(reading.as_dict(), ensure_ascii=False, indent=2))
        return 0

    if reading.result is None:
        print(reading.advisory or reading.status.value)
        return 1
    station = reading.result.station
    print(f"Station:   {station.name} ({station.line})")
    print(f"Distance:  {reading.distance_text}")
    print(f"Direction: {reading.angle_text} {reading.direction_label or settings.display.unavailable}")
    print(f"Reference: {reading.mode_label}")
    for note in reading.notes:
        print(f"  {note}")
    return 0


def _cmd_search(args: argparse.Namespace) -> int:
    settings = get_settings()
    catalog = _load_catalog(args, settings)
    session = CompassSession(catalog, settings=settings)
    matches = session.search(args.term)

    if args.json:
        print(json.dumps([s.model_dump(mode="json") for s in matches], ensure_ascii=False, indent=2))
        return 0
    for i, s in enumerate(matches, start=1):
        print(f"{i:>2}. {s.name} ({s.line})  {s.latitude:.6f},{s.longitude:.6f}")
    return 0


def _cmd_replay(args: argparse.Namespace) -> int:
    settings = get_settings()
    catalog = _load_catalog(args, settings)
    events = read_events(args.events)
    session = CompassSession(catalog, settings=settings)
    for event, reading in replay(session, events):
        if args.json:
            _print_reading(reading, as_json=True)
        else:
            print(f"{event.type:<15} {one_line_summary(reading)}")
    return 0


def _cmd_catalog_report(args: argparse.Namespace) -> int:
    settings = get_settings()
    report = build_catalog_report(settings, path=args.catalog)
    print(json.dumps(report, ensure_ascii=False, indent=2))
    has_errors = any(i["severity"] == "error" for i in report["issues"])
    return 1 if has_errors else 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the Station Compass CLI."""
    parser = argparse.ArgumentParser(prog="stationcompass")
    sub = parser.add_subparsers(dest="command", required=True)

    near = sub.add_parser("nearest", help="Nearest (or a selected) station from one position.")
    near.add_argument("--lat", required=True, type=float)
    near.add_argument("--lon", required=True, type=float)
    near.add_argument("--heading", type=float, default=None, help="Device heading, degrees from North")
    near.add_argument("--station", type=str, default=None, help="Point at this station instead of the nearest")
    near.add_argument("--line", type=str, default=None, help="Line of --station when the name is ambiguous")
    near.add_argument("--catalog", type=str, default=None, help="Station catalog JSON (default from config)")
    near.add_argument("--json", action="store_true", help="Output machine-readable JSON")
    near.set_defaults(func=_cmd_nearest)

    se = sub.add_parser("search", help="Search station names (case-sensitive substring).")
    se.add_argument("term")
    se.add_argument("--catalog", type=str, default=None)
    se.add_argument("--json", action="store_true")
    se.set_defaults(func=_cmd_search)

    rp = sub.add_parser("replay", help="Replay a JSON-lines sample log through a compass session.")
    rp.add_argument("events", help="Path to the JSON-lines event log")
    rp.add_argument("--catalog", type=str, default=None)
    rp.add_argument("--json", action="store_true", help="One JSON reading per line")
    rp.set_defaults(func=_cmd_replay)

    q = sub.add_parser("catalog-report", help="Offline data quality report for the station catalog.")
    q.add_argument("--catalog", type=str, default=None)
    q.set_defaults(func=_cmd_catalog_report)
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint callable used by `python -m stationcompass.cli`."""
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    func: Any = getattr(args, "func")
    return int(func(args))


if __name__ == "__main__":
    raise SystemExit(main())
