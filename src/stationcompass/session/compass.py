from __future__ import annotations

# This module is the "orchestrator" for the live compass.
# It wires together:
# - live inputs (position + heading sample streams)
# - the static station catalog and the Nearest/Manual selection
# - the geo engine (features/nearest.py) and heading reconciliation (features/heading.py)
# - the display snapshot (CompassReading) the UI collaborator renders
#
# Every input (sample, error, selection change) synchronously rebuilds the reading from
# the most recent position and heading. Nothing is buffered; the last sample wins.

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Sequence

from stationcompass.catalog.search import search_stations
from stationcompass.config.settings import Settings, get_settings
from stationcompass.core.geo import Position
from stationcompass.core.streams import SampleStream, Subscription
from stationcompass.display.format import format_angle, format_distance
from stationcompass.domain.errors import PositionUnavailable, UnknownStationError
from stationcompass.domain.models import HeadingSample, Station
from stationcompass.features.heading import DisplayMode, direction_label, display_angle, display_mode
from stationcompass.features.nearest import BearingResult, bearing_result_for, nearest

logger = logging.getLogger(__name__)

ReadingListener = Callable[["CompassReading"], None]


class SelectionMode(str, Enum):
    NEAREST = "nearest"
    MANUAL = "manual"


class ReadingStatus(str, Enum):
    LOCATING = "locating"  # no position yet
    READY = "ready"
    UNAVAILABLE = "unavailable"  # position source failed before any fix
    EMPTY = "empty"  # nothing to point at


@dataclass(frozen=True)
class Selection:
    """Which station the compass points at: the nearest one, or a fixed manual pick."""

    mode: SelectionMode = SelectionMode.NEAREST
    station: Station | None = None

    @classmethod
    def nearest(cls) -> "Selection":
        return cls()

    @classmethod
    def manual(cls, station: Station) -> "Selection":
        return cls(mode=SelectionMode.MANUAL, station=station)


def resolve_target(
    selection: Selection, origin: Position, catalog: Sequence[Station]
) -> BearingResult | None:
    """The single place where a selection is turned into a target + distance + bearing."""
    if selection.mode is SelectionMode.MANUAL and selection.station is not None:
        return bearing_result_for(origin, selection.station)
    return nearest(origin, catalog)


@dataclass(frozen=True)
class CompassReading:
    """Everything the UI needs to render one frame of the compass."""

    status: ReadingStatus
    selection_mode: SelectionMode
    position: Position | None = None
    heading: HeadingSample | None = None
    result: BearingResult | None = None
    display_angle: float | None = None
    display_mode: DisplayMode = DisplayMode.NORTH
    direction_label: str | None = None
    advisory: str | None = None
    # Pre-rendered text (placeholders when a value is unavailable).
    distance_text: str = ""
    angle_text: str = ""
    mode_label: str = ""
    notes: tuple[str, ...] = ()

    @property
    def station_label(self) -> str | None:
        if self.result is None:
            return None
        return f"{self.result.station.name} ({self.result.station.line})"

    @property
    def available(self) -> bool:
        """True when distance and bearing are both finite numbers."""
        if self.result is None:
            return False
        return math.isfinite(self.result.distance_m) and math.isfinite(self.result.bearing_deg)

    def as_dict(self) -> dict[str, Any]:
        station = self.result.station if self.result else None
        return {
            "status": self.status.value,
            "selection_mode": self.selection_mode.value,
            "position": (
                {"latitude": self.position.latitude, "longitude": self.position.longitude}
                if self.position
                else None
            ),
            "heading": self.heading.degrees_from_north if self.heading else None,
            "station": station.model_dump(mode="json") if station else None,
            "distance_m": self.result.distance_m if self.result and self.available else None,
            "bearing_deg": self.result.bearing_deg if self.result and self.available else None,
            "display_angle": (
                self.display_angle
                if self.display_angle is not None and math.isfinite(self.display_angle)
                else None
            ),
            "display_mode": self.display_mode.value,
            "direction_label": self.direction_label,
            "distance_text": self.distance_text,
            "angle_text": self.angle_text,
            "mode_label": self.mode_label,
            "advisory": self.advisory,
            "notes": list(self.notes),
        }


def _position_error_message(error: BaseException | None, settings: Settings) -> str | None:
    if error is None:
        return None
    if isinstance(error, PositionUnavailable) and error.unsupported:
        return settings.messages.position_unsupported
    return settings.messages.position_failed


def compute_reading(
    *,
    catalog: Sequence[Station],
    selection: Selection,
    position: Position | None,
    heading: HeadingSample | None,
    position_error: BaseException | None,
    settings: Settings,
) -> CompassReading:
    """Derive a reading from the latest inputs (pure)."""
    msgs = settings.messages
    disp = settings.display
    mode = display_mode(heading.degrees_from_north if heading else None)
    mode_label = msgs.mode_device if mode is DisplayMode.DEVICE else msgs.mode_north
    notes = (msgs.north_fallback_note,) if mode is DisplayMode.NORTH else ()
    error_message = _position_error_message(position_error, settings)

    if position is None:
        status = ReadingStatus.UNAVAILABLE if error_message else ReadingStatus.LOCATING
        return CompassReading(
            status=status,
            selection_mode=selection.mode,
            heading=heading,
            display_mode=mode,
            advisory=error_message or msgs.locating,
            distance_text=disp.unavailable,
            angle_text=disp.unavailable,
            mode_label=mode_label,
            notes=notes,
        )

    result = resolve_target(selection, position, catalog)
    if result is None:
        return CompassReading(
            status=ReadingStatus.EMPTY,
            selection_mode=selection.mode,
            position=position,
            heading=heading,
            display_mode=mode,
            advisory=error_message or msgs.empty_catalog,
            distance_text=disp.unavailable,
            angle_text=disp.unavailable,
            mode_label=mode_label,
            notes=notes,
        )

    angle = display_angle(result.bearing_deg, heading.degrees_from_north if heading else None)
    return CompassReading(
        status=ReadingStatus.READY,
        selection_mode=selection.mode,
        position=position,
        heading=heading,
        result=result,
        display_angle=angle,
        display_mode=mode,
        # The label names the absolute direction of the station, whatever the display mode.
        direction_label=direction_label(result.bearing_deg),
        advisory=error_message,
        distance_text=format_distance(
            result.distance_m,
            km_threshold_m=disp.km_threshold_m,
            km_decimals=disp.km_decimals,
            unavailable=disp.unavailable,
        ),
        angle_text=format_angle(angle, unavailable=disp.unavailable),
        mode_label=mode_label,
        notes=notes,
    )


class CompassSession:
    """Live compass state: latest samples, selection, and the derived reading."""

    def __init__(self, catalog: Iterable[Station], *, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.catalog: tuple[Station, ...] = tuple(catalog)
        self._by_key: dict[tuple[str, str], Station] = {}
        for station in self.catalog:
            # First entry wins for duplicate keys, matching nearest()'s tie-break.
            self._by_key.setdefault(station.key, station)

        self._selection = Selection.nearest()
        self._position: Position | None = None
        self._heading: HeadingSample | None = None
        self._position_error: BaseException | None = None

        self._listeners: list[ReadingListener] = []
        self._position_sub: Subscription | None = None
        self._heading_sub: Subscription | None = None
        self._closed = False

        self._reading = self._compute()

    # ---- State accessors ----

    @property
    def reading(self) -> CompassReading:
        return self._reading

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- Source wiring ----

    def attach_position(self, stream: SampleStream[Position]) -> None:
        """Subscribe to a position stream, replacing any previous one."""
        self._ensure_open()
        if self._position_sub is not None:
            self._position_sub.unsubscribe()
        self._position_sub = stream.subscribe(self.on_position, self.on_position_error)

    def attach_heading(self, stream: SampleStream[HeadingSample]) -> None:
        """Subscribe to a heading stream, replacing any previous one."""
        self._ensure_open()
        if self._heading_sub is not None:
            self._heading_sub.unsubscribe()
        self._heading_sub = stream.subscribe(self.on_heading, self._on_heading_error)

    def attach(
        self,
        position_stream: SampleStream[Position],
        heading_stream: SampleStream[HeadingSample] | None = None,
    ) -> None:
        self.attach_position(position_stream)
        if heading_stream is not None:
            self.attach_heading(heading_stream)

    def close(self) -> None:
        """Release both source subscriptions. Safe to call more than once."""
        for sub in (self._position_sub, self._heading_sub):
            if sub is not None:
                sub.unsubscribe()
        self._position_sub = None
        self._heading_sub = None
        if not self._closed:
            logger.debug("Compass session closed")
        self._closed = True

    def __enter__(self) -> "CompassSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def add_listener(self, listener: ReadingListener) -> Subscription:
        """Call `listener` with every new reading until the returned handle is released."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return Subscription(_remove)

    # ---- Sample handlers ----

    def on_position(self, position: Position) -> None:
        self._position = position
        # A fresh fix supersedes an earlier failure.
        self._position_error = None
        self._refresh()

    def on_position_error(self, error: BaseException) -> None:
        logger.warning("Position source failed: %s", error)
        self._position_error = error
        self._refresh()

    def on_heading(self, sample: HeadingSample) -> None:
        self._heading = sample
        self._refresh()

    def _on_heading_error(self, error: BaseException) -> None:
        # Losing the heading sensor is not an error; fall back to the North reference.
        logger.info("Heading source ended (%s); showing North-referenced bearing", error)
        self._heading = None
        self._refresh()

    # ---- Selection interface ----

    def find_station(self, name: str, line: str | None = None) -> Station:
        """Look up a catalog station by name (and line, when given)."""
        if line is not None:
            station = self._by_key.get((name, line))
            if station is not None:
                return station
        else:
            for station in self.catalog:
                if station.name == name:
                    return station
        suffix = f" ({line})" if line is not None else ""
        raise UnknownStationError(f"Unknown station '{name}'{suffix}.")

    def select(self, station: Station) -> None:
        """Enter Manual mode pointing at `station` (must be a catalog member)."""
        member = self._by_key.get(station.key)
        if member is None:
            raise UnknownStationError(f"Unknown station '{station.name}' ({station.line}).")
        self._selection = Selection.manual(member)
        logger.debug("Manual selection: %s / %s", member.name, member.line)
        self._refresh()

    def reset_to_nearest(self) -> None:
        self._selection = Selection.nearest()
        logger.debug("Selection reset to nearest")
        self._refresh()

    def search(self, term: str) -> list[Station]:
        return search_stations(self.catalog, term, max_results=self.settings.search.max_results)

    # ---- Internals ----

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Compass session is closed.")

    def _compute(self) -> CompassReading:
        return compute_reading(
            catalog=self.catalog,
            selection=self._selection,
            position=self._position,
            heading=self._heading,
            position_error=self._position_error,
            settings=self.settings,
        )

    def _refresh(self) -> None:
        self._reading = self._compute()
        for listener in list(self._listeners):
            # A broken listener must not starve the other listeners or stream subscribers.
            try:
                listener(self._reading)
            except Exception:
                logger.exception("Compass listener %r failed", listener)
