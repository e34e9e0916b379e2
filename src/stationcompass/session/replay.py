"""
Replay a recorded sample log through a compass session.

The log is JSON lines, one event per line, for example:

    {"type": "position", "latitude": 35.681, "longitude": 139.767}
    {"type": "heading", "degrees": 45}
    {"type": "select", "name": "東京", "line": "JR山手線"}
    {"type": "reset"}
    {"type": "position_error", "unsupported": false}

Samples are pushed through `SampleStream`s exactly as a live platform source would, so
the session under replay behaves like the live one. Blank lines and `#` comments are
skipped.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Iterable, Iterator, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from stationcompass.core.env import resolve_project_path
from stationcompass.core.geo import Position
from stationcompass.core.streams import SampleStream
from stationcompass.domain.errors import PositionUnavailable
from stationcompass.domain.models import HeadingSample
from stationcompass.session.compass import CompassReading, CompassSession


class PositionEvent(BaseModel):
    type: Literal["position"]
    latitude: float
    longitude: float


class HeadingEvent(BaseModel):
    type: Literal["heading"]
    degrees: float


class PositionErrorEvent(BaseModel):
    type: Literal["position_error"]
    message: str = "position unavailable"
    unsupported: bool = False


class SelectEvent(BaseModel):
    type: Literal["select"]
    name: str
    line: str | None = None


class ResetEvent(BaseModel):
    type: Literal["reset"]


ReplayEvent = Annotated[
    Union[PositionEvent, HeadingEvent, PositionErrorEvent, SelectEvent, ResetEvent],
    Field(discriminator="type"),
]

_EVENT_ADAPTER = TypeAdapter(ReplayEvent)


def parse_events(lines: Iterable[str]) -> list[ReplayEvent]:
    """Parse JSON-lines text into typed events; errors name the offending line."""
    events: list[ReplayEvent] = []
    for lineno, raw in enumerate(lines, start=1):
        text = raw.strip()
        if not text or text.startswith("#"):
            continue
        try:
            events.append(_EVENT_ADAPTER.validate_python(json.loads(text)))
        except ValueError as e:
            raise ValueError(f"Invalid replay event on line {lineno}: {e}") from e
    return events


def read_events(path: str | Path) -> list[ReplayEvent]:
    resolved = resolve_project_path(path)
    return parse_events(resolved.read_text(encoding="utf-8").splitlines())


class Replayer:
    """Owns the sample streams feeding one session during a replay."""

    def __init__(self, session: CompassSession):
        self.session = session
        self.position_stream: SampleStream[Position] = SampleStream("position")
        self.heading_stream: SampleStream[HeadingSample] = SampleStream("heading")
        session.attach(self.position_stream, self.heading_stream)

    def apply(self, event: ReplayEvent) -> CompassReading:
        if isinstance(event, PositionEvent):
            if self.position_stream.failed:
                # The platform restarted its watch after a failure.
                self.position_stream = SampleStream("position")
                self.session.attach_position(self.position_stream)
            self.position_stream.push(Position(latitude=event.latitude, longitude=event.longitude))
        elif isinstance(event, HeadingEvent):
            self.heading_stream.push(HeadingSample(degrees_from_north=event.degrees))
        elif isinstance(event, PositionErrorEvent):
            self.position_stream.fail(PositionUnavailable(event.message, unsupported=event.unsupported))
        elif isinstance(event, SelectEvent):
            self.session.select(self.session.find_station(event.name, event.line))
        elif isinstance(event, ResetEvent):
            self.session.reset_to_nearest()
        return self.session.reading


def replay(session: CompassSession, events: Iterable[ReplayEvent]) -> Iterator[tuple[ReplayEvent, CompassReading]]:
    """Feed `events` into `session`, yielding the reading after each one.

    The session's source subscriptions are released when the generator finishes.
    """
    replayer = Replayer(session)
    try:
        for event in events:
            yield event, replayer.apply(event)
    finally:
        session.close()
