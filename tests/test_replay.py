import pytest

from stationcompass.config.settings import get_settings
from stationcompass.domain.models import Station
from stationcompass.session.compass import CompassSession, ReadingStatus, SelectionMode
from stationcompass.session.replay import PositionEvent, parse_events, read_events, replay

A = Station(name="A", line="L1", latitude=35.001, longitude=139.0)
B = Station(name="B", line="L1", latitude=35.01, longitude=139.0)


def test_parse_events_skips_blank_and_comment_lines():
    events = parse_events(
        [
            "# header",
            "",
            '{"type": "position", "latitude": 35.0, "longitude": 139.0}',
            '{"type": "reset"}',
        ]
    )
    assert isinstance(events[0], PositionEvent)
    assert [e.type for e in events] == ["position", "reset"]


def test_parse_events_reports_the_bad_line():
    with pytest.raises(ValueError, match="line 2"):
        parse_events(['{"type": "reset"}', '{"type": "teleport"}'])


def test_replay_drives_the_session_and_closes_it():
    events = parse_events(
        [
            '{"type": "position", "latitude": 35.0, "longitude": 139.0}',
            '{"type": "heading", "degrees": 90}',
            '{"type": "select", "name": "B"}',
            '{"type": "position", "latitude": 35.0005, "longitude": 139.0}',
            '{"type": "position_error"}',
            '{"type": "position", "latitude": 35.0095, "longitude": 139.0}',
            '{"type": "reset"}',
        ]
    )
    session = CompassSession((A, B), settings=get_settings())

    readings = [reading for _, reading in replay(session, events)]

    assert readings[0].result.station == A
    assert readings[1].display_angle == pytest.approx(270)
    assert readings[2].selection_mode is SelectionMode.MANUAL
    assert readings[3].result.station == B
    assert readings[4].advisory == get_settings().messages.position_failed
    assert readings[5].advisory is None
    assert readings[5].result.station == B
    assert readings[6].selection_mode is SelectionMode.NEAREST
    assert readings[6].status is ReadingStatus.READY
    assert session.closed


def test_bundled_sample_log_parses():
    events = read_events("data/samples/walk_tokyo.jsonl")
    assert events[0].type == "position"
    assert any(e.type == "select" for e in events)
