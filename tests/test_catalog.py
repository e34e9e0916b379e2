import json

import pytest
from pydantic import ValidationError

from stationcompass.catalog.loader import load_stations, parse_stations
from stationcompass.catalog.report import build_catalog_report, station_issues
from stationcompass.config.settings import get_settings


def test_load_stations_accepts_line_color_alias(tmp_path):
    path = tmp_path / "stations.json"
    path.write_text(
        json.dumps(
            [
                {"name": "東京", "line": "JR山手線", "latitude": 35.681236, "longitude": 139.767125, "lineColor": "#9ACD32"},
                {"name": "銀座", "line": "東京メトロ銀座線", "latitude": 35.671989, "longitude": 139.763965},
            ],
            ensure_ascii=False,
        ),
        encoding="utf-8",
    )

    stations = load_stations(path)

    assert [s.name for s in stations] == ["東京", "銀座"]
    assert stations[0].line_color == "#9ACD32"
    assert stations[0].key == ("東京", "JR山手線")
    assert stations[0].position.latitude == pytest.approx(35.681236)


def test_stations_are_immutable():
    (station,) = parse_stations([{"name": "A", "line": "L", "latitude": 1, "longitude": 2}])
    with pytest.raises(ValidationError):
        station.name = "B"


def test_out_of_range_coordinates_are_rejected():
    with pytest.raises(ValidationError):
        parse_stations([{"name": "A", "line": "L", "latitude": 91, "longitude": 0}])


def test_bundled_catalog_loads():
    stations = load_stations(get_settings().catalog.path)
    assert len(stations) > 8
    assert len({s.key for s in stations}) == len(stations)


def test_station_issues_flag_duplicates_and_bad_colors():
    stations = parse_stations(
        [
            {"name": "A", "line": "L", "latitude": 1, "longitude": 2, "lineColor": "#fff"},
            {"name": "A", "line": "L", "latitude": 1.1, "longitude": 2, "lineColor": "green"},
            {"name": "Z", "line": "L", "latitude": 0, "longitude": 0, "lineColor": "#000000"},
        ]
    )
    codes = {i.code: i for i in station_issues(stations)}
    assert codes["DUPLICATE_STATION"].sample == ["A / L"]
    assert codes["LINE_COLOR_NOT_HEX"].sample == ["green"]
    assert codes["ZERO_COORDINATES"].sample == ["Z"]


def test_catalog_report_turns_load_failures_into_issues(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    report = build_catalog_report(get_settings(), path=path)

    assert report["stations"] == 0
    assert report["issues"][0]["code"] == "CATALOG_LOAD_FAILED"
