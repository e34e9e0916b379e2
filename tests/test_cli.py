import json

from stationcompass.cli import main


def _write_catalog(tmp_path, stations):
    path = tmp_path / "stations.json"
    path.write_text(json.dumps(stations, ensure_ascii=False), encoding="utf-8")
    return str(path)


CATALOG = [
    {"name": "A", "line": "L1", "latitude": 35.001, "longitude": 139.0, "lineColor": "#111111"},
    {"name": "B", "line": "L1", "latitude": 35.01, "longitude": 139.0, "lineColor": "#222222"},
]


def test_cli_nearest_prints_station_distance_and_reference(tmp_path, capsys):
    catalog = _write_catalog(tmp_path, CATALOG)

    code = main(["nearest", "--lat", "35.0", "--lon", "139.0", "--catalog", catalog])

    out = capsys.readouterr().out
    assert code == 0
    assert "A (L1)" in out
    assert "111m" in out
    assert "北基準" in out


def test_cli_nearest_json_with_heading_and_manual_station(tmp_path, capsys):
    catalog = _write_catalog(tmp_path, CATALOG)

    code = main(
        ["nearest", "--lat", "35.0", "--lon", "139.0", "--heading", "90", "--station", "B", "--catalog", catalog, "--json"]
    )

    payload = json.loads(capsys.readouterr().out)
    assert code == 0
    assert payload["station"]["name"] == "B"
    assert payload["selection_mode"] == "manual"
    assert payload["display_mode"] == "device"
    assert payload["display_angle"] == 270
    assert payload["distance_text"] == "1.1km"


def test_cli_search(tmp_path, capsys):
    catalog = _write_catalog(tmp_path, CATALOG)
    assert main(["search", "B", "--catalog", catalog, "--json"]) == 0
    names = [s["name"] for s in json.loads(capsys.readouterr().out)]
    assert names == ["B"]


def test_cli_replay_prints_one_line_per_event(tmp_path, capsys):
    catalog = _write_catalog(tmp_path, CATALOG)
    log = tmp_path / "events.jsonl"
    log.write_text(
        '{"type": "position", "latitude": 35.0, "longitude": 139.0}\n{"type": "select", "name": "B"}\n',
        encoding="utf-8",
    )

    assert main(["replay", str(log), "--catalog", catalog]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("position")
    assert "(manual)" in lines[1]


def test_cli_catalog_report_fails_on_duplicates(tmp_path, capsys):
    catalog = _write_catalog(tmp_path, CATALOG + [CATALOG[0]])
    assert main(["catalog-report", "--catalog", catalog]) == 1
    report = json.loads(capsys.readouterr().out)
    assert report["issues"][0]["code"] == "DUPLICATE_STATION"
