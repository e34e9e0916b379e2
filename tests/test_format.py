import math

from stationcompass.display.format import format_angle, format_distance


def test_format_distance_switches_to_km_at_1000m():
    assert format_distance(999) == "999m"
    assert format_distance(1000) == "1.0km"
    assert format_distance(1500) == "1.5km"


def test_format_distance_checks_the_km_threshold_before_rounding():
    assert format_distance(999.6) == "1000m"


def test_format_distance_rounds_meters_half_up():
    assert format_distance(0.5) == "1m"
    assert format_distance(12.4) == "12m"


def test_format_distance_unavailable():
    assert format_distance(math.nan) == "--"
    assert format_distance(math.inf, unavailable="n/a") == "n/a"


def test_format_angle():
    assert format_angle(45.4) == "45° (北=0°)"
    assert format_angle(359.6) == "0° (北=0°)"
    assert format_angle(math.nan) == "--"
