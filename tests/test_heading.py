import math

import pytest

from stationcompass.features.heading import (
    COMPASS_LABELS,
    DisplayMode,
    direction_label,
    display_angle,
    display_mode,
    normalize_deg,
    relative_angle,
)


@pytest.mark.parametrize(
    "value, expected",
    [(0, 0), (360, 0), (720, 0), (-90, 270), (-450, 270), (45.5, 45.5), (359.5, 359.5)],
)
def test_normalize_deg(value, expected):
    assert normalize_deg(value) == pytest.approx(expected)


def test_normalize_deg_never_returns_360_for_tiny_negatives():
    assert normalize_deg(-1e-15) < 360


def test_relative_angle():
    assert relative_angle(90, 45) == 45
    assert relative_angle(10, 350) == 20
    assert relative_angle(350, 10) == 340


def test_display_angle_with_heading_is_relative():
    assert display_angle(90, 45) == 45
    assert display_angle(90, 45) == normalize_deg(90 - 45)


def test_display_angle_without_heading_falls_back_to_north():
    assert display_angle(-30, None) == 330
    assert display_mode(None) is DisplayMode.NORTH
    assert display_mode(0.0) is DisplayMode.DEVICE


def test_principal_direction_labels():
    assert direction_label(0) == "北"
    assert direction_label(90) == "東"
    assert direction_label(180) == "南"
    assert direction_label(270) == "西"


@pytest.mark.parametrize(
    "degrees, expected",
    [
        (11.25, "北"),  # 0.5 sectors rounds to even (0)
        (11.26, "北北東"),
        (33.75, "北東"),  # 1.5 sectors rounds to even (2)
        (56.25, "北東"),  # 2.5 sectors rounds to even (2)
        (348.75, "北"),  # 15.5 sectors rounds to 16, wraps to 0
        (337.5, "北北西"),
        (-45, "北西"),
        (405, "北東"),
    ],
)
def test_direction_label_boundaries(degrees, expected):
    assert direction_label(degrees) == expected


def test_every_sector_center_maps_to_its_label():
    for i, label in enumerate(COMPASS_LABELS):
        assert direction_label(i * 22.5) == label


def test_direction_label_for_non_finite_angle_is_none():
    assert direction_label(math.nan) is None
    assert direction_label(math.inf) is None
