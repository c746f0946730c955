import math

import pytest

from placefinder.geo import bbox_around, distance, format_distance, haversine_m
from placefinder.models import Bounds, Coordinates

SEOUL = Coordinates(37.5665, 126.9780)
BUSAN = Coordinates(35.1631, 129.1639)
INCHEON = Coordinates(37.4056, 126.6776)


def test_distance_to_self_is_zero():
    assert distance(SEOUL, SEOUL) == 0.0
    assert haversine_m(35.0, 129.0, 35.0, 129.0) == 0.0


def test_distance_is_symmetric():
    assert distance(SEOUL, BUSAN) == pytest.approx(distance(BUSAN, SEOUL))
    assert distance(SEOUL, INCHEON) == pytest.approx(distance(INCHEON, SEOUL))


def test_distance_respects_triangle_inequality():
    points = [SEOUL, BUSAN, INCHEON, Coordinates(33.4890, 126.4983)]
    for a in points:
        for b in points:
            for c in points:
                assert distance(a, c) <= distance(a, b) + distance(b, c) + 1e-6


def test_distance_is_in_meters():
    d = distance(SEOUL, BUSAN)
    assert 300_000 < d < 360_000


def test_one_degree_of_latitude_is_about_111_km():
    d = haversine_m(0.0, 0.0, 1.0, 0.0)
    assert d == pytest.approx(111_195, rel=1e-3)


def test_nan_input_propagates():
    assert math.isnan(haversine_m(float("nan"), 0.0, 1.0, 1.0))


@pytest.mark.parametrize(
    "meters,label",
    [
        (0, "0m"),
        (12.4, "12m"),
        (999.4, "999m"),
        (1000, "1.0km"),
        (2345, "2.3km"),
        (9940, "9.9km"),
        (10000, "10km"),
        (12345, "12km"),
        (15600, "16km"),
        (331_000, "331km"),
        (float("nan"), "-"),
        (float("inf"), "-"),
    ],
)
def test_format_distance(meters, label):
    assert format_distance(meters) == label


def test_bbox_around_contains_radius_circle():
    center = SEOUL
    radius_m = 5000.0
    box = Bounds.around(center, radius_m)
    raw = bbox_around(center.lat, center.lng, radius_m)
    assert box.sw.lat == raw["lat_min"] and box.ne.lng == raw["lng_max"]

    steps = 40
    lat_span = 2 * radius_m / 111_000
    lng_span = 2 * radius_m / (111_000 * math.cos(math.radians(center.lat)))
    for i in range(steps + 1):
        for j in range(steps + 1):
            lat = center.lat - lat_span + i * (2 * lat_span / steps)
            lng = center.lng - lng_span + j * (2 * lng_span / steps)
            if haversine_m(center.lat, center.lng, lat, lng) <= radius_m:
                assert box.contains(lat, lng)
