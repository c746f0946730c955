"""Geospatial helpers. Distances are meters end-to-end."""
from __future__ import annotations

import math
from typing import Any, Dict

EARTH_RADIUS_M = 6371000.0
METERS_PER_DEGREE_LAT = 111000.0


def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lng2 - lng1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def distance(a: Any, b: Any) -> float:
    """Great-circle meters between two objects exposing ``lat`` and ``lng``."""
    return haversine_m(a.lat, a.lng, b.lat, b.lng)


def bbox_around(lat: float, lng: float, radius_m: float) -> Dict[str, float]:
    # Padded by 1% so the radius circle always fits inside the box.
    delta_lat = radius_m / METERS_PER_DEGREE_LAT * 1.01
    cos_lat = max(0.01, math.cos(math.radians(lat)))
    delta_lng = radius_m / (METERS_PER_DEGREE_LAT * cos_lat) * 1.01
    return {
        "lat_min": lat - delta_lat,
        "lat_max": lat + delta_lat,
        "lng_min": lng - delta_lng,
        "lng_max": lng + delta_lng,
    }


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_distance(meters: float) -> str:
    if not math.isfinite(meters):
        return "-"
    if meters < 1000:
        return f"{_round_half_up(meters)}m"
    km = meters / 1000
    if km < 10:
        return f"{km:.1f}km"
    return f"{_round_half_up(km)}km"
