"""Project configuration.

Loads user-defined settings from placefinder_config.json when available,
falling back to sensible defaults. Keep regions, categories and external
endpoints centralized here.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- Domain enumerations ---

ALL_REGIONS = "전체"

REGIONS: Tuple[str, ...] = (
    ALL_REGIONS,
    "서울", "인천", "경기", "강원", "부산", "울산", "경남",
    "대구", "경북", "대전", "세종", "충남", "충북", "광주", "전남", "전북", "제주",
)
PLACE_REGIONS: Tuple[str, ...] = REGIONS[1:]

CATEGORY_ASSOCIATION = "건설자원협회"
CATEGORY_READY_MIX = "레미콘공장"
CATEGORY_AGGREGATE = "골재생산업체"
PLACE_CATEGORIES: Tuple[str, ...] = (CATEGORY_ASSOCIATION, CATEGORY_READY_MIX, CATEGORY_AGGREGATE)

SEARCH_MODE_RADIUS = "radius"
SEARCH_MODE_VIEWPORT = "viewport"
SEARCH_MODES: Tuple[str, ...] = (SEARCH_MODE_RADIUS, SEARCH_MODE_VIEWPORT)

REGION_COORDINATES: Dict[str, Dict[str, float]] = {
    "서울": {"lat": 37.5665, "lng": 126.9780},
    "인천": {"lat": 37.4563, "lng": 126.7052},
    "경기": {"lat": 37.4138, "lng": 127.5183},
    "강원": {"lat": 37.8228, "lng": 128.1555},
    "부산": {"lat": 35.1796, "lng": 129.0756},
    "울산": {"lat": 35.5384, "lng": 129.3114},
    "경남": {"lat": 35.4606, "lng": 128.2132},
    "대구": {"lat": 35.8714, "lng": 128.6014},
    "경북": {"lat": 36.4919, "lng": 128.8889},
    "대전": {"lat": 36.3504, "lng": 127.3845},
    "세종": {"lat": 36.4801, "lng": 127.2882},
    "충남": {"lat": 36.6588, "lng": 126.6728},
    "충북": {"lat": 36.6357, "lng": 127.4912},
    "광주": {"lat": 35.1595, "lng": 126.8526},
    "전남": {"lat": 34.8679, "lng": 126.9910},
    "전북": {"lat": 35.8242, "lng": 127.1480},
    "제주": {"lat": 33.4890, "lng": 126.4983},
}

# --- Search defaults (meters everywhere) ---

DEFAULT_REGION = "서울"
DEFAULT_CENTER: Dict[str, float] = {"lat": 37.5665, "lng": 126.9780}
DEFAULT_RADIUS_M = 5000
MIN_RADIUS_M = 1000
MAX_RADIUS_M = 100000
RADIUS_STEP_M = 1000

# --- Persistence ---

STORAGE_DB_PATH = "placefinder.db"
FAVORITES_KEY = "favorites"
LAST_LOCATION_KEY = "last-location"

# --- Geolocation ---

GEOLOCATION_MIN_UPDATE_INTERVAL_SECONDS = 1.0
GEOLOCATION_TIMEOUT_SECONDS = 10.0

# --- Upload / ingestion ---

UPLOAD_ALLOWED_EXTENSIONS: Tuple[str, ...] = (".xlsx", ".xls")
UPLOAD_MAX_BYTES = 10 * 1024 * 1024
AGGREGATE_TYPE_FIELD = "aggregate_type"

# --- Geocoding ---

NAVER_GEOCODE_URL = "https://naveropenapi.apigw.ntruss.com/map-geocode/v2/geocode"
NAVER_CLIENT_ID_ENV = "NAVER_MAP_CLIENT_ID"
NAVER_CLIENT_SECRET_ENV = "NAVER_MAP_CLIENT_SECRET"

# --- Directions ---

DIRECTIONS_APP_NAME = "내 주변 업체 찾기"
DIRECTIONS_WEB_ZOOM = 15

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 20
HTTP_RETRY_MAX = 5
HTTP_BACKOFF_BASE = 0.5
HTTP_BACKOFF_MAX = 8.0


def default_center() -> Tuple[float, float]:
    return DEFAULT_CENTER["lat"], DEFAULT_CENTER["lng"]


def clamp_radius(radius_m: float) -> int:
    """Snap a radius to the slider range and step used by the filter panel."""
    stepped = int(round(float(radius_m) / RADIUS_STEP_M)) * RADIUS_STEP_M
    return max(MIN_RADIUS_M, min(MAX_RADIUS_M, stepped))


def load_app_config(path: Optional[str] = None) -> bool:
    """Load settings from a JSON file.

    Updates module-level globals with values from the config file.
    Returns True if config was loaded, False if file not found.
    """
    if path is None:
        path = str(_REPO_ROOT / "placefinder_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        data: Dict[str, Any] = json.load(f)

    globals_ref = globals()

    center = data.get("default_center", {})
    center_lat = center.get("lat")
    center_lng = center.get("lng")
    if center_lat is not None and center_lng is not None:
        globals_ref["DEFAULT_CENTER"] = {"lat": float(center_lat), "lng": float(center_lng)}

    radius = data.get("default_radius_m")
    if radius is not None:
        globals_ref["DEFAULT_RADIUS_M"] = int(radius)

    storage_path = data.get("storage_db_path")
    if storage_path:
        globals_ref["STORAGE_DB_PATH"] = str(storage_path)

    interval = data.get("geolocation_min_update_interval_seconds")
    if interval is not None:
        globals_ref["GEOLOCATION_MIN_UPDATE_INTERVAL_SECONDS"] = float(interval)

    max_mb = data.get("upload_max_mb")
    if max_mb is not None:
        globals_ref["UPLOAD_MAX_BYTES"] = int(float(max_mb) * 1024 * 1024)

    geocode_url = data.get("geocode_url")
    if geocode_url:
        globals_ref["NAVER_GEOCODE_URL"] = str(geocode_url)

    http = data.get("http", {})
    if "timeout_seconds" in http:
        globals_ref["HTTP_TIMEOUT_SECONDS"] = int(http["timeout_seconds"])
    if "retry_max" in http:
        globals_ref["HTTP_RETRY_MAX"] = int(http["retry_max"])

    return True
