import json

import pytest

from placefinder import config

_OVERRIDABLE = (
    "DEFAULT_CENTER",
    "DEFAULT_RADIUS_M",
    "STORAGE_DB_PATH",
    "GEOLOCATION_MIN_UPDATE_INTERVAL_SECONDS",
    "UPLOAD_MAX_BYTES",
    "NAVER_GEOCODE_URL",
    "HTTP_TIMEOUT_SECONDS",
    "HTTP_RETRY_MAX",
)


@pytest.fixture
def restore_config(monkeypatch):
    for name in _OVERRIDABLE:
        monkeypatch.setattr(config, name, getattr(config, name))


@pytest.mark.parametrize(
    "radius,expected",
    [(0, 1000), (-5, 1000), (1499, 1000), (1500, 2000), (5000, 5000), (7301, 7000), (250_000, 100_000)],
)
def test_clamp_radius(radius, expected):
    assert config.clamp_radius(radius) == expected


def test_regions_and_categories():
    assert config.REGIONS[0] == config.ALL_REGIONS
    assert len(config.PLACE_REGIONS) == 17
    assert config.ALL_REGIONS not in config.PLACE_REGIONS
    assert set(config.REGION_COORDINATES) == set(config.PLACE_REGIONS)
    assert config.DEFAULT_REGION in config.PLACE_REGIONS
    assert len(config.PLACE_CATEGORIES) == 3


def test_load_app_config_missing_file(tmp_path, restore_config):
    assert config.load_app_config(str(tmp_path / "absent.json")) is False
    assert config.DEFAULT_RADIUS_M == 5000


def test_load_app_config_overrides(tmp_path, restore_config):
    path = tmp_path / "placefinder_config.json"
    path.write_text(
        json.dumps(
            {
                "default_center": {"lat": 35.1796, "lng": 129.0756},
                "default_radius_m": 3000,
                "storage_db_path": "custom.db",
                "geolocation_min_update_interval_seconds": 2.5,
                "upload_max_mb": 1,
                "http": {"timeout_seconds": 5, "retry_max": 2},
            }
        ),
        encoding="utf-8",
    )
    assert config.load_app_config(str(path)) is True
    assert config.default_center() == (35.1796, 129.0756)
    assert config.DEFAULT_RADIUS_M == 3000
    assert config.STORAGE_DB_PATH == "custom.db"
    assert config.GEOLOCATION_MIN_UPDATE_INTERVAL_SECONDS == 2.5
    assert config.UPLOAD_MAX_BYTES == 1024 * 1024
    assert config.HTTP_TIMEOUT_SECONDS == 5
    assert config.HTTP_RETRY_MAX == 2
    assert config.NAVER_GEOCODE_URL.startswith("https://")


def test_partial_config_keeps_other_defaults(tmp_path, restore_config):
    path = tmp_path / "placefinder_config.json"
    path.write_text(json.dumps({"default_center": {"lat": 33.0}}), encoding="utf-8")
    assert config.load_app_config(str(path)) is True
    assert config.default_center() == (37.5665, 126.9780)
