import pytest

from placefinder import config
from placefinder.models import Coordinates, Place
from placefinder.repository import PlaceRepository
from placefinder.seed import seed_places

CITY_HALL = Coordinates(37.5665, 126.9780)


def make_place(place_id, lat=37.5665, lng=126.9780, **overrides):
    fields = {
        "id": place_id,
        "name": f"업체 {place_id}",
        "address": "서울 중구 세종대로 110",
        "region": "서울",
        "category": config.CATEGORY_ASSOCIATION,
        "lat": lat,
        "lng": lng,
    }
    fields.update(overrides)
    return Place(**fields)


@pytest.fixture
def seed_repository():
    return PlaceRepository(seed_places())
