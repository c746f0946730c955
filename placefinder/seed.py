"""Built-in sample places."""
from __future__ import annotations

import random
from typing import List, Optional

from . import config
from .models import Place

SEED_PLACES: List[Place] = [
    Place(
        id="1",
        name="강남 건설자원",
        address="서울 강남구 역삼동",
        region="서울",
        category=config.CATEGORY_ASSOCIATION,
        representative="홍길동",
        tel="02-123-4567",
        lat=37.4999,
        lng=127.0366,
    ),
    Place(
        id="2",
        name="삼성 레미콘",
        address="서울 강남구 삼성동",
        region="서울",
        category=config.CATEGORY_READY_MIX,
        representative="김철수",
        tel="02-234-5678",
        lat=37.5125,
        lng=127.0587,
    ),
    Place(
        id="3",
        name="논현 골재상사",
        address="서울 강남구 논현동",
        region="서울",
        category=config.CATEGORY_AGGREGATE,
        representative="이영희",
        tel="02-345-6789",
        aggregate_type="모래",
        lat=37.5080,
        lng=127.0265,
    ),
    Place(
        id="4",
        name="경기 건설자원",
        address="경기도 성남시 분당구",
        region="경기",
        category=config.CATEGORY_ASSOCIATION,
        representative="박지성",
        tel="031-123-4567",
        lat=37.3500,
        lng=127.1086,
    ),
    Place(
        id="5",
        name="인천 레미콘",
        address="인천광역시 연수구",
        region="인천",
        category=config.CATEGORY_READY_MIX,
        representative="최민수",
        tel="032-234-5678",
        lat=37.4056,
        lng=126.6776,
    ),
    Place(
        id="6",
        name="부산 골재상사",
        address="부산광역시 해운대구",
        region="부산",
        category=config.CATEGORY_AGGREGATE,
        representative="이영자",
        tel="051-345-6789",
        aggregate_type="자갈",
        lat=35.1631,
        lng=129.1639,
    ),
    Place(
        id="7",
        name="산본역",
        address="경기도 군포시 번영로 504",
        region="경기",
        category=config.CATEGORY_READY_MIX,
        representative="이영자",
        tel="0507-1370-9844",
        lat=37.358019,
        lng=126.932969,
    ),
]


def seed_places() -> List[Place]:
    return list(SEED_PLACES)


def generate_sample_places(count: int, rng: Optional[random.Random] = None) -> List[Place]:
    """Random places around central Seoul, for load and UI testing."""
    rng = rng or random.Random()
    places: List[Place] = []
    for i in range(count):
        category = rng.choice(config.PLACE_CATEGORIES)
        region = rng.choice(config.PLACE_REGIONS)
        aggregate_type = None
        if category == config.CATEGORY_AGGREGATE:
            aggregate_type = "모래" if rng.random() > 0.5 else "자갈"
        places.append(
            Place(
                id=f"sample-{i}",
                name=f"샘플 업체 {i + 1}",
                address=f"{region} 테스트구 샘플로 {i + 1}",
                region=region,
                category=category,
                representative=f"홍길동{i}",
                tel=f"02-123-{1000 + i}",
                aggregate_type=aggregate_type,
                lat=37.5 + (rng.random() - 0.5) * 0.2,
                lng=127.0 + (rng.random() - 0.5) * 0.2,
            )
        )
    return places
