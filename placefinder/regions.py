"""Map free-text Korean addresses to region labels."""
from __future__ import annotations

from typing import List, Tuple

from . import config

# Priority order follows config.REGIONS. Within a region, longer variants
# come first so "경상남도" is tried before any shorter spelling.
REGION_VARIANTS: List[Tuple[str, Tuple[str, ...]]] = [
    ("서울", ("서울특별시", "서울시", "서울")),
    ("인천", ("인천광역시", "인천시", "인천")),
    ("경기", ("경기도", "경기")),
    ("강원", ("강원특별자치도", "강원도", "강원")),
    ("부산", ("부산광역시", "부산시", "부산")),
    ("울산", ("울산광역시", "울산시", "울산")),
    ("경남", ("경상남도", "경남")),
    ("대구", ("대구광역시", "대구시", "대구")),
    ("경북", ("경상북도", "경북")),
    ("대전", ("대전광역시", "대전시", "대전")),
    ("세종", ("세종특별자치시", "세종시", "세종")),
    ("충남", ("충청남도", "충남")),
    ("충북", ("충청북도", "충북")),
    ("광주", ("광주광역시", "광주시", "광주")),
    ("전남", ("전라남도", "전남")),
    ("전북", ("전북특별자치도", "전라북도", "전북")),
    ("제주", ("제주특별자치도", "제주도", "제주")),
]


def resolve_region(address: str) -> str:
    text = (address or "").strip()
    if not text:
        return config.DEFAULT_REGION
    for region, variants in REGION_VARIANTS:
        for variant in variants:
            if text.startswith(variant):
                return region
    return config.DEFAULT_REGION
