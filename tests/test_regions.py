import pytest

from placefinder.regions import resolve_region


@pytest.mark.parametrize(
    "address,region",
    [
        ("서울특별시 중구 세종대로 110", "서울"),
        ("서울 강남구 역삼동", "서울"),
        ("인천광역시 연수구", "인천"),
        ("경기도 성남시 분당구", "경기"),
        ("경기도 광주시 오포읍", "경기"),
        ("광주광역시 북구", "광주"),
        ("강원특별자치도 춘천시", "강원"),
        ("강원도 원주시", "강원"),
        ("경상남도 창원시", "경남"),
        ("경북 포항시", "경북"),
        ("충청북도 청주시", "충북"),
        ("충남 천안시", "충남"),
        ("세종특별자치시 한누리대로", "세종"),
        ("전라남도 여수시", "전남"),
        ("전북특별자치도 전주시", "전북"),
        ("전라북도 군산시", "전북"),
        ("제주특별자치도 제주시", "제주"),
        ("부산광역시 해운대구", "부산"),
        ("울산 남구", "울산"),
        ("대구광역시 수성구", "대구"),
        ("대전 유성구", "대전"),
        ("  부산광역시 해운대구", "부산"),
    ],
)
def test_resolve_region_variants(address, region):
    assert resolve_region(address) == region


def test_resolve_region_defaults_to_capital():
    assert resolve_region("") == "서울"
    assert resolve_region(None) == "서울"
    assert resolve_region("Unknown street 1") == "서울"


def test_resolve_region_only_looks_at_the_leading_token():
    # "부산" appears later in the address but the address starts with 경남.
    assert resolve_region("경상남도 김해시 부산로 1") == "경남"
