from urllib.parse import parse_qs, quote, urlsplit

from conftest import make_place

from placefinder import config
from placefinder.links import naver_app_route_url, naver_web_directions_url, tel_url
from placefinder.seed import seed_places


def test_app_route_url_carries_destination_and_app_name():
    place = seed_places()[0]
    url = naver_app_route_url(place)
    assert url.startswith("nmap://route/car?")
    query = parse_qs(urlsplit(url).query)
    assert query["dlat"] == ["37.4999"]
    assert query["dlng"] == ["127.0366"]
    assert query["dname"] == ["강남 건설자원"]
    assert query["appname"] == [config.DIRECTIONS_APP_NAME]
    assert "+" not in url
    assert "%20" in url


def test_app_route_url_accepts_custom_app_name():
    url = naver_app_route_url(seed_places()[0], app_name="com.example.finder")
    assert url.endswith("appname=com.example.finder")


def test_web_directions_url():
    place = seed_places()[2]
    url = naver_web_directions_url(place)
    assert url == (
        "https://map.naver.com/v5/directions/-/-/-/car"
        f"?c=127.0265,37.508,15,0,0,0,dh&destination={quote('논현 골재상사')}"
    )


def test_tel_url_strips_dashes():
    assert tel_url(seed_places()[6]) == "tel:050713709844"
    assert tel_url(make_place("x", tel=None)) is None
