import pytest
import requests

from placefinder import config, http
from placefinder.geocoding import NaverGeocoder, parse_geocode_response
from placefinder.http import HttpClient
from placefinder.models import Coordinates


class FakeResponse:
    def __init__(self, status_code, payload=None, headers=None):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


GEOCODE_OK = {
    "status": "OK",
    "meta": {"totalCount": 1},
    "addresses": [{"roadAddress": "서울특별시 중구 세종대로 110", "x": "126.9783882", "y": "37.5666103"}],
}


@pytest.fixture
def no_sleep(monkeypatch):
    sleeps = []
    monkeypatch.setattr(http.time, "sleep", sleeps.append)
    return sleeps


def client_with(responses, **kwargs):
    client = HttpClient(headers={"X-NCP-APIGW-API-KEY-ID": "id"}, backoff_base=0.1, **kwargs)
    client.session = FakeSession(responses)
    return client


def test_retries_retryable_status_then_succeeds(no_sleep):
    client = client_with([FakeResponse(503), FakeResponse(200, {"ok": True})])
    assert client.get_json("https://example.test/geocode", params={"query": "x"}) == {"ok": True}
    assert len(client.session.calls) == 2
    assert len(no_sleep) == 1
    call = client.session.calls[0]
    assert call["params"] == {"query": "x"}
    assert call["headers"]["X-NCP-APIGW-API-KEY-ID"] == "id"
    assert call["headers"]["Accept"] == "application/json"


def test_retry_after_header_is_honored(no_sleep):
    client = client_with([FakeResponse(429, headers={"Retry-After": "2"}), FakeResponse(200, {})])
    client.get_json("https://example.test")
    assert no_sleep == [2.0]


def test_gives_up_after_retry_max(no_sleep):
    client = client_with([FakeResponse(500)] * 3, retry_max=3)
    with pytest.raises(requests.HTTPError):
        client.get_json("https://example.test")
    assert len(client.session.calls) == 3


def test_non_retryable_status_raises_immediately(no_sleep):
    client = client_with([FakeResponse(401)])
    with pytest.raises(requests.HTTPError):
        client.get_json("https://example.test")
    assert no_sleep == []


def test_connection_errors_are_retried(no_sleep):
    client = client_with([requests.ConnectionError("reset"), FakeResponse(200, {"ok": 1})])
    assert client.get_json("https://example.test") == {"ok": 1}


def test_naver_geocoder_parses_first_address(no_sleep):
    geocoder = NaverGeocoder(client_with([FakeResponse(200, GEOCODE_OK)]), url="https://example.test/geocode")
    coords = geocoder.geocode("서울특별시 중구 세종대로 110")
    assert coords == Coordinates(37.5666103, 126.9783882)
    assert geocoder.http.session.calls[0]["params"] == {"query": "서울특별시 중구 세종대로 110"}


def test_naver_geocoder_returns_none_on_failure(no_sleep):
    failing = NaverGeocoder(client_with([FakeResponse(401)]))
    assert failing.geocode("anything") is None
    broken = NaverGeocoder(client_with([FakeResponse(200, None)]))
    assert broken.geocode("anything") is None


def test_parse_geocode_response_handles_empty_and_bad_values():
    assert parse_geocode_response({"addresses": []}) is None
    assert parse_geocode_response({}) is None
    assert parse_geocode_response({"addresses": [{"x": "abc", "y": "37.5"}]}) is None


def test_from_env_requires_credentials(monkeypatch):
    monkeypatch.delenv(config.NAVER_CLIENT_ID_ENV, raising=False)
    monkeypatch.delenv(config.NAVER_CLIENT_SECRET_ENV, raising=False)
    with pytest.raises(ValueError):
        NaverGeocoder.from_env()

    monkeypatch.setenv(config.NAVER_CLIENT_ID_ENV, "cid")
    monkeypatch.setenv(config.NAVER_CLIENT_SECRET_ENV, "secret")
    geocoder = NaverGeocoder.from_env()
    assert geocoder.http.headers == {"X-NCP-APIGW-API-KEY-ID": "cid", "X-NCP-APIGW-API-KEY": "secret"}
    assert geocoder.url == config.NAVER_GEOCODE_URL
