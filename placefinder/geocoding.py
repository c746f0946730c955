"""Address geocoding for spreadsheet ingestion."""
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional, Protocol, Tuple

import requests

from . import config
from .http import HttpClient
from .models import Coordinates, is_valid_coordinate

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    def geocode(self, address: str) -> Optional[Coordinates]:
        ...


class StaticGeocoder:
    """Resolves addresses from a fixed mapping; unknown addresses resolve to None."""

    def __init__(self, table: Mapping[str, Tuple[float, float]]) -> None:
        self.table = dict(table)
        self.calls = 0

    def geocode(self, address: str) -> Optional[Coordinates]:
        self.calls += 1
        hit = self.table.get(address)
        if hit is None:
            return None
        return Coordinates(float(hit[0]), float(hit[1]))


class NaverGeocoder:
    def __init__(
        self,
        http_client: HttpClient,
        url: Optional[str] = None,
    ) -> None:
        self.http = http_client
        self.url = url or config.NAVER_GEOCODE_URL

    @classmethod
    def from_env(cls) -> "NaverGeocoder":
        client_id = (os.environ.get(config.NAVER_CLIENT_ID_ENV) or "").strip()
        client_secret = (os.environ.get(config.NAVER_CLIENT_SECRET_ENV) or "").strip()
        if not client_id or not client_secret:
            raise ValueError(
                f"{config.NAVER_CLIENT_ID_ENV} and {config.NAVER_CLIENT_SECRET_ENV} are required for geocoding"
            )
        http_client = HttpClient(
            headers={
                "X-NCP-APIGW-API-KEY-ID": client_id,
                "X-NCP-APIGW-API-KEY": client_secret,
            },
            timeout=config.HTTP_TIMEOUT_SECONDS,
            retry_max=config.HTTP_RETRY_MAX,
            backoff_base=config.HTTP_BACKOFF_BASE,
            backoff_max=config.HTTP_BACKOFF_MAX,
        )
        return cls(http_client)

    def geocode(self, address: str) -> Optional[Coordinates]:
        try:
            response = self.http.get_json(self.url, params={"query": address})
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Geocoding failed for %r: %s", address, exc)
            return None
        return parse_geocode_response(response)


def parse_geocode_response(response: Dict[str, Any]) -> Optional[Coordinates]:
    addresses = response.get("addresses") or []
    if not addresses:
        return None
    first = addresses[0]
    # Naver returns x as longitude and y as latitude, both as strings.
    lat, lng = first.get("y"), first.get("x")
    if not is_valid_coordinate(lat, lng):
        return None
    return Coordinates(float(lat), float(lng))
