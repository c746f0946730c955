"""Directions and call links for a place."""
from __future__ import annotations

from typing import Optional
from urllib.parse import quote, urlencode

from . import config
from .models import Place


def naver_app_route_url(place: Place, app_name: Optional[str] = None) -> str:
    params = {
        "dlat": place.lat,
        "dlng": place.lng,
        "dname": place.name,
        "appname": app_name or config.DIRECTIONS_APP_NAME,
    }
    return "nmap://route/car?" + urlencode(params, quote_via=quote)


def naver_web_directions_url(place: Place) -> str:
    center = f"{place.lng},{place.lat},{config.DIRECTIONS_WEB_ZOOM},0,0,0,dh"
    return (
        "https://map.naver.com/v5/directions/-/-/-/car"
        f"?c={center}&destination={quote(place.name)}"
    )


def tel_url(place: Place) -> Optional[str]:
    if not place.tel:
        return None
    return "tel:" + place.tel.replace("-", "")
