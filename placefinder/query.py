"""Place filtering and geospatial query engine.

``evaluate`` is a pure function of its inputs: the caller decides when to
re-run it (after every repository, filter, favorites or location change).
"""
from __future__ import annotations

import logging
from typing import AbstractSet, Iterable, List, Optional, Tuple

from . import config
from .geo import haversine_m
from .models import Coordinates, Place, PlaceFilter, PlaceWithDistance, SpatialContext

logger = logging.getLogger(__name__)


def spatial_context_for(place_filter: PlaceFilter, user_location: Coordinates) -> SpatialContext:
    """Reference point for a filter: the user in radius mode, the map center in viewport mode."""
    if place_filter.search_mode == config.SEARCH_MODE_VIEWPORT and place_filter.map_bounds:
        return SpatialContext(reference=place_filter.map_bounds.center())
    return SpatialContext(reference=user_location)


def place_distance_m(place: Place, reference: Coordinates) -> float:
    return haversine_m(reference.lat, reference.lng, place.lat, place.lng)


def normalize_keyword(keyword: Optional[str]) -> str:
    return (keyword or "").strip().casefold()


def matches_keyword(place: Place, keyword: str) -> bool:
    """Case-insensitive substring match on name, address or representative."""
    if not keyword:
        return True
    for text in (place.name, place.address, place.representative or ""):
        if keyword in text.casefold():
            return True
    return False


def _matches_attributes(
    place: Place,
    place_filter: PlaceFilter,
    keyword: str,
    favorites: AbstractSet[str],
) -> bool:
    if place_filter.region != config.ALL_REGIONS and place.region != place_filter.region:
        return False
    if place.category not in place_filter.categories:
        return False
    if not matches_keyword(place, keyword):
        return False
    if place_filter.favorites_only and place.id not in favorites:
        return False
    return True


def filter_places(
    places: Iterable[Place],
    place_filter: PlaceFilter,
    context: SpatialContext,
    favorites: Optional[AbstractSet[str]] = None,
) -> List[Tuple[Place, float]]:
    """Apply every predicate; returns (place, distance_m) pairs in input order."""
    if not place_filter.categories:
        return []

    favorites = favorites if favorites is not None else frozenset()
    keyword = normalize_keyword(place_filter.keyword)
    viewport = place_filter.search_mode == config.SEARCH_MODE_VIEWPORT
    bounds = place_filter.map_bounds if viewport else None
    if viewport and bounds is None:
        logger.debug("Viewport search without bounds; no spatial restriction applied")
    if not viewport and place_filter.radius <= 0:
        return []

    kept: List[Tuple[Place, float]] = []
    for place in places:
        if not _matches_attributes(place, place_filter, keyword, favorites):
            continue
        dist_m = place_distance_m(place, context.reference)
        if viewport:
            if bounds is not None and not bounds.contains(place.lat, place.lng):
                continue
        elif not dist_m <= place_filter.radius:
            # NaN distances never satisfy the radius.
            continue
        kept.append((place, dist_m))
    return kept


def evaluate(
    places: Iterable[Place],
    place_filter: PlaceFilter,
    context: SpatialContext,
    favorites: Optional[AbstractSet[str]] = None,
) -> List[PlaceWithDistance]:
    """Filtered places, nearest first, each annotated with its distance in meters."""
    favorites = favorites if favorites is not None else frozenset()
    kept = filter_places(places, place_filter, context, favorites)
    # list.sort is stable, so equal distances keep repository order.
    kept.sort(key=lambda item: item[1])
    return [
        PlaceWithDistance(place=place, distance_m=dist_m, is_favorite=place.id in favorites)
        for place, dist_m in kept
    ]
