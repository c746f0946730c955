"""Core data models shared by the query engine, ingestion and persistence."""
from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Dict, FrozenSet, Optional

from . import config
from .geo import bbox_around, format_distance


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Coordinates":
        return cls(lat=float(data["lat"]), lng=float(data["lng"]))


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned lat/lng box given by its southwest and northeast corners."""

    sw: Coordinates
    ne: Coordinates

    @classmethod
    def around(cls, center: Coordinates, radius_m: float) -> "Bounds":
        """Smallest box (with a little slack) that circumscribes a radius circle."""
        bbox = bbox_around(center.lat, center.lng, radius_m)
        return cls(
            sw=Coordinates(bbox["lat_min"], bbox["lng_min"]),
            ne=Coordinates(bbox["lat_max"], bbox["lng_max"]),
        )

    def center(self) -> Coordinates:
        return Coordinates(
            lat=(self.sw.lat + self.ne.lat) / 2,
            lng=(self.sw.lng + self.ne.lng) / 2,
        )

    def contains(self, lat: float, lng: float) -> bool:
        # Closed box: points on the edges are inside. Inverted corners match nothing.
        return self.sw.lat <= lat <= self.ne.lat and self.sw.lng <= lng <= self.ne.lng


def is_valid_coordinate(lat: Any, lng: Any) -> bool:
    if lat is None or lng is None:
        return False
    try:
        lat_f = float(lat)
        lng_f = float(lng)
    except (TypeError, ValueError):
        return False
    if not (math.isfinite(lat_f) and math.isfinite(lng_f)):
        return False
    return -90.0 <= lat_f <= 90.0 and -180.0 <= lng_f <= 180.0


@dataclass(frozen=True)
class Place:
    """A single business record. Never mutated; updates are replacements."""

    id: str
    name: str
    address: str
    region: str
    category: str
    lat: float
    lng: float
    representative: Optional[str] = None
    tel: Optional[str] = None
    aggregate_type: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("Place id must be non-empty")
        if not self.name or not self.address:
            raise ValueError(f"Place {self.id}: name and address are required")
        if self.region not in config.PLACE_REGIONS:
            raise ValueError(f"Place {self.id}: unknown region {self.region!r}")
        if self.category not in config.PLACE_CATEGORIES:
            raise ValueError(f"Place {self.id}: unknown category {self.category!r}")
        if not is_valid_coordinate(self.lat, self.lng):
            raise ValueError(f"Place {self.id}: invalid coordinates ({self.lat}, {self.lng})")

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(self.lat, self.lng)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "region": self.region,
            "category": self.category,
            "representative": self.representative,
            "tel": self.tel,
            "lat": self.lat,
            "lng": self.lng,
            "aggregate_type": self.aggregate_type,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Place":
        aggregate_type = data.get("aggregate_type")
        if aggregate_type is None:
            aggregate_type = data.get("aggregateType")
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            address=data.get("address") or "",
            region=data.get("region") or "",
            category=data.get("category") or "",
            lat=float(data["lat"]) if data.get("lat") is not None else math.nan,
            lng=float(data["lng"]) if data.get("lng") is not None else math.nan,
            representative=data.get("representative") or None,
            tel=data.get("tel") or None,
            aggregate_type=aggregate_type or None,
        )


def _all_categories() -> FrozenSet[str]:
    return frozenset(config.PLACE_CATEGORIES)


@dataclass(frozen=True)
class PlaceFilter:
    """Query parameters, passed by value into every evaluation."""

    region: str = config.ALL_REGIONS
    categories: FrozenSet[str] = field(default_factory=_all_categories)
    keyword: Optional[str] = None
    radius: float = config.DEFAULT_RADIUS_M
    search_mode: str = config.SEARCH_MODE_RADIUS
    map_bounds: Optional[Bounds] = None
    favorites_only: bool = False

    def __post_init__(self) -> None:
        if self.search_mode not in config.SEARCH_MODES:
            raise ValueError(
                "search_mode must be one of: " + ", ".join(config.SEARCH_MODES)
            )
        if self.region not in config.REGIONS:
            raise ValueError(f"Unknown region: {self.region!r}")
        if not isinstance(self.categories, frozenset):
            object.__setattr__(self, "categories", frozenset(self.categories))

    def with_changes(self, **changes: Any) -> "PlaceFilter":
        return replace(self, **changes)

    def toggle_category(self, category: str) -> "PlaceFilter":
        if category in self.categories:
            return replace(self, categories=self.categories - {category})
        return replace(self, categories=self.categories | {category})

    def for_viewport(self, bounds: Bounds) -> "PlaceFilter":
        return replace(self, search_mode=config.SEARCH_MODE_VIEWPORT, map_bounds=bounds)

    def for_radius(self, radius: Optional[float] = None) -> "PlaceFilter":
        return replace(
            self,
            search_mode=config.SEARCH_MODE_RADIUS,
            radius=self.radius if radius is None else radius,
            map_bounds=None,
        )


@dataclass(frozen=True)
class SpatialContext:
    """Reference point used for distance annotation and ordering."""

    reference: Coordinates


@dataclass(frozen=True)
class PlaceWithDistance:
    place: Place
    distance_m: float
    is_favorite: bool = False

    @property
    def distance_label(self) -> str:
        return format_distance(self.distance_m)
