"""Browsing session: current filter, favorites, selection and location over one repository."""
from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from .favorites import FavoritesStore
from .geolocation import LocationTracker
from .models import Bounds, Place, PlaceFilter, PlaceWithDistance, SpatialContext
from .query import evaluate, spatial_context_for
from .repository import PlaceRepository
from .selection import SelectionController

logger = logging.getLogger(__name__)


class PlaceBrowser:
    def __init__(
        self,
        repository: PlaceRepository,
        favorites: FavoritesStore,
        tracker: LocationTracker,
        selection: Optional[SelectionController] = None,
        place_filter: Optional[PlaceFilter] = None,
    ) -> None:
        self.repository = repository
        self.favorites = favorites
        self.tracker = tracker
        self.selection = selection or SelectionController()
        self.filter = place_filter or PlaceFilter()

    # Filter state; every change replaces the filter value.

    def set_filter(self, place_filter: PlaceFilter) -> None:
        self.filter = place_filter

    def update_filter(self, **changes: Any) -> PlaceFilter:
        self.filter = self.filter.with_changes(**changes)
        return self.filter

    def toggle_category(self, category: str) -> PlaceFilter:
        self.filter = self.filter.toggle_category(category)
        return self.filter

    def search_viewport(self, bounds: Bounds) -> PlaceFilter:
        self.filter = self.filter.for_viewport(bounds)
        return self.filter

    def search_radius(self, radius: Optional[float] = None) -> PlaceFilter:
        self.filter = self.filter.for_radius(radius)
        return self.filter

    # Derived view

    def spatial_context(self) -> SpatialContext:
        return spatial_context_for(self.filter, self.tracker.coordinates)

    def results(self) -> List[PlaceWithDistance]:
        return evaluate(
            self.repository.list(),
            self.filter,
            self.spatial_context(),
            self.favorites.snapshot(),
        )

    # User actions

    def add_places(self, places: Iterable[Place]) -> List[Place]:
        added = self.repository.add_places(places)
        logger.info("Added %s places (repository size %s)", len(added), len(self.repository))
        return added

    def toggle_favorite(self, place_id: str) -> bool:
        return self.favorites.toggle(place_id)

    def is_favorite(self, place_id: str) -> bool:
        return self.favorites.contains(place_id)

    def select(self, place: Optional[Place]) -> None:
        self.selection.select(place)

    def selected(self) -> Optional[Place]:
        return self.selection.current()
