"""In-memory place collection with id-based deduplication."""
from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, List, Optional

from .models import Place

logger = logging.getLogger(__name__)


class PlaceRepository:
    def __init__(self, places: Optional[Iterable[Place]] = None) -> None:
        self._places: List[Place] = []
        self._by_id: Dict[str, Place] = {}
        if places is not None:
            self.add_places(places)

    def add_places(self, new_places: Iterable[Place]) -> List[Place]:
        """Append places whose id is not yet known; first write wins."""
        added: List[Place] = []
        duplicates = 0
        for place in new_places:
            if place.id in self._by_id:
                duplicates += 1
                continue
            self._by_id[place.id] = place
            self._places.append(place)
            added.append(place)
        if duplicates:
            logger.info("Skipped %s places with existing ids", duplicates)
        return added

    def list(self) -> List[Place]:
        return list(self._places)

    def get(self, place_id: str) -> Optional[Place]:
        return self._by_id.get(place_id)

    def __contains__(self, place_id: object) -> bool:
        return place_id in self._by_id

    def __len__(self) -> int:
        return len(self._places)

    def __iter__(self) -> Iterator[Place]:
        return iter(list(self._places))
