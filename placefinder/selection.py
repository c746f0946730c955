"""Single selected place for detail display."""
from __future__ import annotations

from typing import Optional

from .models import Place


class SelectionController:
    def __init__(self) -> None:
        self._selected: Optional[Place] = None

    def select(self, place: Optional[Place]) -> None:
        self._selected = place

    def clear(self) -> None:
        self._selected = None

    def current(self) -> Optional[Place]:
        return self._selected

    def is_selected(self, place_id: str) -> bool:
        return self._selected is not None and self._selected.id == place_id
