"""Persisted set of favorited place ids."""
from __future__ import annotations

import json
import logging
from typing import Callable, FrozenSet, List, Optional

from . import config
from .storage import KeyValueStore, MemoryKeyValueStore, StorageError

logger = logging.getLogger(__name__)


class FavoritesStore:
    """Favorites backed by a key-value store.

    Every read goes through the store so writes made by another session show
    up on the next read; the last writer wins. When the store fails, the
    favorites fall back to memory for the rest of the session.
    """

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        key: str = config.FAVORITES_KEY,
        on_change: Optional[Callable[[FrozenSet[str]], None]] = None,
    ) -> None:
        self.key = key
        self.on_change = on_change
        self._store: KeyValueStore = store if store is not None else MemoryKeyValueStore()
        self._ids: List[str] = []
        self.degraded = False
        self.refresh()
        try:
            self._store.subscribe(self.key, self._on_external_change)
        except StorageError as exc:
            self._degrade(exc)

    def _degrade(self, exc: Exception) -> None:
        if not self.degraded:
            logger.warning("Favorites storage unavailable, keeping them in memory: %s", exc)
        self.degraded = True

    def _decode(self, raw: Optional[str]) -> List[str]:
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring corrupt favorites value under key %r", self.key)
            return list(self._ids)
        if not isinstance(data, list):
            logger.warning("Ignoring non-list favorites value under key %r", self.key)
            return list(self._ids)
        ids: List[str] = []
        for item in data:
            item = str(item)
            if item not in ids:
                ids.append(item)
        return ids

    def refresh(self) -> List[str]:
        if not self.degraded:
            try:
                self._ids = self._decode(self._store.get(self.key))
            except StorageError as exc:
                self._degrade(exc)
        return list(self._ids)

    def _write(self, ids: List[str]) -> None:
        self._ids = ids
        if self.degraded:
            return
        try:
            self._store.set(self.key, json.dumps(ids, ensure_ascii=False))
        except StorageError as exc:
            self._degrade(exc)

    def _on_external_change(self, _key: str, value: Optional[str]) -> None:
        if self.degraded:
            return
        self._ids = self._decode(value)
        if self.on_change:
            self.on_change(frozenset(self._ids))

    def toggle(self, place_id: str) -> bool:
        """Flip membership of ``place_id``; returns the new membership."""
        ids = self.refresh()
        if place_id in ids:
            ids.remove(place_id)
            now_favorite = False
        else:
            ids.append(place_id)
            now_favorite = True
        self._write(ids)
        return now_favorite

    def contains(self, place_id: str) -> bool:
        return place_id in self.refresh()

    def snapshot(self) -> FrozenSet[str]:
        return frozenset(self.refresh())

    def ids(self) -> List[str]:
        return self.refresh()
