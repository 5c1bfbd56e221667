from __future__ import annotations

import logging

from .base import HashMap

logger = logging.getLogger(__name__)


class HashMapPool:
    """Named registry of hash maps that share one reset entry point."""

    def __init__(self, maps: dict[str, HashMap] | None = None) -> None:
        self._maps: dict[str, HashMap] = {}
        for name, hash_map in (maps or {}).items():
            self.register(name, hash_map)

    def register(self, name: str, hash_map: HashMap) -> None:
        normalized = name.strip()
        if not normalized:
            raise ValueError("hash map name must not be empty.")
        if normalized in self._maps:
            raise ValueError(f"hash map already registered: {normalized}")
        self._maps[normalized] = hash_map

    def names(self) -> list[str]:
        return list(self._maps)

    def get_data_map(self, name: str) -> HashMap:
        try:
            return self._maps[name]
        except KeyError:
            raise KeyError(f"unknown hash map: {name}") from None

    def reset_map(self, name: str, category_id: int) -> None:
        self.get_data_map(name).reset_data(category_id)

    def reset_all(self, category_id: int) -> None:
        for name, hash_map in self._maps.items():
            hash_map.reset_data(category_id)
            logger.debug("hash_map_pool reset name=%s category_id=%s", name, category_id)
