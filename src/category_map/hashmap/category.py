from __future__ import annotations

import logging
import threading
from collections.abc import Hashable
from dataclasses import dataclass, field

from .base import CategoryLookup, DescendantQuery

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _KeyLock:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class DataCategoryHashMap:
    """Holds, per category id, the ids of that category and all of its descendants.

    Entries are computed lazily on first access and kept until ``reset_data``.
    Concurrent first access to the same id computes the entry once; a failed
    computation stores nothing. A reset that lands while an entry is loading
    keeps the loaded result out of the map.
    """

    def __init__(
        self,
        *,
        category_lookup: CategoryLookup,
        descendant_query: DescendantQuery,
    ) -> None:
        self.category_lookup = category_lookup
        self.descendant_query = descendant_query
        self._hash_map: dict[int, tuple[int, ...]] = {}
        self._key_locks: dict[int, _KeyLock] = {}
        self._pending: dict[int, object] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._hash_map)

    def has_data(self, category_id: int) -> bool:
        with self._lock:
            return category_id in self._hash_map

    def get_all_data(self, category_id: int) -> list[int]:
        with self._lock:
            cached = self._hash_map.get(category_id)
            if cached is not None:
                logger.debug("category_map hit category_id=%s", category_id)
                return list(cached)
            key_lock = self._key_locks.get(category_id)
            if key_lock is None:
                key_lock = self._key_locks[category_id] = _KeyLock()
            key_lock.users += 1

        try:
            with key_lock.lock:
                with self._lock:
                    cached = self._hash_map.get(category_id)
                    if cached is None:
                        token = self._pending[category_id] = object()
                if cached is not None:
                    return list(cached)

                try:
                    children_ids = self._load_children_ids(category_id)
                    with self._lock:
                        if self._pending.get(category_id) is token:
                            self._hash_map[category_id] = children_ids
                        else:
                            logger.info(
                                "category_map discard category_id=%s reason=reset_during_load",
                                category_id,
                            )
                finally:
                    with self._lock:
                        if self._pending.get(category_id) is token:
                            del self._pending[category_id]
                return list(children_ids)
        finally:
            with self._lock:
                key_lock.users -= 1
                if key_lock.users == 0 and self._key_locks.get(category_id) is key_lock:
                    del self._key_locks[category_id]

    def get_data(self, category_id: int, key: Hashable) -> list[int]:
        """Return ``[id]`` for the populated slot ``key`` of the cached list, else ``[]``."""
        children_ids = self.get_all_data(category_id)
        if isinstance(key, bool) or not isinstance(key, int):
            return []
        if 0 <= key < len(children_ids):
            return [children_ids[key]]
        return []

    def reset_data(self, category_id: int) -> None:
        with self._lock:
            removed = self._hash_map.pop(category_id, None)
            interrupted = self._pending.pop(category_id, None)
        if removed is not None or interrupted is not None:
            logger.info("category_map reset category_id=%s", category_id)

    def _load_children_ids(self, category_id: int) -> tuple[int, ...]:
        logger.info("category_map miss category_id=%s", category_id)
        category = self.category_lookup.get(category_id)
        children_ids = tuple(self.descendant_query.find_ids_by_path_prefix(category.path))
        logger.info(
            "category_map loaded category_id=%s path=%s count=%d",
            category_id,
            category.path,
            len(children_ids),
        )
        return children_ids
