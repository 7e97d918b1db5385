"""
Bounded cache for fuzzy search results.

Keys are normalized query strings, values the ordered result tuples.
Two eviction policies are supported:

- "random": when full, drop a random batch of entries (default)
- "lru": when full, drop the least recently used entry
"""

import logging
import random
from collections import OrderedDict
from typing import Generic, TypeVar

from fetchr.config import SEARCH_CACHE_EVICTION_BATCH, SEARCH_CACHE_SIZE

logger = logging.getLogger(__name__)

VALID_EVICTION_POLICIES = frozenset({"random", "lru"})

T = TypeVar("T")


class SearchCache(Generic[T]):
    """Query -> results mapping with a fixed capacity."""

    def __init__(
        self,
        capacity: int = SEARCH_CACHE_SIZE,
        eviction: str = "random",
        eviction_batch: int = SEARCH_CACHE_EVICTION_BATCH,
        rng: random.Random | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError(f"Cache capacity must be positive: {capacity}")
        if eviction not in VALID_EVICTION_POLICIES:
            raise ValueError(
                f"Invalid eviction policy: {eviction}. Must be one of {VALID_EVICTION_POLICIES}"
            )
        self.capacity = capacity
        self.eviction = eviction
        self.eviction_batch = max(1, eviction_batch)
        self._rng = rng or random.Random()
        self._entries: OrderedDict[str, tuple[T, ...]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def get(self, key: str) -> tuple[T, ...] | None:
        results = self._entries.get(key)
        if results is not None and self.eviction == "lru":
            self._entries.move_to_end(key)
        return results

    def put(self, key: str, results: tuple[T, ...]) -> None:
        if key in self._entries:
            self._entries[key] = results
            self._entries.move_to_end(key)
            return

        if len(self._entries) >= self.capacity:
            self._evict()

        self._entries[key] = results

    def clear(self) -> None:
        self._entries.clear()

    def _evict(self) -> None:
        if self.eviction == "lru":
            self._entries.popitem(last=False)
            return

        batch = min(self.eviction_batch, len(self._entries))
        for key in self._rng.sample(list(self._entries), batch):
            del self._entries[key]
        logger.debug("Evicted %d cached queries", batch)
