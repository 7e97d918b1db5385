"""
Commander name search.

Three kinds of lookup over a RecordStore:

- refilter: letter-by-letter prefix narrowing for the picker
- fuzzy_search: substring or near-miss matching, cached per query
- closest_match: the single nearest name, if it is close enough
"""

import logging

from fetchr.config import MAX_FUZZY_DISTANCE, settings
from fetchr.models.commander import Commander
from fetchr.services.names import levenshtein_distance, normalize_query
from fetchr.services.record_store import RecordStore, sort_key
from fetchr.services.search_cache import SearchCache

logger = logging.getLogger(__name__)


class SearchEngine:
    """Search queries bound to one RecordStore."""

    def __init__(
        self,
        store: RecordStore,
        cache: SearchCache[Commander] | None = None,
        max_fuzzy_distance: int = MAX_FUZZY_DISTANCE,
    ) -> None:
        self.store = store
        self.cache = cache or SearchCache(eviction=settings.search_cache_eviction)
        self.max_fuzzy_distance = max_fuzzy_distance
        store.on_reload(self.cache.clear)

    def refilter(self, buffer: str, partner_only: bool = False) -> tuple[Commander, ...]:
        """
        Commanders whose name starts with `buffer`, ignoring case.

        Only the index group for the buffer's first letter is scanned, and the
        group's sort order is kept. With partner_only, the partner-eligible
        index is used instead of the full one.
        """
        if not buffer:
            return ()

        index = self.store.partner_eligible_index() if partner_only else self.store.letters_index()
        candidates = index.get(buffer[0].upper(), ())
        prefix = buffer.lower()

        results: list[Commander] = []
        for name in candidates:
            if name.lower().startswith(prefix):
                record = self.store.record_by_name(name)
                if record is not None:
                    results.append(record)
        return tuple(results)

    def fuzzy_search(self, query: str) -> tuple[Commander, ...]:
        """
        Commanders loosely matching `query`.

        A name matches when either string contains the other, or when the
        edit distance between them is at most max_fuzzy_distance. Results are
        sorted by name and cached under the normalized query.
        """
        cleaned = normalize_query(query)
        if not cleaned:
            return ()

        cached = self.cache.get(cleaned)
        if cached is not None:
            return cached

        matches = [
            record
            for record in self.store.records()
            if self._is_fuzzy_match(cleaned, record.name.lower())
        ]
        results = tuple(sorted(matches, key=lambda r: sort_key(r.name)))

        self.cache.put(cleaned, results)
        logger.debug("Fuzzy search %r matched %d commanders", cleaned, len(results))
        return results

    def _is_fuzzy_match(self, query: str, name: str) -> bool:
        if query in name or name in query:
            return True
        # Cheap length check before the quadratic distance
        if abs(len(query) - len(name)) > self.max_fuzzy_distance:
            return False
        return levenshtein_distance(name, query) <= self.max_fuzzy_distance

    def closest_match(self, query: str) -> Commander | None:
        """
        The commander whose name is nearest to `query` by edit distance.

        Returns None unless the best distance is at most half the query length.
        """
        cleaned = normalize_query(query)
        if not cleaned:
            return None

        best: Commander | None = None
        best_distance: int | None = None
        for record in self.store.records():
            distance = levenshtein_distance(cleaned, record.name.lower())
            if best_distance is None or distance < best_distance:
                best = record
                best_distance = distance

        if best is None or best_distance is None:
            return None
        if best_distance > len(cleaned) // 2:
            logger.debug("No close match for %r (best distance %d)", cleaned, best_distance)
            return None
        return best
