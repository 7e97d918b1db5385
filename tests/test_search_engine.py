"""Tests for commander name search."""

import pytest

from fetchr.models.commander import Commander
from fetchr.services.record_store import RecordStore
from fetchr.services.search_cache import SearchCache
from fetchr.services.search_engine import SearchEngine


def _names(records) -> list[str]:
    return [r.name for r in records]


class TestRefilter:
    def test_empty_buffer_returns_nothing(self, engine: SearchEngine) -> None:
        assert engine.refilter("") == ()
        assert engine.refilter("", partner_only=True) == ()

    def test_empty_buffer_on_empty_store(self) -> None:
        assert SearchEngine(RecordStore()).refilter("") == ()

    def test_single_letter(self, engine: SearchEngine) -> None:
        assert _names(engine.refilter("a")) == [
            "Animar, Soul of Elements",
            "Atraxa, Praetors' Voice",
        ]

    def test_narrows_as_letters_added(self, engine: SearchEngine) -> None:
        assert _names(engine.refilter("T")) == [
            "Thrasios, Triton Hero",
            "Toothy, Imaginary Friend",
            "Tymna the Weaver",
        ]
        assert _names(engine.refilter("TH")) == ["Thrasios, Triton Hero"]
        assert _names(engine.refilter("THX")) == []

    def test_case_insensitive_prefix(self, engine: SearchEngine) -> None:
        assert _names(engine.refilter("eDgAr")) == ["Edgar Markov"]

    def test_prefix_includes_spaces_and_punctuation(self, engine: SearchEngine) -> None:
        assert _names(engine.refilter("karn,")) == ["Karn, Legacy Reforged"]
        assert _names(engine.refilter("Tymna t")) == ["Tymna the Weaver"]

    @pytest.mark.parametrize("query", ["a", "At", "k", "KR", "t", "ty", "z", "Pir, I"])
    def test_results_all_start_with_query(self, engine: SearchEngine, query: str) -> None:
        """Every result has the prefix and nothing with the prefix is missing."""
        results = _names(engine.refilter(query))
        expected = [
            name for name in engine.store.names() if name.lower().startswith(query.lower())
        ]

        assert sorted(results) == sorted(expected)

    def test_partner_only_uses_partner_index(self, engine: SearchEngine) -> None:
        assert _names(engine.refilter("K", partner_only=True)) == ["Kraum, Ludevic's Opus"]
        assert _names(engine.refilter("E", partner_only=True)) == []

    def test_unknown_letter(self, engine: SearchEngine) -> None:
        assert engine.refilter("Q") == ()


class TestFuzzySearch:
    def test_substring_match(self, engine: SearchEngine) -> None:
        assert _names(engine.fuzzy_search("markov")) == ["Edgar Markov"]

    def test_query_containing_name(self, engine: SearchEngine) -> None:
        results = engine.fuzzy_search("My deck: Edgar Markov vampires")

        assert _names(results) == ["Edgar Markov"]

    def test_typo_within_distance(self) -> None:
        store = RecordStore([Commander("Zur"), Commander("Tazri")])
        engine = SearchEngine(store)

        assert _names(engine.fuzzy_search("Zor")) == ["Zur"]
        assert _names(engine.fuzzy_search("Tazry")) == ["Tazri"]

    def test_results_sorted(self, engine: SearchEngine) -> None:
        results = _names(engine.fuzzy_search("o"))

        assert results == sorted(results, key=str.casefold)
        assert len(results) > 1

    def test_normalizes_query(self, engine: SearchEngine) -> None:
        assert engine.fuzzy_search("  EDGAR  ") == engine.fuzzy_search("edgar")

    def test_empty_query(self, engine: SearchEngine) -> None:
        assert engine.fuzzy_search("   ") == ()

    def test_cache_hit_returns_same_result(self, engine: SearchEngine) -> None:
        first = engine.fuzzy_search("tymna")
        second = engine.fuzzy_search("Tymna ")

        assert first == second
        assert second is first
        assert "tymna" in engine.cache

    def test_reload_invalidates_cache(self, store: RecordStore, engine: SearchEngine) -> None:
        engine.fuzzy_search("edgar")
        store.load([Commander("Edgar, Charmed Groom")])

        assert len(engine.cache) == 0
        assert _names(engine.fuzzy_search("edgar")) == ["Edgar, Charmed Groom"]

    def test_uses_given_cache(self, store: RecordStore) -> None:
        cache: SearchCache = SearchCache(capacity=1, eviction="lru")
        engine = SearchEngine(store, cache=cache)

        engine.fuzzy_search("edgar")
        engine.fuzzy_search("tymna")

        assert "tymna" in cache
        assert "edgar" not in cache


class TestClosestMatch:
    def test_exact_name(self, engine: SearchEngine) -> None:
        match = engine.closest_match("Edgar Markov")

        assert match is not None
        assert match.name == "Edgar Markov"

    def test_typo(self, engine: SearchEngine) -> None:
        match = engine.closest_match("edgar markof")

        assert match is not None
        assert match.name == "Edgar Markov"

    def test_too_far(self, engine: SearchEngine) -> None:
        """Nothing within half the query length means no match."""
        assert engine.closest_match("zzzzzz") is None

    def test_empty_query(self, engine: SearchEngine) -> None:
        assert engine.closest_match("") is None

    def test_empty_store(self) -> None:
        assert SearchEngine(RecordStore()).closest_match("Edgar") is None

    def test_threshold_is_half_query_length(self) -> None:
        engine = SearchEngine(RecordStore([Commander("Abcd")]))

        # "abxy" is distance 2 from "abcd", half of 4
        assert engine.closest_match("abxy") is not None
        # "axyz" is distance 3
        assert engine.closest_match("axyz") is None
