"""
Tests for the in-memory catalog store: candidate predicate and composite rank.
"""

import pytest

from catalog_search.search import InMemoryCatalogStore, SignalSet, StoreUnavailableError, analyze_query
from catalog_search.search.signals import Signal, SignalRule
from tests.conftest import make_product, variant


def ranked_ids(store, query, offset=0, limit=50, signals=None):
    return [r.id for r in store.fetch_ranked(analyze_query(query), signals or SignalSet(), offset, limit)]


def test_size_only_query_matches_stock(store):
    results = store.fetch_ranked(analyze_query("36"), SignalSet(), 0, 10)
    assert [r.id for r in results] == ["p1"]
    assert results[0].matched == frozenset({Signal.SIZE})
    assert results[0].rank == 20


def test_zero_stock_is_not_available(store):
    assert "p4" not in ranked_ids(store, "36")


def test_size_ignores_variant_active_flag(store):
    # p3's red variant is inactive but still holds size 38 stock
    assert set(ranked_ids(store, "38")) == {"p2", "p3"}


def test_hebrew_color_hits_english_slug(store):
    results = store.fetch_ranked(analyze_query("אדום"), SignalSet(), 0, 10)
    assert [r.id for r in results] == ["p2"]
    assert Signal.COLOR in results[0].matched


def test_inactive_variant_color_is_ignored(store):
    assert "p3" not in ranked_ids(store, "red")


def test_color_matches_display_name_case_insensitively():
    store = InMemoryCatalogStore([
        make_product("x", color_variants={"c-01": variant("c-01", name="BLACK")}),
    ])
    assert ranked_ids(store, "black") == ["x"]


def test_two_word_hebrew_color_hits_english_slug():
    store = InMemoryCatalogStore([
        make_product("navy", color_variants={"navy": variant("navy")}),
        make_product("red", color_variants={"red": variant("red")}),
    ])
    assert ranked_ids(store, "כחול כהה") == ["navy"]


def test_category_phrase_matches_plural_category():
    store_docs = [make_product("x", sub_category_he="כפכפים")]
    store = InMemoryCatalogStore(store_docs)
    results = store.fetch_ranked(analyze_query("כפכף"), SignalSet(), 0, 10)
    assert [r.id for r in results] == ["x"]
    assert results[0].rank == 2000


def test_category_phrase_is_case_insensitive_substring():
    store = InMemoryCatalogStore([make_product("x", sub_category="Ankle Boots")])
    assert ranked_ids(store, "boots") == ["x"]


def test_full_text_over_keywords_and_sku(store):
    assert ranked_ids(store, "beach") == ["p4"]
    assert ranked_ids(store, "SKU-p2") == ["p2"]


def test_category_text_bonus(store):
    results = store.fetch_ranked(analyze_query("נעליים"), SignalSet(), 0, 10)
    assert [r.id for r in results] == ["p1", "p2", "p3"]
    for result in results:
        assert {Signal.CATEGORY_PHRASE, Signal.FULL_TEXT, Signal.CATEGORY_TEXT} <= result.matched
        assert result.rank == pytest.approx(2000 + 300 + 1000 * 0.05)


def test_color_and_size_outrank_single_facet(store):
    results = store.fetch_ranked(analyze_query("red 38"), SignalSet(), 0, 10)
    assert [r.id for r in results] == ["p2", "p3"]
    assert results[0].rank == 520
    assert results[1].rank == 20


def test_inactive_and_deleted_never_returned(store):
    for query in ["Running sneaker", "36", "red", "sneaker 36"]:
        ids = ranked_ids(store, query)
        assert "inactive" not in ids
        assert "deleted" not in ids


def test_count_uses_same_predicate(store):
    for query in ["36", "38", "נעליים", "red 38", "nothing-here"]:
        features = analyze_query(query)
        assert store.count_candidates(features, SignalSet()) == len(ranked_ids(store, query))


def test_window_applied_after_ranking(store):
    everything = ranked_ids(store, "נעליים")
    assert ranked_ids(store, "נעליים", offset=1, limit=1) == everything[1:2]


def test_custom_signal_set_changes_candidates(store):
    sizes_only = SignalSet([SignalRule(Signal.SIZE, 1)])
    assert ranked_ids(store, "Running sneaker", signals=sizes_only) == []
    assert ranked_ids(store, "36", signals=sizes_only) == ["p1"]


def test_unbuilt_projection_is_unavailable(catalog):
    store = InMemoryCatalogStore(catalog, searchable=False)
    with pytest.raises(StoreUnavailableError):
        store.check_searchable()


def test_inspect_search_setup(store):
    status = store.inspect_search_setup(sample_size=2)
    assert status.total_products == 6
    assert status.active_products == 4
    assert status.search_vector_column_exists
    assert len(status.sample_products) == 2
    assert status.sample_products[0]["search_vector_preview"]
