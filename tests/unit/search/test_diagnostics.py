"""
Tests for search setup diagnostics and the search monitor.
"""

from catalog_search.search import InMemoryCatalogStore, SearchMonitor, SearchOutcome, SearchSetupStatus, diagnose
from catalog_search.search.diagnostics import recommend


def test_ready_catalog(catalog):
    report = diagnose(InMemoryCatalogStore(catalog))
    assert report.ready
    assert report.recommendations == []
    assert report.to_dict()["ready"] is True


def test_unbuilt_catalog(catalog):
    report = diagnose(InMemoryCatalogStore(catalog, searchable=False), sample_size=1)
    assert not report.ready
    assert any("search_vector column is missing" in r for r in report.recommendations)
    assert len(report.sample_products) == 1


def test_recommendations_for_empty_projection():
    status = SearchSetupStatus(
        search_vector_column_exists=True,
        search_vector_index_exists=False,
        total_products=0,
        active_products=0,
        products_with_search_vector=0,
    )
    recommendations = recommend(status)
    assert len(recommendations) == 3
    assert any("empty" in r for r in recommendations)
    assert any("No active products" in r for r in recommendations)


def test_monitor_separates_unavailable_from_no_results():
    monitor = SearchMonitor(max_history=2)
    monitor.record(SearchOutcome.NO_RESULTS, 5.0, query="x")
    monitor.record(SearchOutcome.UNAVAILABLE, 3.0, query="y")
    monitor.record(SearchOutcome.RESULTS, 12.0, query="z", total=4)

    stats = monitor.get_stats()
    assert stats["searches"] == 3
    assert stats["outcomes"]["unavailable"] == 1
    assert stats["outcomes"]["no_results"] == 1
    assert stats["latency_ms"]["max"] == 12.0
    assert len(monitor.metrics) == 2

    monitor.reset()
    assert monitor.get_stats()["searches"] == 0
