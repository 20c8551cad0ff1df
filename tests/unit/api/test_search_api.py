"""
Tests for the search HTTP endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from catalog_search.api.dependencies import get_catalog_store
from catalog_search.api.main import create_app
from catalog_search.config import SearchSettings, get_settings
from catalog_search.search import InMemoryCatalogStore, StoreQueryError


class FailingStore(InMemoryCatalogStore):
    def count_candidates(self, features, signals):
        raise StoreQueryError("connection lost")


@pytest.fixture
def make_client(catalog):
    def _make(store=None):
        app = create_app()
        app.dependency_overrides[get_catalog_store] = lambda: store or InMemoryCatalogStore(catalog)
        app.dependency_overrides[get_settings] = lambda: SearchSettings(parallel_count=False)
        return TestClient(app)

    return _make


def test_search(make_client):
    response = make_client().get("/api/products/search", params={"q": "36"})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 1
    assert body["page"] == 1
    assert body["limit"] == 24
    assert body["query"] == "36"
    assert [item["id"] for item in body["items"]] == ["p1"]
    assert body["items"][0]["colors"] == ["black"]
    assert body["items"][0]["sizes"] == ["36"]
    assert body["items"][0]["color_variants"]["black"]["stockBySize"] == {"36": 2, "37": 0}
    assert body["items"][0]["color_variants"]["black"]["colorName"] == "Black"
    assert body["items"][0]["category_he"] == "נעליים"
    for field in ("description_en", "sub_sub_category", "categories_path", "search_keywords", "seo_slug", "is_active"):
        assert field in body["items"][0]
    assert "X-Response-Time" in response.headers


def test_hebrew_query(make_client):
    response = make_client().get("/api/products/search", params={"q": "נעליים", "limit": "2", "page": "2"})

    body = response.json()
    assert response.status_code == 200
    assert body["total"] == 3
    assert [item["id"] for item in body["items"]] == ["p3"]


def test_missing_query_returns_empty_page(make_client):
    response = make_client().get("/api/products/search")

    assert response.status_code == 200
    assert response.json() == {"items": [], "total": 0, "page": 1, "limit": 24, "query": ""}


def test_malformed_paging_is_not_rejected(make_client):
    response = make_client().get("/api/products/search", params={"q": "36", "page": "abc", "limit": "-3"})

    assert response.status_code == 200
    body = response.json()
    assert (body["page"], body["limit"]) == (1, 24)


def test_unavailable_search_returns_empty_page(make_client, catalog):
    client = make_client(InMemoryCatalogStore(catalog, searchable=False))
    response = client.get("/api/products/search", params={"q": "36"})

    assert response.status_code == 200
    assert response.json()["items"] == []
    assert response.json()["total"] == 0


def test_store_failure_is_a_single_error(make_client, catalog):
    client = make_client(FailingStore(catalog))
    response = client.get("/api/products/search", params={"q": "36"}, headers={"X-Request-ID": "req-1"})

    assert response.status_code == 500
    error = response.json()["error"]
    assert error["type"] == "SearchError"
    assert error["details"] == {"request_id": "req-1"}
    assert "items" not in response.json()


def test_debug_report(make_client):
    response = make_client().get("/api/products/search/debug")

    assert response.status_code == 200
    body = response.json()
    assert body["ready"] is True
    assert body["total_products"] == 6
    assert body["active_products"] == 4


def test_debug_report_for_unbuilt_catalog(make_client, catalog):
    response = make_client(InMemoryCatalogStore(catalog, searchable=False)).get("/api/products/search/debug")

    body = response.json()
    assert body["ready"] is False
    assert body["recommendations"]


def test_health(make_client):
    response = make_client().get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_metrics(make_client):
    client = make_client()
    client.get("/api/products/search", params={"q": "36"})

    body = client.get("/metrics").json()
    assert body["search"]["searches"] >= 1
    assert body["requests"]["count"] >= 1


def test_overlong_query_is_rejected(make_client):
    response = make_client().get("/api/products/search", params={"q": "a" * 501})

    assert response.status_code == 400
    assert response.json()["error"]["type"] == "InvalidRequestError"


@pytest.mark.parametrize("page, limit", [("--2", "5"), ("²", "+-3"), ("-+1", "٣")])
def test_unparsable_paging_falls_back(make_client, page, limit):
    response = make_client().get("/api/products/search", params={"q": "36", "page": page, "limit": limit})

    assert response.status_code == 200
    body = response.json()
    assert body["page"] == 1
    assert body["total"] == 1
