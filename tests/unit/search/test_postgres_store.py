"""
Tests for the PostgreSQL catalog store.

Statements are compiled with the PostgreSQL dialect; sessions are mocked.
"""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError

from catalog_search.db.models import Product
from catalog_search.search import (
    PostgresCatalogStore,
    SignalSet,
    StoreQueryError,
    StoreUnavailableError,
    analyze_query,
)
from catalog_search.search.signals import Signal


def compile_sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def make_store():
    factory = MagicMock()
    session = factory.return_value.__enter__.return_value
    return PostgresCatalogStore(factory, text_search_config="simple"), session


class TestStatements:
    def setup_method(self):
        self.store, _ = make_store()
        self.signals = SignalSet()

    def test_page_statement(self):
        sql = compile_sql(self.store.build_page_statement(analyze_query("סנדל אדום 38"), self.signals, 20, 10))

        assert "websearch_to_tsquery" in sql
        assert "ts_rank(products.search_vector" in sql
        assert "@@" in sql
        assert "jsonb_each" in sql
        assert "jsonb_each_text" in sql
        assert 'products."isActive"' in sql
        assert 'products."isDeleted"' in sql
        assert "ORDER BY rank DESC" in sql
        assert 'products."createdAt" DESC' in sql
        assert "products.id ASC" in sql
        assert "LIMIT" in sql
        assert "OFFSET" in sql
        for rule in self.signals.rules:
            assert f"matched_{rule.signal.value}" in sql

    def test_count_statement_has_no_ranking(self):
        sql = compile_sql(self.store.build_count_statement(analyze_query("סנדל אדום 38"), self.signals))

        assert "count(*)" in sql
        assert "ts_rank" not in sql
        assert "ORDER BY" not in sql
        assert "LIMIT" not in sql

    def test_absent_facets_compile_to_false(self):
        sql = compile_sql(self.store.build_count_statement(analyze_query("sneaker"), self.signals))
        assert "jsonb_each" not in sql

    def test_category_phrase_matches_all_name_columns(self):
        sql = compile_sql(self.store.build_count_statement(analyze_query("boots"), self.signals))
        for name in ['"subCategory"', '"subSubCategory"', "category_he", '"subCategory_he"', '"subSubCategory_he"']:
            assert f"lower(products.{name})" in sql

    def test_weights_in_rank_expression(self):
        features = analyze_query("red 38")
        conditions = self.store.signal_conditions(features)
        expr = self.store.rank_expression(features, conditions, self.signals)
        values = list(expr.compile(dialect=postgresql.dialect()).params.values())

        for weight in (2000.0, 1000.0, 300.0, 500.0, 20.0):
            assert weight in values

    def test_category_text_does_not_select(self):
        conditions = self.store.signal_conditions(analyze_query("sneaker"))
        predicate = compile_sql(self.store.candidate_predicate(conditions, self.signals))
        assert "concat_ws" not in predicate
        assert "concat_ws" in compile_sql(conditions[Signal.CATEGORY_TEXT])


class TestExecution:
    def test_missing_search_vector_is_unavailable(self):
        store, session = make_store()
        session.execute.return_value.first.return_value = None

        with pytest.raises(StoreUnavailableError):
            store.check_searchable()

    def test_present_search_vector(self):
        store, session = make_store()
        session.execute.return_value.first.return_value = ("search_vector",)
        store.check_searchable()

    def test_schema_check_failure_is_a_query_error(self):
        store, session = make_store()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("connection lost"))

        with pytest.raises(StoreQueryError):
            store.check_searchable()

    def test_fetch_ranked_maps_rows(self):
        store, session = make_store()
        product = Product(
            id="p1",
            sku="SKU-1",
            title_en="Sandal",
            title_he="סנדל",
            price=199.0,
            currency="ILS",
            categories_path=[],
            categories_path_id=[],
            search_keywords=[],
            color_variants={"red": {"colorSlug": "red", "stockBySize": {"38": "2"}}},
            is_active=True,
            is_deleted=False,
            created_at=datetime(2024, 1, 1),
        )
        signals = SignalSet()
        flags = [rule.signal in (Signal.SIZE, Signal.COLOR) for rule in signals.rules]
        session.execute.return_value.all.return_value = [(product, 520.0, *flags)]

        results = store.fetch_ranked(analyze_query("red 38"), signals, 0, 10)

        assert len(results) == 1
        assert results[0].id == "p1"
        assert results[0].rank == 520.0
        assert results[0].matched == frozenset({Signal.SIZE, Signal.COLOR})
        assert results[0].document.color_variants["red"].stock_by_size == {"38": 2}

    def test_count_failure_is_a_query_error(self):
        store, session = make_store()
        session.execute.side_effect = OperationalError("SELECT", {}, Exception("statement timeout"))

        with pytest.raises(StoreQueryError):
            store.count_candidates(analyze_query("36"), SignalSet())

    def test_count(self):
        store, session = make_store()
        session.execute.return_value.scalar_one.return_value = 12
        assert store.count_candidates(analyze_query("36"), SignalSet()) == 12
