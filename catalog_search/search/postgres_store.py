"""
PostgreSQL Catalog Store
Evaluates the candidate predicate and composite rank inside PostgreSQL.

- Full text: websearch_to_tsquery against the pre-built search_vector
  projection, relevance from ts_rank
- Size/color facets: EXISTS over jsonb_each(colorVariants)
- Category phrase: case-insensitive substring match on category-name columns

Ranking happens over the whole candidate set in SQL, before LIMIT/OFFSET.
"""

import functools
import logging
import operator
from typing import Dict, List

from sqlalchemy import (
    Boolean, Float, Integer, String,
    and_, case, cast, column, false, func, literal, literal_column, or_, select, text, true,
)
from sqlalchemy.dialects.postgresql import JSONB, REGCONFIG
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import Select

from ..db.models import CATEGORY_NAME_COLUMNS, SEARCH_VECTOR_INDEX, Product
from ..models.catalog import CatalogDocument
from .errors import StoreQueryError, StoreUnavailableError
from .query_analyzer import QueryFeatures
from .signals import Signal, SignalSet
from .store import CatalogStore, RankedResult, SearchSetupStatus
from .text import fold

logger = logging.getLogger(__name__)

SEARCH_VECTOR_COLUMN = "search_vector"


def _json_object(expr: ColumnElement) -> ColumnElement:
    """The JSON value if it is an object, else '{}' (jsonb_each rejects non-objects)."""
    return case(
        (func.jsonb_typeof(expr) == "object", expr),
        else_=cast(literal("{}"), JSONB),
    )


class PostgresCatalogStore(CatalogStore):
    """
    Catalog store backed by the storefront PostgreSQL database.

    Each call opens its own session, so the page and count queries can run
    concurrently on separate connections.
    """

    def __init__(self, session_factory: sessionmaker, text_search_config: str = "simple"):
        """
        Initialize PostgreSQL store.

        Args:
            session_factory: SQLAlchemy session factory
            text_search_config: Text-search configuration used to parse queries
        """
        self.session_factory = session_factory
        self.text_search_config = text_search_config

    # ------------------------------------------------------------------
    # Query building
    # ------------------------------------------------------------------

    def _regconfig(self) -> ColumnElement:
        return cast(literal(self.text_search_config), REGCONFIG)

    def _tsquery(self, query: str) -> ColumnElement:
        return func.websearch_to_tsquery(self._regconfig(), literal(query, String))

    def _size_condition(self, sizes: List[str]) -> ColumnElement:
        variant = func.jsonb_each(_json_object(Product.color_variants)).table_valued(
            column("key", String), column("value", JSONB), name="variant", joins_implicitly=True
        )
        size_entry = func.jsonb_each_text(_json_object(variant.c.value["stockBySize"])).table_valued(
            column("key", String), column("value", String), name="size_entry", joins_implicitly=True
        )
        stock = case(
            (size_entry.c.value.op("~")(r"^\s*[0-9]+\s*$"), cast(func.trim(size_entry.c.value), Integer)),
            else_=0,
        )

        return (
            select(literal_column("1"))
            .select_from(variant, size_entry)
            .where(size_entry.c.key.in_(sizes), stock > 0)
            .correlate(Product)
            .exists()
        )

    def _color_condition(self, keywords: List[str]) -> ColumnElement:
        variant = func.jsonb_each(_json_object(Product.color_variants)).table_valued(
            column("key", String), column("value", JSONB), name="variant", joins_implicitly=True
        )
        is_active = variant.c.value["isActive"].astext
        slug = variant.c.value["colorSlug"].astext
        name = variant.c.value["colorName"].astext
        folded = sorted({fold(keyword) for keyword in keywords})

        return (
            select(literal_column("1"))
            .select_from(variant)
            .where(
                or_(is_active.is_(None), func.lower(is_active) == "true"),
                or_(
                    variant.c.key.in_(keywords),
                    slug.in_(keywords),
                    name.in_(keywords),
                    func.lower(variant.c.key).in_(folded),
                    func.lower(slug).in_(folded),
                    func.lower(name).in_(folded),
                ),
            )
            .correlate(Product)
            .exists()
        )

    def _category_phrase_condition(self, variants: List[str]) -> ColumnElement:
        return or_(
            *[
                func.lower(col).contains(fold(phrase), autoescape=True)
                for phrase in variants
                for col in CATEGORY_NAME_COLUMNS
            ]
        )

    def _category_text_condition(self, tsquery: ColumnElement) -> ColumnElement:
        category_vector = func.to_tsvector(self._regconfig(), func.concat_ws(" ", *CATEGORY_NAME_COLUMNS))
        return category_vector.bool_op("@@")(tsquery)

    def signal_conditions(self, features: QueryFeatures) -> Dict[Signal, ColumnElement]:
        """SQL boolean expression for every signal condition."""
        tsquery = self._tsquery(features.query)
        sizes = sorted(features.size_tokens)
        colors = sorted(features.color_keywords)
        phrases = sorted(features.category_phrase_variants)

        return {
            Signal.FULL_TEXT: Product.search_vector.bool_op("@@")(tsquery),
            Signal.CATEGORY_TEXT: self._category_text_condition(tsquery),
            Signal.SIZE: self._size_condition(sizes) if sizes else false(),
            Signal.COLOR: self._color_condition(colors) if colors else false(),
            Signal.CATEGORY_PHRASE: self._category_phrase_condition(phrases) if phrases else false(),
        }

    def candidate_predicate(
        self, conditions: Dict[Signal, ColumnElement], signals: SignalSet
    ) -> ColumnElement:
        """Base filter AND any selecting signal."""
        selecting = [conditions[rule.signal] for rule in signals.rules if rule.selects]
        return and_(
            Product.is_active == true(),
            Product.is_deleted == false(),
            or_(*selecting),
        )

    def rank_expression(
        self, features: QueryFeatures, conditions: Dict[Signal, ColumnElement], signals: SignalSet
    ) -> ColumnElement:
        """Sum of CASE WHEN <condition> THEN <weight> ELSE 0 terms."""
        relevance = func.ts_rank(Product.search_vector, self._tsquery(features.query), type_=Float)

        terms = []
        for rule in signals.rules:
            value = relevance * rule.weight if rule.scaled else literal(rule.weight, Float)
            terms.append(case((conditions[rule.signal], value), else_=literal(0.0, Float)))

        return functools.reduce(operator.add, terms)

    def build_page_statement(
        self, features: QueryFeatures, signals: SignalSet, offset: int, limit: int
    ) -> Select:
        conditions = self.signal_conditions(features)
        rank = self.rank_expression(features, conditions, signals).label("rank")
        flags = [
            cast(conditions[rule.signal], Boolean).label(f"matched_{rule.signal.value}")
            for rule in signals.rules
        ]

        return (
            select(Product, rank, *flags)
            .where(self.candidate_predicate(conditions, signals))
            .order_by(rank.desc(), Product.created_at.desc(), Product.id.asc())
            .offset(offset)
            .limit(limit)
        )

    def build_count_statement(self, features: QueryFeatures, signals: SignalSet) -> Select:
        conditions = self.signal_conditions(features)
        return (
            select(func.count())
            .select_from(Product)
            .where(self.candidate_predicate(conditions, signals))
        )

    # ------------------------------------------------------------------
    # CatalogStore
    # ------------------------------------------------------------------

    def check_searchable(self) -> None:
        try:
            exists = self._column_exists(SEARCH_VECTOR_COLUMN)
        except SQLAlchemyError as e:
            raise StoreQueryError("Failed to inspect catalog schema", details={"error": str(e)}) from e

        if not exists:
            raise StoreUnavailableError(
                "search_vector column does not exist",
                details={"table": Product.__tablename__, "column": SEARCH_VECTOR_COLUMN},
            )

    def fetch_ranked(
        self, features: QueryFeatures, signals: SignalSet, offset: int, limit: int
    ) -> List[RankedResult]:
        stmt = self.build_page_statement(features, signals, offset, limit)

        try:
            with self.session_factory() as session:
                rows = session.execute(stmt).all()
                results = []
                for product, rank, *flags in rows:
                    matched = frozenset(
                        rule.signal for rule, flag in zip(signals.rules, flags) if flag
                    )
                    results.append(
                        RankedResult(
                            document=CatalogDocument.model_validate(product),
                            rank=float(rank or 0.0),
                            matched=matched,
                        )
                    )
                return results
        except SQLAlchemyError as e:
            logger.error(f"Ranked search query failed: {e}")
            raise StoreQueryError("Ranked search query failed", details={"error": str(e)}) from e

    def count_candidates(self, features: QueryFeatures, signals: SignalSet) -> int:
        stmt = self.build_count_statement(features, signals)

        try:
            with self.session_factory() as session:
                return int(session.execute(stmt).scalar_one() or 0)
        except SQLAlchemyError as e:
            logger.error(f"Candidate count query failed: {e}")
            raise StoreQueryError("Candidate count query failed", details={"error": str(e)}) from e

    def inspect_search_setup(self, sample_size: int = 5) -> SearchSetupStatus:
        try:
            with self.session_factory() as session:
                column_exists = self._column_exists(SEARCH_VECTOR_COLUMN, session=session)
                index_exists = session.execute(
                    text(
                        "SELECT indexname FROM pg_indexes "
                        "WHERE tablename = :table AND indexname = :index"
                    ),
                    {"table": Product.__tablename__, "index": SEARCH_VECTOR_INDEX},
                ).first() is not None

                total = session.execute(select(func.count()).select_from(Product)).scalar_one()
                active = session.execute(
                    select(func.count())
                    .select_from(Product)
                    .where(Product.is_active == true(), Product.is_deleted == false())
                ).scalar_one()

                with_vector = 0
                samples = []
                if column_exists:
                    with_vector = session.execute(
                        select(func.count())
                        .select_from(Product)
                        .where(Product.search_vector.is_not(None))
                    ).scalar_one()

                    sample_rows = session.execute(
                        select(
                            Product.id,
                            Product.sku,
                            Product.title_en,
                            Product.title_he,
                            cast(Product.search_vector, String).label("search_vector"),
                            Product.is_active,
                            Product.is_deleted,
                        ).limit(sample_size)
                    ).all()
                    samples = [
                        {
                            "id": row.id,
                            "sku": row.sku,
                            "title_en": row.title_en,
                            "title_he": row.title_he,
                            "has_search_vector": row.search_vector is not None,
                            "search_vector_preview": row.search_vector[:100] if row.search_vector else None,
                            "is_active": row.is_active,
                            "is_deleted": row.is_deleted,
                        }
                        for row in sample_rows
                    ]
        except SQLAlchemyError as e:
            logger.error(f"Search setup inspection failed: {e}")
            raise StoreQueryError("Search setup inspection failed", details={"error": str(e)}) from e

        return SearchSetupStatus(
            search_vector_column_exists=column_exists,
            search_vector_index_exists=index_exists,
            total_products=int(total),
            active_products=int(active),
            products_with_search_vector=int(with_vector),
            sample_products=samples,
        )

    def _column_exists(self, column_name: str, session=None) -> bool:
        stmt = text(
            "SELECT column_name FROM information_schema.columns "
            "WHERE table_name = :table AND column_name = :column"
        )
        params = {"table": Product.__tablename__, "column": column_name}

        if session is not None:
            return session.execute(stmt, params).first() is not None

        with self.session_factory() as session:
            return session.execute(stmt, params).first() is not None
