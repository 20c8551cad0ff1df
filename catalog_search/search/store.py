"""
Catalog Store
Read-only document store interface used by the ranking engine, plus an
in-memory implementation.

A store evaluates the candidate predicate (base filter AND any selecting
signal) and the composite rank over the whole candidate set, then returns
one sorted window of it.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from ..models.catalog import CatalogDocument
from .errors import StoreUnavailableError
from .facets import matches_category_phrase, matches_color, matches_size
from .fulltext import TextProjection, TextQuery, parse_websearch
from .query_analyzer import QueryFeatures
from .signals import Signal, SignalSet, order_results

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankedResult:
    """A candidate document with its composite rank."""

    document: CatalogDocument
    rank: float
    matched: FrozenSet[Signal] = field(default_factory=frozenset)

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def created_at(self) -> datetime:
        return self.document.created_at


@dataclass
class SearchSetupStatus:
    """Raw facts about the store's search readiness."""

    search_vector_column_exists: bool
    search_vector_index_exists: bool
    total_products: int
    active_products: int
    products_with_search_vector: int
    sample_products: List[Dict[str, Any]] = field(default_factory=list)


class CatalogStore(ABC):
    """Read-only access to catalog documents for search."""

    @abstractmethod
    def check_searchable(self) -> None:
        """
        Verify the full-text projection is available.

        Raises:
            StoreUnavailableError: If full-text queries cannot be evaluated
        """

    @abstractmethod
    def fetch_ranked(
        self, features: QueryFeatures, signals: SignalSet, offset: int, limit: int
    ) -> List[RankedResult]:
        """
        Rank the full candidate set and return one window of it.

        Args:
            features: Analyzed query
            signals: Signal rules (candidate predicate + weights)
            offset: Number of ranked candidates to skip
            limit: Maximum number of results

        Returns:
            Ranked results ordered by rank desc, created_at desc, id asc
        """

    @abstractmethod
    def count_candidates(self, features: QueryFeatures, signals: SignalSet) -> int:
        """Number of candidates under the same predicate, without ranking."""

    @abstractmethod
    def inspect_search_setup(self, sample_size: int = 5) -> SearchSetupStatus:
        """Report search readiness for diagnostics."""


class InMemoryCatalogStore(CatalogStore):
    """
    Catalog store over an in-memory document list.

    Evaluates the same predicate and rank as the database store, with the
    full-text condition handled by fulltext.TextProjection. Suited to tests,
    local development and small fixture catalogs.
    """

    def __init__(
        self,
        documents: Iterable[Union[CatalogDocument, Dict[str, Any]]] = (),
        searchable: bool = True,
    ):
        """
        Initialize in-memory store.

        Args:
            documents: Catalog documents (dicts are validated into CatalogDocument)
            searchable: Whether the full-text projection is "built"
        """
        self.documents: Tuple[CatalogDocument, ...] = tuple(
            doc if isinstance(doc, CatalogDocument) else CatalogDocument.model_validate(doc)
            for doc in documents
        )
        self.searchable = searchable

        # Projections are immutable per document, build once
        self._projections: Dict[str, Tuple[TextProjection, TextProjection]] = {
            doc.id: (
                TextProjection(doc.searchable_fields()),
                TextProjection(doc.category_names()),
            )
            for doc in self.documents
        }

        logger.info(f"In-memory catalog store initialized with {len(self.documents)} documents")

    def check_searchable(self) -> None:
        if not self.searchable:
            raise StoreUnavailableError(
                "Full-text projection is not built for this catalog",
                details={"store": "memory"},
            )

    def fetch_ranked(
        self, features: QueryFeatures, signals: SignalSet, offset: int, limit: int
    ) -> List[RankedResult]:
        ordered = order_results(self._candidates(features, signals))
        return ordered[offset:offset + limit]

    def count_candidates(self, features: QueryFeatures, signals: SignalSet) -> int:
        return len(self._candidates(features, signals))

    def inspect_search_setup(self, sample_size: int = 5) -> SearchSetupStatus:
        samples = [
            {
                "id": doc.id,
                "sku": doc.sku,
                "title_en": doc.title_en,
                "title_he": doc.title_he,
                "has_search_vector": self.searchable,
                "search_vector_preview": (
                    " ".join(self._projections[doc.id][0].tokens)[:100] if self.searchable else None
                ),
                "is_active": doc.is_active,
                "is_deleted": doc.is_deleted,
            }
            for doc in self.documents[:sample_size]
        ]

        return SearchSetupStatus(
            search_vector_column_exists=self.searchable,
            search_vector_index_exists=self.searchable,
            total_products=len(self.documents),
            active_products=sum(1 for doc in self.documents if doc.eligible),
            products_with_search_vector=len(self.documents) if self.searchable else 0,
            sample_products=samples,
        )

    def evaluate(
        self, document: CatalogDocument, features: QueryFeatures, text_query: Optional[TextQuery] = None
    ) -> Tuple[FrozenSet[Signal], float]:
        """
        Evaluate every signal condition for one document.

        Returns:
            Tuple of (matched signals, full-text relevance)
        """
        if text_query is None:
            text_query = parse_websearch(features.query)

        full_text, category_text = self._projections[document.id]
        matched = set()
        relevance = 0.0

        text_relevance = full_text.match(text_query) if not text_query.is_empty else None
        if text_relevance is not None:
            matched.add(Signal.FULL_TEXT)
            relevance = text_relevance

        if not text_query.is_empty and category_text.match(text_query) is not None:
            matched.add(Signal.CATEGORY_TEXT)

        if matches_size(document, features.size_tokens):
            matched.add(Signal.SIZE)

        if matches_color(document, features.color_keywords):
            matched.add(Signal.COLOR)

        if matches_category_phrase(document, features.category_phrase_variants):
            matched.add(Signal.CATEGORY_PHRASE)

        return frozenset(matched), relevance

    def _candidates(self, features: QueryFeatures, signals: SignalSet) -> List[RankedResult]:
        text_query = parse_websearch(features.query)
        results = []

        for document in self.documents:
            if not document.eligible:
                continue

            matched, relevance = self.evaluate(document, features, text_query)
            matched = matched & signals.signals
            if not signals.is_candidate(matched):
                continue

            results.append(
                RankedResult(
                    document=document,
                    rank=signals.composite_rank(matched, relevance),
                    matched=matched,
                )
            )

        return results
