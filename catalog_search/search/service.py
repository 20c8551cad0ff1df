"""
Product Search Service
Entry point of the search pipeline: query analysis, ranking and counting.

Workflow:
1. Trim the query; a blank query returns an empty page without store access
2. Coerce page/limit to safe values
3. Analyze the query into features
4. Verify the store can run full-text queries (fail closed if not)
5. Fetch the ranked page and the candidate count (concurrently by default)
6. Build the result page
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from threading import Lock
from typing import Any, List, Optional, Tuple

from ..config import SearchSettings, get_settings
from ..models.catalog import SearchResultPage
from .engine import RankingEngine
from .errors import StoreQueryError, StoreUnavailableError
from .monitor import SearchMonitor, SearchOutcome, get_search_monitor
from .pagination import PageWindow
from .query_analyzer import QueryFeatures, analyze_query
from .signals import SignalSet
from .store import CatalogStore, RankedResult

logger = logging.getLogger(__name__)

# Shared pool for running the page and count queries side by side
_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = Lock()


def get_executor() -> ThreadPoolExecutor:
    """Get the shared search thread pool (singleton)."""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="catalog-search")
    return _executor


def shutdown_executor() -> None:
    """Shut down the shared search thread pool, if one was started."""
    global _executor
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=False)
            _executor = None


class ProductSearchService:
    """
    Product search service.

    Stateless apart from its collaborators; safe to share across requests.
    """

    def __init__(
        self,
        store: CatalogStore,
        settings: Optional[SearchSettings] = None,
        signals: Optional[SignalSet] = None,
        monitor: Optional[SearchMonitor] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """
        Initialize search service.

        Args:
            store: Catalog store to search
            settings: Search settings (defaults to global settings)
            signals: Signal rules (defaults to the standard weights)
            monitor: Search monitor (defaults to global monitor)
            executor: Thread pool for concurrent page/count queries
        """
        self.store = store
        self.settings = settings or get_settings()
        self.engine = RankingEngine(store, signals)
        self.counter = self.engine.counter()
        self.monitor = monitor or get_search_monitor()
        self.executor = executor

    def search(self, query: Optional[str], page: Any = 1, limit: Any = None) -> SearchResultPage:
        """
        Search the catalog.

        Args:
            query: Raw query string
            page: 1-based page number (invalid values become 1)
            limit: Page size (invalid values become the default page size)

        Returns:
            SearchResultPage with rank-ordered items and the total candidate count

        Raises:
            StoreQueryError: If a store round-trip fails
        """
        start_time = time.time()

        window = PageWindow.from_request(
            page,
            limit,
            default_limit=self.settings.default_page_size,
            max_limit=self.settings.max_page_size,
        )

        normalized = (query or "").strip()
        if not normalized:
            self._record(SearchOutcome.EMPTY_QUERY, start_time)
            return SearchResultPage.empty(window.limit)

        features = analyze_query(normalized)

        try:
            self.store.check_searchable()
        except StoreUnavailableError as e:
            logger.error(
                f"Full-text search unavailable, returning empty results: {e.message}",
                extra={"reason": "search_unavailable", "details": e.details, "query": normalized},
            )
            self._record(SearchOutcome.UNAVAILABLE, start_time, normalized)
            return SearchResultPage.empty(window.limit, query=normalized)
        except StoreQueryError:
            self._record(SearchOutcome.ERROR, start_time, normalized)
            raise

        try:
            ranked, total = self._fetch(features, window)
        except Exception:
            self._record(SearchOutcome.ERROR, start_time, normalized)
            raise

        total = self._reconcile_total(total, ranked, window)
        outcome = SearchOutcome.RESULTS if total else SearchOutcome.NO_RESULTS
        duration_ms = self._record(outcome, start_time, normalized, total)

        logger.info(
            f"Search completed: '{normalized}' page={window.page} -> {len(ranked)}/{total} results "
            f"in {duration_ms:.2f}ms"
        )

        return SearchResultPage(
            items=[result.document for result in ranked],
            total=total,
            page=window.page,
            limit=window.limit,
            query=normalized,
        )

    def rank(self, query: str, page: Any = 1, limit: Any = None) -> Tuple[QueryFeatures, List[RankedResult]]:
        """
        Ranked results with scores and matched signals, for debugging ranking.
        """
        window = PageWindow.from_request(
            page,
            limit,
            default_limit=self.settings.default_page_size,
            max_limit=self.settings.max_page_size,
        )
        features = analyze_query(query)
        if features.is_empty:
            return features, []

        self.store.check_searchable()
        return features, self.engine.rank_page(features, window)

    def _fetch(self, features: QueryFeatures, window: PageWindow) -> Tuple[List[RankedResult], int]:
        """Run the page and count queries; any failure fails the whole request."""
        if not self.settings.parallel_count:
            return self.engine.rank_page(features, window), self.counter.count(features)

        executor = self.executor or get_executor()
        page_future = executor.submit(self.engine.rank_page, features, window)
        count_future = executor.submit(self.counter.count, features)

        try:
            ranked = page_future.result()
            total = count_future.result()
        except Exception:
            page_future.cancel()
            count_future.cancel()
            raise

        return ranked, total

    def _reconcile_total(self, total: int, ranked: List[RankedResult], window: PageWindow) -> int:
        # Page and count run as separate reads; catalog writes in between can skew them
        floor = window.offset + len(ranked) if ranked else 0
        if total < floor:
            logger.warning(
                f"Candidate count {total} is below returned results ({floor}), adjusting",
                extra={"page": window.page, "limit": window.limit},
            )
            return floor
        return total

    def _record(self, outcome: SearchOutcome, start_time: float, query: str = "", total: int = 0) -> float:
        duration_ms = (time.time() - start_time) * 1000
        self.monitor.record(outcome, duration_ms, query=query, total=total)
        return duration_ms
