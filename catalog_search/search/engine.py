"""
Ranking Engine
Candidate selection and composite ranking for one page of results.
"""

import logging
from typing import List, Optional

from .pagination import CountCoordinator, PageWindow
from .query_analyzer import QueryFeatures
from .signals import SignalSet
from .store import CatalogStore, RankedResult

logger = logging.getLogger(__name__)


class RankingEngine:
    """
    Candidate filter and ranking engine.

    Ranking is computed by the store over the entire candidate set before
    the page window is applied.
    """

    def __init__(self, store: CatalogStore, signals: Optional[SignalSet] = None):
        """
        Initialize ranking engine.

        Args:
            store: Catalog store
            signals: Signal rules (defaults to the standard weights)
        """
        self.store = store
        self.signals = signals or SignalSet()

    def counter(self) -> CountCoordinator:
        """Count coordinator sharing this engine's candidate predicate."""
        return CountCoordinator(self.store, self.signals)

    def rank_page(self, features: QueryFeatures, window: PageWindow) -> List[RankedResult]:
        """
        Rank candidates for the query and return one page.

        Args:
            features: Analyzed query
            window: Page window

        Returns:
            Ranked results for the page, best first
        """
        if features.is_empty:
            return []

        results = self.store.fetch_ranked(features, self.signals, window.offset, window.limit)

        logger.debug(
            f"Ranked page {window.page} for '{features.query}': {len(results)} results",
            extra={"ranks": [round(r.rank, 3) for r in results[:10]]},
        )
        return results
