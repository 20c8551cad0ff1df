"""
Search Module
Query analysis, candidate selection, ranking and pagination for catalog search.
"""

from .errors import SearchBackendError, StoreQueryError, StoreUnavailableError
from .morphology import expand_phrase, expand_token
from .query_analyzer import QueryFeatures, analyze_query
from .signals import DEFAULT_SIGNAL_RULES, Signal, SignalRule, SignalSet
from .store import CatalogStore, InMemoryCatalogStore, RankedResult, SearchSetupStatus
from .postgres_store import PostgresCatalogStore
from .engine import RankingEngine
from .pagination import CountCoordinator, PageWindow, coerce_limit, coerce_page
from .monitor import SearchMonitor, SearchOutcome, get_search_monitor
from .diagnostics import SearchDiagnostics, diagnose
from .service import ProductSearchService

__all__ = [
    "SearchBackendError",
    "StoreQueryError",
    "StoreUnavailableError",
    "expand_phrase",
    "expand_token",
    "QueryFeatures",
    "analyze_query",
    "DEFAULT_SIGNAL_RULES",
    "Signal",
    "SignalRule",
    "SignalSet",
    "CatalogStore",
    "InMemoryCatalogStore",
    "RankedResult",
    "SearchSetupStatus",
    "PostgresCatalogStore",
    "RankingEngine",
    "CountCoordinator",
    "PageWindow",
    "coerce_limit",
    "coerce_page",
    "SearchMonitor",
    "SearchOutcome",
    "get_search_monitor",
    "SearchDiagnostics",
    "diagnose",
    "ProductSearchService",
]
