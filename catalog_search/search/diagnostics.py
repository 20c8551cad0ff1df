"""
Search Diagnostics
Checks whether the catalog is ready for full-text search and suggests fixes.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List

from ..db.models import SEARCH_VECTOR_INDEX
from .store import CatalogStore, SearchSetupStatus

logger = logging.getLogger(__name__)


@dataclass
class SearchDiagnostics:
    """Search setup report."""

    search_vector_column_exists: bool
    search_vector_index_exists: bool
    total_products: int
    active_products: int
    products_with_search_vector: int
    sample_products: List[Dict[str, Any]] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        return self.search_vector_column_exists and self.products_with_search_vector > 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["ready"] = self.ready
        return data


def recommend(status: SearchSetupStatus) -> List[str]:
    """Suggested fixes for a search setup status."""
    recommendations = []

    if not status.search_vector_column_exists:
        recommendations.append("search_vector column is missing - run the database migration")
    if not status.search_vector_index_exists:
        recommendations.append(f"Search index {SEARCH_VECTOR_INDEX} is missing - run the database migration")
    if status.search_vector_column_exists and status.products_with_search_vector == 0:
        recommendations.append("search_vector column is empty - products need their search projection rebuilt")
    if status.active_products == 0:
        recommendations.append("No active products found")

    return recommendations


def diagnose(store: CatalogStore, sample_size: int = 5) -> SearchDiagnostics:
    """
    Inspect a store's search setup.

    Args:
        store: Catalog store
        sample_size: Number of sample products to include

    Returns:
        Diagnostics report with recommendations
    """
    status = store.inspect_search_setup(sample_size=sample_size)
    report = SearchDiagnostics(
        search_vector_column_exists=status.search_vector_column_exists,
        search_vector_index_exists=status.search_vector_index_exists,
        total_products=status.total_products,
        active_products=status.active_products,
        products_with_search_vector=status.products_with_search_vector,
        sample_products=status.sample_products,
        recommendations=recommend(status),
    )

    if not report.ready:
        logger.warning("Search setup incomplete", extra={"recommendations": report.recommendations})

    return report
