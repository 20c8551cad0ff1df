"""
Pagination
Page/limit coercion and the candidate count coordinator.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from .query_analyzer import QueryFeatures
from .signals import SignalSet
from .store import CatalogStore

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 24
INTEGER = re.compile(r"^[+-]?[0-9]+$")


def _to_int(value: Any) -> Optional[int]:
    """Parse an integer from user input; None if it is not one."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        value = value.strip()
        if INTEGER.match(value):
            return int(value)
    return None


def coerce_page(page: Any) -> int:
    """1-based page number; anything that is not a positive integer becomes 1."""
    parsed = _to_int(page)
    if parsed is None or parsed < 1:
        return 1
    return parsed


def coerce_limit(limit: Any, default: int = DEFAULT_PAGE_SIZE, maximum: Optional[int] = None) -> int:
    """
    Page size; invalid or non-positive values fall back to the default.

    Args:
        limit: Requested page size (any type)
        default: Fallback page size
        maximum: Upper bound (no bound if None)
    """
    parsed = _to_int(limit)
    if parsed is None or parsed < 1:
        parsed = default
    if maximum is not None and parsed > maximum:
        parsed = maximum
    return parsed


@dataclass(frozen=True)
class PageWindow:
    """One page of a ranked result list."""

    page: int
    limit: int

    def __post_init__(self):
        """Validate window."""
        if self.page < 1:
            raise ValueError(f"Page must be >= 1, got {self.page}")
        if self.limit < 1:
            raise ValueError(f"Limit must be > 0, got {self.limit}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @classmethod
    def from_request(
        cls, page: Any, limit: Any, default_limit: int = DEFAULT_PAGE_SIZE, max_limit: Optional[int] = None
    ) -> "PageWindow":
        """Build a window from raw request values."""
        return cls(
            page=coerce_page(page),
            limit=coerce_limit(limit, default=default_limit, maximum=max_limit),
        )


class CountCoordinator:
    """
    Counts the full candidate set for a query.

    Uses the same signal set as the ranking engine, independent of
    ranking and of the page window.
    """

    def __init__(self, store: CatalogStore, signals: SignalSet):
        """
        Initialize count coordinator.

        Args:
            store: Catalog store
            signals: Signal rules shared with the ranking engine
        """
        self.store = store
        self.signals = signals

    def count(self, features: QueryFeatures) -> int:
        """Total number of candidates for the query."""
        if features.is_empty:
            return 0

        total = self.store.count_candidates(features, self.signals)
        logger.debug(f"Candidate count for '{features.query}': {total}")
        return total
