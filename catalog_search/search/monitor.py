"""
Search Monitor
Tracks search outcomes and latency.

Fail-closed searches (full-text projection unavailable) are counted apart
from legitimate zero-result searches.
"""

import logging
from collections import Counter, deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from threading import Lock
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class SearchOutcome(str, Enum):
    """How a search request ended."""

    RESULTS = "results"
    NO_RESULTS = "no_results"
    EMPTY_QUERY = "empty_query"
    UNAVAILABLE = "unavailable"
    ERROR = "error"


@dataclass
class SearchMetric:
    """Single search measurement."""

    outcome: SearchOutcome
    duration_ms: float
    timestamp: datetime
    query: str
    total: int = 0


class SearchMonitor:
    """
    In-process search telemetry.

    Keeps outcome counters and a bounded history of recent searches.
    """

    def __init__(self, max_history: int = 1000, slow_threshold_ms: float = 300):
        """
        Initialize search monitor.

        Args:
            max_history: Number of recent searches to keep
            slow_threshold_ms: Searches slower than this are logged as warnings
        """
        self.max_history = max_history
        self.slow_threshold_ms = slow_threshold_ms
        self.metrics: deque = deque(maxlen=max_history)
        self.outcomes: Counter = Counter()
        self.lock = Lock()

    def record(self, outcome: SearchOutcome, duration_ms: float, query: str = "", total: int = 0) -> None:
        """Record one search."""
        metric = SearchMetric(
            outcome=outcome,
            duration_ms=duration_ms,
            timestamp=datetime.utcnow(),
            query=query,
            total=total,
        )

        with self.lock:
            self.metrics.append(metric)
            self.outcomes[outcome] += 1

        if duration_ms > self.slow_threshold_ms and outcome != SearchOutcome.ERROR:
            logger.warning(
                f"Slow search: '{query}' took {duration_ms:.2f}ms",
                extra={"outcome": outcome.value, "total": total},
            )

    def count(self, outcome: SearchOutcome) -> int:
        with self.lock:
            return self.outcomes[outcome]

    def get_stats(self) -> Dict[str, Any]:
        """
        Get search statistics.

        Returns:
            Dict with outcome counts and latency percentiles over recent searches
        """
        with self.lock:
            durations = sorted(m.duration_ms for m in self.metrics)
            outcomes = {outcome.value: self.outcomes[outcome] for outcome in SearchOutcome}

        return {
            "searches": sum(outcomes.values()),
            "outcomes": outcomes,
            "latency_ms": {
                "p50": self._percentile(durations, 50),
                "p95": self._percentile(durations, 95),
                "max": durations[-1] if durations else 0.0,
            },
        }

    def reset(self) -> None:
        with self.lock:
            self.metrics.clear()
            self.outcomes.clear()

    @staticmethod
    def _percentile(sorted_values: List[float], percentile: int) -> float:
        """Calculate percentile from sorted values."""
        if not sorted_values:
            return 0.0

        index = int((percentile / 100.0) * len(sorted_values))
        index = min(index, len(sorted_values) - 1)
        return sorted_values[index]


# Global monitor
_search_monitor: Optional[SearchMonitor] = None


def get_search_monitor() -> SearchMonitor:
    """Get global search monitor (singleton)."""
    global _search_monitor
    if _search_monitor is None:
        _search_monitor = SearchMonitor()
    return _search_monitor
