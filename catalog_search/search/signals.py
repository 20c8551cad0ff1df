"""
Ranking Signals
Named (condition, weight) rules behind candidate selection and composite rank.

Rank Formula (defaults):
rank = 2000 × category_phrase + 1000 × full_text_relevance + 300 × category_text
       + 500 × color + 20 × size

Each term is 0 when its condition does not hold. A document is a candidate
when it passes the base filter and at least one selecting signal fires.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple, TypeVar

logger = logging.getLogger(__name__)


class Signal(str, Enum):
    """Match conditions evaluated per document."""

    CATEGORY_PHRASE = "category_phrase"  # phrase variant is a substring of a category name
    FULL_TEXT = "full_text"  # query matches the searchable-text projection
    CATEGORY_TEXT = "category_text"  # query matches the category-names-only projection
    SIZE = "size"  # a variant has stock in a queried size
    COLOR = "color"  # an active variant has a queried color


@dataclass(frozen=True)
class SignalRule:
    """
    One additive ranking rule.

    Attributes:
        signal: Condition this rule scores
        weight: Non-negative weight added when the condition holds
        selects: Whether the condition alone makes a document a candidate
        scaled: Whether the weight is multiplied by the store's relevance score
    """

    signal: Signal
    weight: float
    selects: bool = True
    scaled: bool = False

    def __post_init__(self):
        """Validate rule."""
        if self.weight < 0:
            raise ValueError(f"Signal weight must be non-negative, got {self.weight} for {self.signal.value}")

    def contribution(self, matched: FrozenSet[Signal], relevance: float = 0.0) -> float:
        """Score this rule adds for a document with the given matched signals."""
        if self.signal not in matched:
            return 0.0
        if self.scaled:
            return self.weight * max(relevance, 0.0)
        return self.weight


DEFAULT_SIGNAL_RULES: Tuple[SignalRule, ...] = (
    SignalRule(Signal.CATEGORY_PHRASE, 2000.0),
    SignalRule(Signal.FULL_TEXT, 1000.0, scaled=True),
    SignalRule(Signal.CATEGORY_TEXT, 300.0, selects=False),
    SignalRule(Signal.SIZE, 20.0),
    SignalRule(Signal.COLOR, 500.0),
)


class SignalSet:
    """
    Ordered collection of signal rules.

    The same instance drives both ranking and counting so the candidate
    predicate cannot drift between the page query and the count query.
    """

    def __init__(self, rules: Optional[Sequence[SignalRule]] = None):
        """
        Initialize signal set.

        Args:
            rules: Signal rules (defaults to DEFAULT_SIGNAL_RULES)
        """
        self.rules: Tuple[SignalRule, ...] = tuple(rules if rules is not None else DEFAULT_SIGNAL_RULES)

        seen = set()
        for rule in self.rules:
            if rule.signal in seen:
                raise ValueError(f"Duplicate signal rule: {rule.signal.value}")
            seen.add(rule.signal)

        if not any(rule.selects for rule in self.rules):
            raise ValueError("At least one signal rule must select candidates")

    @property
    def selecting_signals(self) -> FrozenSet[Signal]:
        return frozenset(rule.signal for rule in self.rules if rule.selects)

    @property
    def signals(self) -> FrozenSet[Signal]:
        return frozenset(rule.signal for rule in self.rules)

    def rule_for(self, signal: Signal) -> Optional[SignalRule]:
        for rule in self.rules:
            if rule.signal == signal:
                return rule
        return None

    def is_candidate(self, matched: FrozenSet[Signal]) -> bool:
        """True if any selecting signal fired."""
        return bool(matched & self.selecting_signals)

    def composite_rank(self, matched: FrozenSet[Signal], relevance: float = 0.0) -> float:
        """Sum of all rule contributions."""
        return sum(rule.contribution(matched, relevance) for rule in self.rules)


T = TypeVar("T")


def order_results(results: Iterable[T]) -> List[T]:
    """
    Sort ranked results: rank descending, newest first, then id ascending.

    Items must expose `rank`, `created_at` and `id`.
    """
    by_id = sorted(results, key=lambda r: r.id)
    return sorted(by_id, key=lambda r: (r.rank, r.created_at), reverse=True)
