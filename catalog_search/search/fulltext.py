"""
Full-Text Matching
Web-search style query parsing and matching over a document's text projection.

Mirrors the behavior of PostgreSQL's websearch_to_tsquery with the 'simple'
configuration so the in-memory store ranks like the database does:

- unquoted words are AND-ed
- "quoted phrases" must appear as adjacent tokens
- the word "or" separates alternatives
- a leading "-" excludes a word or phrase
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

WORD = re.compile(r"\w+", re.UNICODE)
QUERY_PART = re.compile(r'(-?)"([^"]*)"?|(\S+)')

# Default weight of unlabeled lexemes in ts_rank; relevance stays below it
DEFAULT_LEXEME_WEIGHT = 0.1


def tokenize_text(text: str) -> List[str]:
    """Lower-cased word tokens, as the 'simple' text-search configuration produces."""
    return WORD.findall(text.lower())


@dataclass(frozen=True)
class TextTerm:
    """A word or phrase (sequence of adjacent tokens), optionally negated."""

    tokens: Tuple[str, ...]
    negated: bool = False


@dataclass(frozen=True)
class TextQuery:
    """Alternatives (OR) of conjunctions (AND) of terms."""

    alternatives: Tuple[Tuple[TextTerm, ...], ...]

    @property
    def is_empty(self) -> bool:
        return not self.alternatives


def parse_websearch(query: str) -> TextQuery:
    """
    Parse a web-search style query.

    Args:
        query: Raw query string

    Returns:
        Parsed query (empty if the query has no word tokens)
    """
    alternatives = []
    current: List[TextTerm] = []

    for match in QUERY_PART.finditer(query or ""):
        negation, phrase, word = match.groups()

        if phrase is not None:
            tokens = tokenize_text(phrase)
            if tokens:
                current.append(TextTerm(tuple(tokens), negated=negation == "-"))
            continue

        if word.lower() == "or":
            if current:
                alternatives.append(tuple(current))
                current = []
            continue

        negated = word.startswith("-") and len(word) > 1
        tokens = tokenize_text(word.lstrip("-") if negated else word)
        if tokens:
            current.append(TextTerm(tuple(tokens), negated=negated))

    if current:
        alternatives.append(tuple(current))

    return TextQuery(tuple(alternatives))


class TextProjection:
    """
    Tokenized searchable text of one document.

    Fields are concatenated in order, like the stored tsvector projection.
    """

    def __init__(self, fields: Iterable[str]):
        self.tokens: Tuple[str, ...] = tuple(tokenize_text(" ".join(fields)))

    def count(self, term: TextTerm) -> int:
        """Number of occurrences of the term's token sequence."""
        size = len(term.tokens)
        if size == 0 or size > len(self.tokens):
            return 0
        if size == 1:
            return self.tokens.count(term.tokens[0])

        return sum(
            1
            for start in range(len(self.tokens) - size + 1)
            if self.tokens[start:start + size] == term.tokens
        )

    def match(self, query: TextQuery) -> Optional[float]:
        """
        Evaluate a parsed query against this projection.

        Returns:
            Relevance in [0, 1) if the query matches, None otherwise
        """
        best: Optional[float] = None

        for alternative in query.alternatives:
            hits = 0
            matched = True
            for term in alternative:
                occurrences = self.count(term)
                if term.negated:
                    if occurrences:
                        matched = False
                        break
                elif occurrences == 0:
                    matched = False
                    break
                else:
                    hits += occurrences

            if matched:
                relevance = DEFAULT_LEXEME_WEIGHT * hits / (hits + 1)
                if best is None or relevance > best:
                    best = relevance

        return best
