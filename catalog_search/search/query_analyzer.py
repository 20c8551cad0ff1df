"""
Query Analyzer
Turns a raw search string into structured query features.

Features:
- Size tokens (2-3 digit numbers, e.g. "37")
- Color keywords, expanded across scripts so a Hebrew color word can hit
  an English color slug
- Category phrase (query minus size tokens and size words) with its
  Hebrew morphological variants
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Set

from .morphology import expand_phrase, expand_token
from .text import is_hebrew, normalize_hebrew, normalize_latin, tokenize_query
from .vocabulary import (
    hebrew_color_base,
    is_english_color,
    is_size_stop_word,
    translate_hebrew_color,
)

logger = logging.getLogger(__name__)

SIZE_TOKEN = re.compile(r"^\d{2,3}$")
MIN_COLOR_TOKEN_LENGTH = 3


@dataclass(frozen=True)
class QueryFeatures:
    """
    Structured view of one search query.

    Created fresh per request; never persisted.
    """

    query: str
    size_tokens: FrozenSet[str] = field(default_factory=frozenset)
    color_keywords: FrozenSet[str] = field(default_factory=frozenset)
    category_phrase: str = ""
    category_phrase_variants: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        return not self.query

    def to_dict(self) -> Dict[str, Any]:
        """Sorted, JSON-friendly representation (for logs and debugging)."""
        return {
            "query": self.query,
            "size_tokens": sorted(self.size_tokens),
            "color_keywords": sorted(self.color_keywords),
            "category_phrase": self.category_phrase,
            "category_phrase_variants": sorted(self.category_phrase_variants),
        }


def extract_size_tokens(tokens: List[str], all_sizes: bool = False) -> FrozenSet[str]:
    """
    Extract numeric size hints from query tokens.

    Only the first size is kept unless `all_sizes` is set.
    """
    sizes = [token for token in tokens if SIZE_TOKEN.match(token)]
    if not all_sizes:
        sizes = sizes[:1]
    return frozenset(sizes)


def extract_color_keywords(tokens: List[str]) -> FrozenSet[str]:
    """
    Extract color keywords from query tokens.

    Hebrew colors contribute the token, its variants and their English
    translations; English colors contribute their lower-cased form. Adjacent
    token pairs are checked too, for multi-word Hebrew colors.
    """
    keywords: Set[str] = set()

    # Two-word colors ("כחול כהה") are looked up alongside single tokens
    pairs = [f"{a} {b}" for a, b in zip(tokens, tokens[1:])]

    for token in list(tokens) + pairs:
        token = token.strip()
        if len(token) < MIN_COLOR_TOKEN_LENGTH:
            continue

        if is_hebrew(token):
            word = normalize_hebrew(token)
            if hebrew_color_base(word) is None:
                continue

            variants = expand_token(word)
            keywords.add(word)
            keywords.update(variants)
            keywords.update(translate_hebrew_color(word))
            for variant in variants:
                keywords.update(translate_hebrew_color(variant))
        elif is_english_color(token):
            keywords.add(normalize_latin(token))

    return frozenset(k for k in keywords if k.strip())


def extract_category_phrase(tokens: List[str]) -> str:
    """Query text with size numbers and size-indicator words removed."""
    words = [
        token for token in tokens
        if not SIZE_TOKEN.match(token) and not is_size_stop_word(token)
    ]
    return " ".join(words).strip()


def expand_category_phrase(phrase: str) -> FrozenSet[str]:
    """Category phrase plus its Hebrew variants; blanks discarded."""
    if not phrase.strip():
        return frozenset()

    variants = {phrase}
    if is_hebrew(phrase):
        variants.update(expand_phrase(phrase))

    return frozenset(v.strip() for v in variants if v.strip())


def analyze_query(query: str, all_sizes: bool = False) -> QueryFeatures:
    """
    Analyze a raw search string.

    Args:
        query: Raw user query
        all_sizes: Keep every size token instead of only the first one

    Returns:
        QueryFeatures for the trimmed query (empty features for a blank query)
    """
    normalized = (query or "").strip()
    if not normalized:
        return QueryFeatures(query="")

    tokens = tokenize_query(normalized)
    category_phrase = extract_category_phrase(tokens)

    features = QueryFeatures(
        query=normalized,
        size_tokens=extract_size_tokens(tokens, all_sizes=all_sizes),
        color_keywords=extract_color_keywords(tokens),
        category_phrase=category_phrase,
        category_phrase_variants=expand_category_phrase(category_phrase),
    )

    logger.debug("Query analyzed", extra={"features": features.to_dict()})
    return features
