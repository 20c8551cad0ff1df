"""
Script-aware text normalization.

Hebrew has no letter case, so Hebrew terms are compared exactly; Latin
terms are compared case-insensitively. Every comparison site in the search
pipeline goes through these helpers so the casing rules stay consistent.
"""

import re
from typing import List

HEBREW_CHARS = re.compile(r"[\u0590-\u05FF]")
WHITESPACE = re.compile(r"\s+")


def is_hebrew(text: str) -> bool:
    """True if the text contains any Hebrew-block character."""
    return bool(HEBREW_CHARS.search(text))


def normalize_hebrew(text: str) -> str:
    """Hebrew comparison form: trimmed, whitespace collapsed, case untouched."""
    return WHITESPACE.sub(" ", text).strip()


def normalize_latin(text: str) -> str:
    """Latin comparison form: trimmed, whitespace collapsed, lower-cased."""
    return WHITESPACE.sub(" ", text).strip().lower()


def normalize_term(text: str) -> str:
    """Normalize a term using the rule for its script."""
    if is_hebrew(text):
        return normalize_hebrew(text)
    return normalize_latin(text)


def fold(text: str) -> str:
    """
    Case-fold for case-insensitive matching across mixed-script fields.

    Lower-casing leaves Hebrew untouched, so this is safe for fields that mix
    both scripts (e.g. category names, color names).
    """
    return normalize_latin(text)


def tokenize_query(query: str) -> List[str]:
    """Split a raw query into whitespace-delimited tokens."""
    return [token for token in WHITESPACE.split(query.strip()) if token]
