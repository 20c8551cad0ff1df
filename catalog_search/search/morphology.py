"""
Hebrew Morphology Expander
Rule-based generation of plural/singular and gender variants for Hebrew terms.

This is not a morphological analyzer: a fixed table of suffix rules plus a
small table of known irregular forms is enough to bridge "כפכף" and
"כפכפים" between a query and catalog text.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional, Set, Tuple

from .text import is_hebrew, normalize_hebrew
from .vocabulary import known_inflections

logger = logging.getLogger(__name__)

PLURAL_SUFFIXES: Tuple[str, ...] = ("ים", "ות")

# Final (sofit) letters and their medial forms
FINAL_TO_MEDIAL = {"ך": "כ", "ם": "מ", "ן": "נ", "ף": "פ", "ץ": "צ"}
MEDIAL_TO_FINAL = {medial: final for final, medial in FINAL_TO_MEDIAL.items()}


def _to_medial(stem: str) -> str:
    """Last letter in medial form, for appending a suffix."""
    return stem[:-1] + FINAL_TO_MEDIAL.get(stem[-1], stem[-1])


def _to_final(stem: str) -> str:
    """Last letter in final form, for a word that now ends at the stem."""
    return stem[:-1] + MEDIAL_TO_FINAL.get(stem[-1], stem[-1])


@dataclass(frozen=True)
class SuffixRule:
    """
    One suffix transformation.

    A rule applies to words ending in `suffix` that are at least `min_length`
    characters long; the suffix is replaced with `replacement`.
    """

    name: str
    suffix: str
    replacement: str
    min_length: int
    for_plural: bool
    skip_suffixes: Tuple[str, ...] = ()

    def apply(self, word: str) -> Optional[str]:
        if len(word) < self.min_length or not word.endswith(self.suffix):
            return None
        if any(word.endswith(s) for s in self.skip_suffixes):
            return None

        stem = word[: len(word) - len(self.suffix)] if self.suffix else word
        if not stem.strip():
            return None

        if self.replacement:
            return _to_medial(stem) + self.replacement
        return _to_final(stem)


SUFFIX_RULES: Tuple[SuffixRule, ...] = (
    # כפכפים -> כפכף
    SuffixRule("masculine_plural_to_singular", "ים", "", min_length=3, for_plural=True),
    # סירות -> סירה
    SuffixRule("feminine_plural_to_singular", "ות", "ה", min_length=3, for_plural=True),
    # סירה -> סירות
    SuffixRule("feminine_singular_to_plural", "ה", "ות", min_length=2, for_plural=False),
    # כפכף -> כפכפים
    SuffixRule("singular_to_masculine_plural", "", "ים", min_length=2, for_plural=False,
               skip_suffixes=("ה",)),
)


def is_plural(word: str) -> bool:
    return word.endswith(PLURAL_SUFFIXES)


def expand_token(token: str) -> FrozenSet[str]:
    """
    Generate plausible inflected forms of a Hebrew token.

    Non-Hebrew tokens are returned unchanged. The result always contains the
    original token and never contains empty strings.

    Args:
        token: Single word, or a phrase treated as one unit

    Returns:
        Set of variants including the token itself
    """
    if not token or not token.strip():
        return frozenset({token}) if token else frozenset()

    if not is_hebrew(token):
        return frozenset({token})

    word = normalize_hebrew(token)
    variants: Set[str] = {token, word}

    plural = is_plural(word)
    for rule in SUFFIX_RULES:
        if rule.for_plural != plural:
            continue
        variant = rule.apply(word)
        if variant:
            variants.add(variant)

    variants.update(known_inflections(word))

    return frozenset(v for v in variants if v and v.strip())


def expand_phrase(phrase: str) -> FrozenSet[str]:
    """
    Generate variants of a (possibly multi-word) Hebrew phrase.

    The phrase is expanded as a unit, then the first and last words are
    inflected individually with the rest of the phrase kept intact, so each
    variant is still a full phrase suitable for substring matching.
    """
    if not phrase or not phrase.strip():
        return frozenset()

    normalized = normalize_hebrew(phrase)
    if not is_hebrew(normalized):
        return frozenset({normalized})

    variants: Set[str] = set(expand_token(normalized))

    words = normalized.split(" ")
    if len(words) > 1:
        rest = " ".join(words[1:])
        for first in expand_token(words[0]):
            variants.add(f"{first} {rest}")

        beginning = " ".join(words[:-1])
        for last in expand_token(words[-1]):
            variants.add(f"{beginning} {last}")

    result = frozenset(v.strip() for v in variants if v and v.strip())
    logger.debug(f"Expanded phrase '{normalized}' into {len(result)} variants")
    return result
