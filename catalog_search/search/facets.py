"""
Facet Matching
Structured (non-text) match conditions evaluated against catalog documents.
"""

from typing import Iterable

from ..models.catalog import CatalogDocument
from .text import fold


def matches_size(document: CatalogDocument, sizes: Iterable[str]) -> bool:
    """
    True if any color variant has stock for any of the sizes.

    Args:
        document: Catalog document
        sizes: Size labels extracted from the query
    """
    sizes = list(sizes)
    if not sizes:
        return False

    return any(
        variant.in_stock(size)
        for variant in document.color_variants.values()
        for size in sizes
    )


def matches_color(document: CatalogDocument, keywords: Iterable[str]) -> bool:
    """
    True if an active color variant matches any color keyword.

    The variant map key, the variant's slug and its display name are all
    compared, exactly and case-insensitively.
    """
    exact = {keyword for keyword in keywords if keyword}
    if not exact:
        return False
    folded = {fold(keyword) for keyword in exact}

    for key, variant in document.color_variants.items():
        if not variant.enabled:
            continue
        for value in (key, variant.color_slug, variant.color_name):
            if not value:
                continue
            if value in exact or fold(value) in folded:
                return True

    return False


def matches_category_phrase(document: CatalogDocument, variants: Iterable[str]) -> bool:
    """True if any phrase variant is a case-insensitive substring of a category name."""
    phrases = [fold(v) for v in variants if v and v.strip()]
    if not phrases:
        return False

    names = [fold(name) for name in document.category_names()]
    return any(phrase in name for phrase in phrases for name in names)
