"""
Data Models Package
Typed catalog documents and search result envelopes.
"""

from .catalog import CatalogDocument, ColorVariant, SearchResultPage

__all__ = [
    "CatalogDocument",
    "ColorVariant",
    "SearchResultPage",
]
