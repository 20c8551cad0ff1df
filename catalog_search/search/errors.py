"""
Search Errors
Exceptions raised by catalog stores and the search pipeline.
"""

from typing import Optional


class SearchBackendError(Exception):
    """Base exception for search backend errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class StoreUnavailableError(SearchBackendError):
    """
    The store cannot evaluate full-text queries.

    Raised when the searchable-text projection has not been built for the
    dataset. The search service fails closed on this error.
    """


class StoreQueryError(SearchBackendError):
    """A store round-trip failed (timeout, connection loss, bad SQL)."""
