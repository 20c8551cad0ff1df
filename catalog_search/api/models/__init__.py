"""
API Models
Response models for the search endpoints.
"""

from .search import DiagnosticsResponse, ProductResult, SearchResponse

__all__ = [
    "DiagnosticsResponse",
    "ProductResult",
    "SearchResponse",
]
