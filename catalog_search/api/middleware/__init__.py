"""
Middleware
Custom middleware for the search API.
"""

from .logging import RequestLoggingMiddleware
from .timing import RequestTimingMiddleware

__all__ = [
    "RequestLoggingMiddleware",
    "RequestTimingMiddleware",
]
