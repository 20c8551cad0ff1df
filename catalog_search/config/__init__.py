"""
Configuration Package
Environment-driven settings for the search service.
"""

from .settings import SearchSettings, get_settings, reset_settings

__all__ = [
    "SearchSettings",
    "get_settings",
    "reset_settings",
]
