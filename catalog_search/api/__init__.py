"""
API Package
Thin FastAPI adapter over the catalog search service.
"""
