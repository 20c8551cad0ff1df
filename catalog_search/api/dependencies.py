"""
Dependency Injection
FastAPI dependencies for the database, catalog store and search service.
"""

import logging
from typing import Optional
from uuid import uuid4

from fastapi import Depends, Header
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from ..config import SearchSettings, get_settings
from ..db.session import create_db_engine, create_session_factory
from ..search import CatalogStore, PostgresCatalogStore, ProductSearchService

logger = logging.getLogger(__name__)

# Database engine and session factory
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def get_db_engine() -> Engine:
    """Get database engine (singleton)."""
    global _engine
    if _engine is None:
        _engine = create_db_engine(get_settings())
    return _engine


def get_session_factory() -> sessionmaker:
    """Get database session factory (singleton)."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = create_session_factory(get_db_engine())
        logger.info("Database session factory created")
    return _SessionLocal


def get_catalog_store(settings: SearchSettings = Depends(get_settings)) -> CatalogStore:
    """
    Get the catalog store.

    Override in tests to search an in-memory catalog:
        app.dependency_overrides[get_catalog_store] = lambda: InMemoryCatalogStore(docs)
    """
    return PostgresCatalogStore(
        session_factory=get_session_factory(),
        text_search_config=settings.text_search_config,
    )


def get_search_service(
    store: CatalogStore = Depends(get_catalog_store),
    settings: SearchSettings = Depends(get_settings),
) -> ProductSearchService:
    """
    Get search service instance.

    Use as FastAPI dependency:
        @app.get("/search")
        def search(service: ProductSearchService = Depends(get_search_service)):
            ...
    """
    return ProductSearchService(store=store, settings=settings)


def get_request_id(x_request_id: Optional[str] = Header(None)) -> str:
    """Get or generate request ID for tracing."""
    if x_request_id:
        return x_request_id
    return str(uuid4())
