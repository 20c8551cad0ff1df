"""
Database ORM Models
SQLAlchemy mapping of the catalog tables read by the search engine.
"""

from .models import Base, Product, CATEGORY_NAME_COLUMNS, SEARCH_VECTOR_INDEX
from .session import create_db_engine, create_session_factory

__all__ = [
    "Base",
    "Product",
    "CATEGORY_NAME_COLUMNS",
    "SEARCH_VECTOR_INDEX",
    "create_db_engine",
    "create_session_factory",
]
