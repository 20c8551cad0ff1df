"""
Database Session
Engine and session factory for the catalog database.
"""

import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from ..config import SearchSettings

logger = logging.getLogger(__name__)

POSTGRES_DRIVER = "postgresql+psycopg2"


def create_db_engine(settings: SearchSettings) -> Engine:
    """
    Create a database engine for the catalog.

    The configured statement timeout is applied to every connection so a
    slow store call fails the request instead of hanging it.
    """
    url = make_url(settings.database_url)
    if url.drivername == "postgresql":
        # Bare postgresql:// URLs always use psycopg2
        url = url.set(drivername=POSTGRES_DRIVER)

    connect_args = {}
    if settings.statement_timeout_ms > 0 and url.get_backend_name() == "postgresql":
        connect_args["options"] = f"-c statement_timeout={settings.statement_timeout_ms}"

    engine = create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=True,  # Verify connections before using
        connect_args=connect_args,
    )
    logger.info(f"Database engine created: {url.render_as_string(hide_password=True)}")
    return engine


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
