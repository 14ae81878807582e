"""Database initialization and utilities."""

from __future__ import annotations

import logging
from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base

logger = logging.getLogger(__name__)

DEFAULT_DB_URL = "sqlite:///scheduler.db"


@lru_cache(maxsize=16)
def create_db_engine(db_url: str = DEFAULT_DB_URL, echo: bool = False) -> Engine:
    """Create SQLAlchemy engine (one per URL, reused across calls)."""
    return create_engine(db_url, echo=echo)


def init_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Initialize database and create all tables."""
    Base.metadata.create_all(create_db_engine(db_url))
    logger.info("Database initialized: %s", db_url)


@lru_cache(maxsize=16)
def get_session_factory(db_url: str = DEFAULT_DB_URL) -> sessionmaker:
    """Get the session factory bound to the engine of ``db_url``."""
    return sessionmaker(bind=create_db_engine(db_url))


def get_session(db_url: str = DEFAULT_DB_URL) -> Session:
    """Get a new database session."""
    return get_session_factory(db_url)()


def reset_database(db_url: str = DEFAULT_DB_URL) -> None:
    """Drop all tables and recreate (WARNING: deletes all data!)."""
    engine = create_db_engine(db_url)
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    logger.warning("Database reset: %s", db_url)
