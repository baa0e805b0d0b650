"""
Database engine and session management.
"""

import logging
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import NullPool

from fintrack.config import get_settings
from fintrack.db.models import Base

logger = logging.getLogger(__name__)
settings = get_settings()


def build_engine(database_url: str) -> Engine:
    """Create an engine suited to the configured backend."""
    if database_url.startswith("postgresql"):
        # Hosted Postgres poolers manage connections themselves
        return create_engine(database_url, poolclass=NullPool)
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False},  # Needed for SQLite
    )


engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create any missing tables."""
    logger.info(f"Initializing database tables on {bind.url.drivername}")
    Base.metadata.create_all(bind=bind)


def get_db() -> Generator[Session, None, None]:
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
