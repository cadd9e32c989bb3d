"""
Database Session
Engine and session factory for the SQL-backed catalog and activity store.
"""

import os

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

# Get database URL from environment
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./catalog.db")


def create_db_engine(database_url: str = DATABASE_URL, **engine_kwargs) -> Engine:
    """
    Create a database engine.

    Args:
        database_url: SQLAlchemy database URL
        **engine_kwargs: Extra create_engine options

    Returns:
        Engine
    """
    if database_url.startswith("sqlite"):
        # Sessions are opened from worker threads
        engine_kwargs.setdefault("connect_args", {"check_same_thread": False})
    else:
        engine_kwargs.setdefault("pool_size", 5)
        engine_kwargs.setdefault("max_overflow", 10)
    engine_kwargs.setdefault("pool_pre_ping", True)  # Verify connections before using

    return create_engine(database_url, **engine_kwargs)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Session factory bound to an engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
