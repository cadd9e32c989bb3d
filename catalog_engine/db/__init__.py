"""
Database ORM Models
SQLAlchemy models and session helpers.
"""

from .models import Base, ProductRow, UserActivityRow
from .session import DATABASE_URL, create_db_engine, create_session_factory

__all__ = [
    "Base",
    "ProductRow",
    "UserActivityRow",
    "DATABASE_URL",
    "create_db_engine",
    "create_session_factory",
]
