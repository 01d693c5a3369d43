"""
Database package initialization.
"""

from rabbit.db.database import (
    Base,
    DatabaseError,
    async_session_maker,
    check_database_health,
    close_db,
    engine,
    get_db_session,
    init_db,
)
from rabbit.db.models import GeneratedContentModel, PostModel

__all__ = [
    # Database
    "Base",
    "engine",
    "async_session_maker",
    "get_db_session",
    "init_db",
    "close_db",
    "check_database_health",
    "DatabaseError",
    # Models
    "GeneratedContentModel",
    "PostModel",
]
