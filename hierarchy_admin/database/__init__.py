"""Database package for connection and session management."""

from hierarchy_admin.database.database import (
    DatabaseConfig,
    build_engine,
    get_db,
    get_engine,
    get_session_factory,
)

__all__ = [
    "DatabaseConfig",
    "build_engine",
    "get_db",
    "get_engine",
    "get_session_factory",
]
