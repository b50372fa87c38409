"""Database factory functions for creating database instances.

Where the data lives is resolved in this order: an explicit argument, the
``FINBOARD_DATABASE_URL`` environment variable (any SQLAlchemy URL), the
``FINBOARD_DB_PATH`` environment variable (a SQLite file), and finally
``~/.finboard/finboard.db``.
"""

import os
from pathlib import Path
from typing import Optional

import structlog

from finboard.database.sqlalchemy_db import SQLAlchemyDatabase

logger = structlog.get_logger(__name__)

DATABASE_URL_ENV = "FINBOARD_DATABASE_URL"
DATABASE_PATH_ENV = "FINBOARD_DB_PATH"
IN_MEMORY = ":memory:"


def default_database_path() -> Path:
    return Path.home() / ".finboard" / "finboard.db"


def sqlite_url(database_path: str | Path) -> str:
    """SQLite URL for a file path; ``:memory:`` gives a private in-memory store."""
    if str(database_path) == IN_MEMORY:
        return "sqlite://"
    return f"sqlite:///{database_path}"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks FINBOARD_DB_PATH
            environment variable, then defaults to ~/.finboard/finboard.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    database_path = database_path or os.environ.get(DATABASE_PATH_ENV)

    if database_path == IN_MEMORY:
        path = database_path
    else:
        path = Path(database_path).expanduser() if database_path else default_database_path()
        # SQLite creates the file but not the directories above it
        path.parent.mkdir(parents=True, exist_ok=True)

    logger.debug("database_selected", backend="sqlite", path=str(path))
    return SQLAlchemyDatabase(sqlite_url(path))


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> SQLAlchemyDatabase:
    """Create a database instance from a URL or a SQLite path.

    Args:
        database_url: SQLAlchemy URL; wins over every other setting
        database_path: SQLite file used when no URL is configured

    Returns:
        SQLAlchemyDatabase instance
    """
    if database_path is None:
        database_url = database_url or os.environ.get(DATABASE_URL_ENV)
    if database_url:
        logger.debug("database_selected", backend=database_url.split(":", 1)[0])
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path)
