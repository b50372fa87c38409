"""Database layer for finboard application."""

from finboard.database.base import Database
from finboard.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
