"""Database layer for kontor."""

from kontor.database.base import Database
from kontor.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
