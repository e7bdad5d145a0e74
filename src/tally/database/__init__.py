"""Database layer for tally application."""

from tally.database.base import Database
from tally.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
