"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from tally.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV_VAR = "TALLY_DB_PATH"
DEFAULT_DB_PATH = Path.home() / ".tally" / "tally.db"


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file: explicit path, then TALLY_DB_PATH, then ~/.tally/tally.db."""
    chosen = database_path or os.environ.get(DB_PATH_ENV_VAR)
    if not chosen:
        return DEFAULT_DB_PATH
    return Path(chosen).expanduser()


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks TALLY_DB_PATH
            environment variable, then defaults to ~/.tally/tally.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = resolve_database_path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
