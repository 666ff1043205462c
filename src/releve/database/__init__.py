"""Database layer for releve application."""

from releve.database.base import Database
from releve.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
