"""Database layer for the statex security store."""

from statex.database.base import Database
from statex.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
