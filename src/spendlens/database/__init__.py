"""Database layer for spendlens application."""

from spendlens.database.base import Database
from spendlens.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
