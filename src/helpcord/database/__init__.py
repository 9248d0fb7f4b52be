"""
Database package for Helpcord.

Public API:
    - db_connection: Shared ConnectionManager instance
    - Database: Lifecycle coordinator (open, schema, close)
"""

from helpcord.database.database import Database
from helpcord.database.db_connection import ConnectionManager, db_connection

__all__ = ["ConnectionManager", "Database", "db_connection"]
