"""
Database lifecycle coordinator.

Opens the shared connection, creates the schema and closes everything at
shutdown. Stores receive the connection manager and do their own queries.

Lifecycle:
    1. ``await database.initialize()`` at program startup
    2. stores run their queries through ``database.connection``
    3. ``await database.shutdown()`` at program end
"""

from __future__ import annotations

from pathlib import Path

import aiosqlite

from helpcord.database.db_connection import ConnectionManager, db_connection
from helpcord.database.db_schema import SchemaManager
from helpcord.util.logger import get_logger

logger = get_logger("database")

DB_PATH = Path("./data/helpcord.db").resolve()


class Database:
    """Owns the connection manager and the schema of one database file."""

    def __init__(self, db_path: Path = DB_PATH, connection: ConnectionManager = db_connection):
        self.db_path = db_path
        self.connection = connection
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> bool:
        """Open the connection and create the schema.

        Returns:
            True if the database is ready, False if initialization failed.
        """
        if self._initialized:
            logger.debug("[DATABASE] Already initialized, skipping")
            return True

        try:
            await self.connection.open(self.db_path)
            async with self.connection.transaction() as conn:
                await SchemaManager.initialize_schema(conn)
        except (OSError, aiosqlite.Error) as exc:
            logger.error("[DATABASE] Database initialization failed: %s", exc)
            await self.connection.close()
            return False

        self._initialized = True
        logger.info("[DATABASE] Database initialized at %s", self.db_path)
        return True

    async def shutdown(self) -> None:
        if not self._initialized:
            return

        await self.connection.close()
        self._initialized = False
        logger.info("[DATABASE] Database shutdown complete")
