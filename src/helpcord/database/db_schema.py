"""
Database schema creation.

Timestamps are stored as INTEGER unix seconds (UTC) so expiry comparisons
are plain integer comparisons.
"""

import aiosqlite
from helpcord.util.logger import get_logger

logger = get_logger("database_schema")

SCHEMA_VERSION = 1


class SchemaManager:
    """Creates the tables and indexes Helpcord needs."""

    @staticmethod
    async def initialize_schema(db: aiosqlite.Connection) -> None:
        await SchemaManager._create_tables(db)
        await SchemaManager._create_indexes(db)
        await db.execute("INSERT OR IGNORE INTO schema_version (version) VALUES (?)", (SCHEMA_VERSION,))
        await db.commit()
        logger.info("[SCHEMA] Database schema initialized (version %d)", SCHEMA_VERSION)

    @staticmethod
    async def _create_tables(db: aiosqlite.Connection) -> None:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS help_threads (
                channel_id INTEGER PRIMARY KEY,
                author_id INTEGER NOT NULL,
                created_at INTEGER NOT NULL
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS moderation_actions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                guild_id INTEGER NOT NULL,
                author_id INTEGER NOT NULL,
                target_id INTEGER NOT NULL,
                action_type TEXT NOT NULL,
                issued_at INTEGER NOT NULL,
                expires_at INTEGER,
                reason TEXT NOT NULL,
                revoked INTEGER NOT NULL DEFAULT 0
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

    @staticmethod
    async def _create_indexes(db: aiosqlite.Connection) -> None:
        await db.execute("CREATE INDEX IF NOT EXISTS idx_help_threads_author ON help_threads(author_id)")
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_moderation_actions_target "
            "ON moderation_actions(guild_id, target_id, issued_at DESC)"
        )
        await db.execute(
            "CREATE INDEX IF NOT EXISTS idx_moderation_actions_expiry "
            "ON moderation_actions(revoked, expires_at)"
        )
