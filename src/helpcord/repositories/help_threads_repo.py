"""
Repository for the help_threads table.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

import aiosqlite


@dataclass(frozen=True)
class HelpThreadRecord:
    """Author of a help thread and when the thread was opened."""
    channel_id: int
    author_id: int
    created_at: datetime


class HelpThreadsRepository:
    """CRUD for the help_threads table."""

    async def upsert(self, conn: aiosqlite.Connection, record: HelpThreadRecord) -> None:
        """Insert the thread, or overwrite author and creation time if it is known already."""
        await conn.execute(
            """
            INSERT INTO help_threads (channel_id, author_id, created_at)
            VALUES (?, ?, ?)
            ON CONFLICT(channel_id) DO UPDATE SET
                author_id  = excluded.author_id,
                created_at = excluded.created_at
            """,
            (record.channel_id, record.author_id, int(record.created_at.timestamp())),
        )
