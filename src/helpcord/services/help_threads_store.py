"""
Store remembering who opened which help thread.
"""

from __future__ import annotations

from datetime import datetime

from helpcord.database.db_connection import ConnectionManager, db_connection
from helpcord.repositories.help_threads_repo import HelpThreadRecord, HelpThreadsRepository


class HelpThreadsStore:
    """Thin transactional wrapper around :class:`HelpThreadsRepository`."""

    def __init__(self, connection: ConnectionManager = db_connection) -> None:
        self.connection = connection
        self.repo = HelpThreadsRepository()

    async def upsert(self, author_id: int, channel_id: int, created_at: datetime) -> None:
        record = HelpThreadRecord(channel_id=channel_id, author_id=author_id, created_at=created_at)
        async with self.connection.transaction() as conn:
            await self.repo.upsert(conn, record)
