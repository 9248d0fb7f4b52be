"""
Store for issued moderation actions.

Every write runs in its own transaction and is committed before the call
returns, so a stored action survives a crash right after it was issued.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Sequence

from helpcord.database.db_connection import ConnectionManager, db_connection
from helpcord.datatypes.action_datatypes import ModerationActionRecord, ModerationActionType
from helpcord.repositories.moderation_actions_repo import ModerationActionsRepository
from helpcord.util.logger import get_logger

logger = get_logger("moderation_actions_store")


class ModerationActionsStore:
    """Audit trail of moderation actions, backed by the moderation_actions table."""

    def __init__(self, connection: ConnectionManager = db_connection) -> None:
        self.connection = connection
        self.repo = ModerationActionsRepository()

    async def add_action(self, record: ModerationActionRecord) -> ModerationActionRecord:
        """Persist ``record`` and return it with its assigned id."""
        async with self.connection.transaction() as conn:
            action_id = await self.repo.insert(conn, record)
        logger.debug(
            "[ACTIONS STORE] Stored %s #%d against %d in guild %d",
            record.action_type, action_id, record.target_id, record.guild_id,
        )
        return record.with_id(action_id)

    async def get_actions_by_target(self, guild_id: int, target_id: int) -> List[ModerationActionRecord]:
        async with self.connection.read() as conn:
            return await self.repo.get_by_target(conn, guild_id, target_id)

    async def get_open_actions(
        self, guild_id: int, target_id: int, action_type: ModerationActionType
    ) -> List[ModerationActionRecord]:
        async with self.connection.read() as conn:
            return await self.repo.get_open_by_target(conn, guild_id, target_id, action_type)

    async def get_expired_temporary_actions(self, now: datetime | None = None) -> List[ModerationActionRecord]:
        async with self.connection.read() as conn:
            return await self.repo.get_expired(conn, now or datetime.now(timezone.utc))

    async def revoke(
        self, action_ids: Sequence[int], revocation: ModerationActionRecord | None = None
    ) -> None:
        """Mark actions as revoked, appending the lifting action in the same transaction."""
        async with self.connection.transaction() as conn:
            await self.repo.mark_revoked(conn, action_ids)
            if revocation is not None:
                await self.repo.insert(conn, revocation)
