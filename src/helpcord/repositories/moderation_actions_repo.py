"""
Repository for the moderation_actions table.

Timestamps are stored as INTEGER unix seconds (UTC).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Sequence

import aiosqlite

from helpcord.datatypes.action_datatypes import ModerationActionRecord, ModerationActionType

_COLUMNS = "id, guild_id, author_id, target_id, action_type, issued_at, expires_at, reason"


def _to_unix(moment: datetime | None) -> int | None:
    return int(moment.timestamp()) if moment is not None else None


def _from_unix(value: int | None) -> datetime | None:
    return datetime.fromtimestamp(value, tz=timezone.utc) if value is not None else None


class ModerationActionsRepository:
    """Low-level CRUD for the ``moderation_actions`` table."""

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, conn: aiosqlite.Connection, record: ModerationActionRecord) -> int:
        """Append an action and return its row id."""
        cursor = await conn.execute(
            """
            INSERT INTO moderation_actions
                (guild_id, author_id, target_id, action_type, issued_at, expires_at, reason)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                record.guild_id,
                record.author_id,
                record.target_id,
                record.action_type.value,
                _to_unix(record.issued_at),
                _to_unix(record.expires_at),
                record.reason,
            ),
        )
        return cursor.lastrowid

    async def mark_revoked(self, conn: aiosqlite.Connection, action_ids: Sequence[int]) -> None:
        await conn.executemany(
            "UPDATE moderation_actions SET revoked = 1 WHERE id = ?",
            [(action_id,) for action_id in action_ids],
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_by_target(
        self, conn: aiosqlite.Connection, guild_id: int, target_id: int
    ) -> List[ModerationActionRecord]:
        """Return every action against a target, newest first."""
        async with conn.execute(
            f"SELECT {_COLUMNS} FROM moderation_actions "
            "WHERE guild_id = ? AND target_id = ? ORDER BY issued_at DESC, id DESC",
            (guild_id, target_id),
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._from_row(row) for row in rows]

    async def get_open_by_target(
        self,
        conn: aiosqlite.Connection,
        guild_id: int,
        target_id: int,
        action_type: ModerationActionType,
    ) -> List[ModerationActionRecord]:
        """Return actions of one kind against a target that were not revoked yet."""
        async with conn.execute(
            f"SELECT {_COLUMNS} FROM moderation_actions "
            "WHERE guild_id = ? AND target_id = ? AND action_type = ? AND revoked = 0 "
            "ORDER BY issued_at DESC, id DESC",
            (guild_id, target_id, action_type.value),
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._from_row(row) for row in rows]

    async def get_expired(self, conn: aiosqlite.Connection, now: datetime) -> List[ModerationActionRecord]:
        """Return temporary actions that ended at or before ``now`` and were not revoked yet."""
        async with conn.execute(
            f"SELECT {_COLUMNS} FROM moderation_actions "
            "WHERE revoked = 0 AND expires_at IS NOT NULL AND expires_at <= ? "
            "ORDER BY expires_at",
            (_to_unix(now),),
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._from_row(row) for row in rows]

    @staticmethod
    def _from_row(row) -> ModerationActionRecord:
        return ModerationActionRecord(
            action_id=row[0],
            guild_id=row[1],
            author_id=row[2],
            target_id=row[3],
            action_type=ModerationActionType(row[4]),
            issued_at=_from_unix(row[5]),
            expires_at=_from_unix(row[6]),
            reason=row[7],
        )
