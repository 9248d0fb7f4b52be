"""
Moderation action types and records.

This module defines the ModerationActionType enum, the immutable audit record
persisted for every issued action, and the small value types passed between
the moderation flow and the command layer.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

import discord


class ModerationActionType(Enum):
    """Enumeration of supported moderation actions."""

    WARN = "warn"
    KICK = "kick"
    MUTE = "mute"
    UNMUTE = "unmute"
    QUARANTINE = "quarantine"
    UNQUARANTINE = "unquarantine"
    BAN = "ban"
    UNBAN = "unban"

    def __str__(self) -> str:
        return self.value

    @property
    def verb(self) -> str:
        return self.value

    @property
    def past_tense(self) -> str:
        return _PAST_TENSE[self]

    @property
    def supports_duration(self) -> bool:
        """Whether the action may be temporary and later lifted automatically."""
        return self in (ModerationActionType.MUTE, ModerationActionType.BAN)

    @property
    def is_role_based(self) -> bool:
        """Whether the restriction is applied by granting a configured role."""
        return self in (ModerationActionType.MUTE, ModerationActionType.QUARANTINE)

    @property
    def revoked_by(self) -> "ModerationActionType | None":
        return _REVOKED_BY.get(self)

    @property
    def required_permission(self) -> str:
        """Guild permission attribute both the moderator and the bot must hold."""
        return _REQUIRED_PERMISSION[self]


_PAST_TENSE = {
    ModerationActionType.WARN: "warned",
    ModerationActionType.KICK: "kicked",
    ModerationActionType.MUTE: "muted",
    ModerationActionType.UNMUTE: "unmuted",
    ModerationActionType.QUARANTINE: "quarantined",
    ModerationActionType.UNQUARANTINE: "unquarantined",
    ModerationActionType.BAN: "banned",
    ModerationActionType.UNBAN: "unbanned",
}

_REVOKED_BY = {
    ModerationActionType.MUTE: ModerationActionType.UNMUTE,
    ModerationActionType.QUARANTINE: ModerationActionType.UNQUARANTINE,
    ModerationActionType.BAN: ModerationActionType.UNBAN,
}

_REQUIRED_PERMISSION = {
    ModerationActionType.WARN: "moderate_members",
    ModerationActionType.KICK: "kick_members",
    ModerationActionType.MUTE: "manage_roles",
    ModerationActionType.UNMUTE: "manage_roles",
    ModerationActionType.QUARANTINE: "manage_roles",
    ModerationActionType.UNQUARANTINE: "manage_roles",
    ModerationActionType.BAN: "ban_members",
    ModerationActionType.UNBAN: "ban_members",
}


@dataclass(frozen=True, slots=True)
class ModerationActionRecord:
    """Audit record of one issued moderation action.

    Attributes:
        guild_id: Guild the action was issued in.
        author_id: Moderator (or the bot itself) who issued it.
        target_id: Member the action applies to.
        action_type: Kind of action.
        issued_at: UTC time the action was issued.
        reason: Reason given by the author, also used as audit-log reason.
        expires_at: UTC time a temporary action ends, None if permanent.
        action_id: Row id, assigned once the record is stored.
    """

    guild_id: int
    author_id: int
    target_id: int
    action_type: ModerationActionType
    issued_at: datetime
    reason: str
    expires_at: datetime | None = None
    action_id: int | None = None

    @property
    def is_temporary(self) -> bool:
        return self.expires_at is not None

    def with_id(self, action_id: int) -> "ModerationActionRecord":
        return replace(self, action_id=action_id)


@dataclass(frozen=True, slots=True)
class TemporaryData:
    """End of a temporary action together with its human-readable duration."""

    expires_at: datetime
    duration: str


@dataclass(slots=True)
class ModerationFeedback:
    """Response shown to the moderator after an action went through.

    Attributes:
        embed: Embed summarizing the action.
        description: Duration text plus the DM qualifier, also used in the embed.
        has_sent_dm: Whether the target was informed by direct message.
    """

    embed: discord.Embed
    description: str
    has_sent_dm: bool
