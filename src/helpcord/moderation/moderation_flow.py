"""
moderation_flow.py
==================

Issues one moderation action against a guild member.

Steps run strictly in order:

1. Local checks. A failure raises :class:`AuthorizationDenied` before any
   message is sent or anything is stored.
2. Best-effort direct message to the target. Failure only flips
   ``has_sent_dm`` and never stops the flow.
3. Audit record written to the database.
4. Authoritative change on Discord (role, kick or ban), tagged with the
   reason. Errors here propagate to the command layer.
5. Feedback for the moderator.
"""

from __future__ import annotations

from datetime import datetime, timezone

import discord

from helpcord.configuration.help_system_config import ModerationConfig
from helpcord.datatypes.action_datatypes import (
    ModerationActionRecord,
    ModerationActionType,
    ModerationFeedback,
    TemporaryData,
)
from helpcord.moderation import action_embed, moderation_checks
from helpcord.services.moderation_actions_store import ModerationActionsStore
from helpcord.util import discord_utils
from helpcord.util.logger import get_logger

logger = get_logger("moderation_flow")


class ModerationActionFlow:
    """Runs moderation actions issued by moderators through slash commands."""

    def __init__(self, config: ModerationConfig, actions_store: ModerationActionsStore) -> None:
        self.config = config
        self.actions_store = actions_store

    async def issue_moderation_action(
        self,
        actor: discord.Member,
        target: discord.Member,
        action_type: ModerationActionType,
        duration: str | None,
        reason: str,
        bot_member: discord.Member | None = None,
    ) -> ModerationFeedback:
        """
        Apply ``action_type`` to ``target`` on behalf of ``actor``.

        Args:
            actor: Moderator issuing the action.
            target: Member the action applies to.
            action_type: Kind of action; only MUTE and BAN honour ``duration``.
            duration: One of ``discord_utils.DURATION_CHOICES``, ignored for other kinds.
            reason: Reason shown to the target and written to the audit log.
            bot_member: The bot's own member object, defaults to ``guild.me``.

        Returns:
            ModerationFeedback: Embed and text for the moderator.

        Raises:
            AuthorizationDenied: A local precondition failed; nothing was done.
            ConfigurationError: The restriction role is missing from the guild.
            discord.HTTPException: The authoritative change failed.
        """
        guild = target.guild
        bot_member = bot_member or guild.me

        temporary_data: TemporaryData | None = None
        if action_type.supports_duration and duration is not None:
            temporary_data = discord_utils.compute_temporary_data(duration)

        restriction_role = moderation_checks.require_restriction_role(action_type, guild, self.config)
        moderation_checks.check_moderation_action(
            action_type, actor, target, bot_member, reason, self.config, restriction_role
        )

        has_sent_dm = await discord_utils.send_dm_safely(
            target, embed=action_embed.create_dm_embed(action_type, guild, reason, temporary_data)
        )

        record = await self.actions_store.add_action(
            ModerationActionRecord(
                guild_id=guild.id,
                author_id=actor.id,
                target_id=target.id,
                action_type=action_type,
                issued_at=datetime.now(timezone.utc),
                reason=reason,
                expires_at=temporary_data.expires_at if temporary_data else None,
            )
        )

        await self._apply(action_type, target, restriction_role, reason)

        logger.info(
            "[MODERATION] %s %s %s (%s) in %s for %s, reason: %s",
            actor, action_type.past_tense, target, target.id, guild.name,
            discord_utils.describe_duration(temporary_data), reason,
        )

        description = action_embed.describe_outcome(action_type, temporary_data, has_sent_dm)
        embed = action_embed.create_feedback_embed(action_type, target, actor, reason, description)
        logger.debug("[MODERATION] Stored action #%s", record.action_id)
        return ModerationFeedback(embed=embed, description=description, has_sent_dm=has_sent_dm)

    @staticmethod
    async def _apply(
        action_type: ModerationActionType,
        target: discord.Member,
        restriction_role: discord.Role | None,
        reason: str,
    ) -> None:
        if action_type.is_role_based:
            await target.add_roles(restriction_role, reason=reason)
        elif action_type is ModerationActionType.BAN:
            await target.guild.ban(target, reason=reason, delete_message_seconds=0)
        elif action_type is ModerationActionType.KICK:
            await target.guild.kick(target, reason=reason)
        # WARN has no platform side
