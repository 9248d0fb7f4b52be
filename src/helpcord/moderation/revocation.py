"""
Lifts temporary moderation actions once they expire.

Every tick looks at the stored MUTE and BAN actions whose expiry has passed.
An action that a newer, longer one of the same kind supersedes is only
marked revoked; otherwise the restriction is lifted on Discord and the
lifting action is recorded next to it. Actions that could not be lifted stay
open and are tried again on the next tick.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, List, Set

import discord

from helpcord.configuration.help_system_config import ModerationConfig
from helpcord.datatypes.action_datatypes import ModerationActionRecord, ModerationActionType
from helpcord.errors import ConfigurationError
from helpcord.moderation import action_embed
from helpcord.scheduler.periodic_guild_scheduler import PeriodicGuildScheduler
from helpcord.services.moderation_actions_store import ModerationActionsStore
from helpcord.util import discord_utils
from helpcord.util.logger import get_logger

logger = get_logger("revocation")

REVOCATION_REASON = "Automatic revocation of a temporary {verb}."


def is_superseded(action: ModerationActionRecord, open_actions: List[ModerationActionRecord]) -> bool:
    """Whether another open action of the same kind lasts longer than ``action``."""
    for other in open_actions:
        if other.action_id == action.action_id or other.action_type is not action.action_type:
            continue
        if other.expires_at is None or other.expires_at > action.expires_at:
            return True
    return False


class TemporaryActionRevoker:
    """Periodic routine lifting expired mutes and bans in every guild."""

    def __init__(self, config: ModerationConfig, actions_store: ModerationActionsStore) -> None:
        self.config = config
        self.actions_store = actions_store
        self._misconfigured_guilds: Set[int] = set()
        self.scheduler = PeriodicGuildScheduler(
            "revocation",
            self.revoke_expired_in,
            config.revocation_interval_seconds,
        )

    def start(self, bot: discord.Bot) -> None:
        self.scheduler.start(bot)

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()

    async def revoke_expired_in(self, guild: discord.Guild, now: datetime | None = None) -> int:
        """Lift every expired action of ``guild``; returns how many were handled."""
        expired = await self.actions_store.get_expired_temporary_actions(now or datetime.now(timezone.utc))
        by_target: Dict[int, List[ModerationActionRecord]] = defaultdict(list)
        for action in expired:
            if action.guild_id == guild.id:
                by_target[action.target_id].append(action)

        handled = 0
        misconfigured = False
        for target_id, actions in by_target.items():
            for action in actions:
                try:
                    await self.revoke_action(guild, action)
                    handled += 1
                except discord.HTTPException as exc:
                    logger.warning(
                        "[REVOCATION] Failed to lift %s #%s of %d, retrying next tick: %s",
                        action.action_type, action.action_id, target_id, exc,
                    )
                except ConfigurationError as exc:
                    misconfigured = True
                    self._report_misconfiguration(guild, action, exc)

        if not misconfigured:
            self._misconfigured_guilds.discard(guild.id)
        return handled

    def _report_misconfiguration(
        self, guild: discord.Guild, action: ModerationActionRecord, exc: ConfigurationError
    ) -> None:
        # Logged at ERROR once per guild until a tick passes without the error
        if guild.id in self._misconfigured_guilds:
            logger.debug("[REVOCATION] %s #%s still waits for the configuration: %s", action.action_type, action.action_id, exc)
            return
        self._misconfigured_guilds.add(guild.id)
        logger.error(
            "[REVOCATION] Can not lift %s #%s of %d until the configuration is fixed: %s",
            action.action_type, action.action_id, action.target_id, exc,
        )

    async def revoke_action(self, guild: discord.Guild, action: ModerationActionRecord) -> bool:
        """
        Lift a single expired action.

        Returns:
            bool: True if the restriction was lifted on Discord, False if the
            action was only marked revoked (superseded or target gone).
        """
        open_actions = await self.actions_store.get_open_actions(
            action.guild_id, action.target_id, action.action_type
        )
        if is_superseded(action, open_actions):
            logger.debug("[REVOCATION] %s #%s is superseded by a newer action", action.action_type, action.action_id)
            await self.actions_store.revoke([action.action_id])
            return False

        revocation_type = action.action_type.revoked_by
        reason = REVOCATION_REASON.format(verb=action.action_type.verb)
        try:
            if action.action_type is ModerationActionType.MUTE:
                lifted = await self._unmute(guild, action.target_id, reason)
            else:
                await guild.unban(discord.Object(id=action.target_id), reason=reason)
                lifted = True
        except discord.NotFound:
            logger.info("[REVOCATION] Target %d of %s #%s is gone", action.target_id, action.action_type, action.action_id)
            lifted = False

        revocation = ModerationActionRecord(
            guild_id=guild.id,
            author_id=guild.me.id,
            target_id=action.target_id,
            action_type=revocation_type,
            issued_at=datetime.now(timezone.utc),
            reason=reason,
        )
        await self.actions_store.revoke([action.action_id], revocation if lifted else None)
        if lifted:
            logger.info("[REVOCATION] %s user %d in %s", revocation_type.past_tense, action.target_id, guild.name)
        return lifted

    async def _unmute(self, guild: discord.Guild, target_id: int, reason: str) -> bool:
        member = guild.get_member(target_id)
        if member is None:
            return False

        role = discord_utils.find_role_matching(guild, self.config.muted_role_regex)
        if role is None:
            raise ConfigurationError(
                f"The guild {guild.name} has no role matching '{self.config.muted_role_pattern}' to unmute with."
            )
        if role in member.roles:
            await member.remove_roles(role, reason=reason)

        await discord_utils.send_dm_safely(
            member, embed=action_embed.create_revocation_dm_embed(ModerationActionType.UNMUTE, guild)
        )
        return True
