"""
Local preconditions of moderation actions.

All checks run before anything is sent to Discord or written to the
database. A failed check raises :class:`AuthorizationDenied` carrying the
message for the moderator.
"""

from __future__ import annotations

import re

import discord

from helpcord.configuration.help_system_config import ModerationConfig
from helpcord.datatypes.action_datatypes import ModerationActionType
from helpcord.errors import AuthorizationDenied, ConfigurationError
from helpcord.util import discord_utils


def outranks(member: discord.Member, other: discord.Member) -> bool:
    """Whether ``member`` stands above ``other`` in the role hierarchy.

    The guild owner outranks everybody and is outranked by nobody.
    """
    owner_id = member.guild.owner_id
    if member.id == owner_id:
        return True
    if other.id == owner_id:
        return False
    return member.top_role > other.top_role


def restriction_role_pattern(action_type: ModerationActionType, config: ModerationConfig) -> re.Pattern[str] | None:
    if action_type is ModerationActionType.MUTE:
        return config.muted_role_regex
    if action_type is ModerationActionType.QUARANTINE:
        return config.quarantined_role_regex
    return None


def require_restriction_role(
    action_type: ModerationActionType, guild: discord.Guild, config: ModerationConfig
) -> discord.Role | None:
    """Return the role granted by a role-based action, None for other kinds.

    Raises:
        ConfigurationError: If the guild has no role matching the configured pattern.
    """
    pattern = restriction_role_pattern(action_type, config)
    if pattern is None:
        return None

    role = discord_utils.find_role_matching(guild, pattern)
    if role is None:
        raise ConfigurationError(
            f"The guild {guild.name} has no role matching '{pattern.pattern}' required to {action_type.verb}."
        )
    return role


def check_moderation_action(
    action_type: ModerationActionType,
    actor: discord.Member,
    target: discord.Member,
    bot_member: discord.Member,
    reason: str,
    config: ModerationConfig,
    restriction_role: discord.Role | None = None,
) -> None:
    """Validate that ``actor`` may apply ``action_type`` to ``target``.

    Raises:
        AuthorizationDenied: On the first failing precondition.
    """
    verb = action_type.verb
    permission = action_type.required_permission
    permission_label = permission.replace("_", " ")

    if len(reason) > config.reason_max_length:
        raise AuthorizationDenied(
            f"The reason can not be longer than {config.reason_max_length} characters "
            f"(current length is {len(reason)})."
        )

    if actor.id == target.id:
        raise AuthorizationDenied(f"You can not {verb} yourself.")

    pattern = restriction_role_pattern(action_type, config)
    if pattern is not None and discord_utils.has_role_matching(target, pattern):
        raise AuthorizationDenied(f"The user is already {action_type.past_tense}.")

    if not getattr(actor.guild_permissions, permission, False):
        raise AuthorizationDenied(
            f"You can not {verb} users in this guild since you do not have the {permission_label} permission."
        )

    if not outranks(actor, target):
        raise AuthorizationDenied(f"The user {target.display_name} is too powerful for you to {verb}.")

    if not getattr(bot_member.guild_permissions, permission, False):
        raise AuthorizationDenied(
            f"I can not {verb} users in this guild since I do not have the {permission_label} permission."
        )

    if not outranks(bot_member, target):
        raise AuthorizationDenied(f"The user {target.display_name} is too powerful for me to {verb}.")

    if restriction_role is not None and not bot_member.top_role > restriction_role:
        raise AuthorizationDenied(
            f"I can not {verb} users since the role {restriction_role.name} is not below my highest role."
        )
