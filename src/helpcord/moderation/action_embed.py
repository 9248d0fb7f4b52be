"""
Embed creation utilities for moderation actions.

Two embeds exist per action: the direct message informing the target, and
the feedback shown to the moderator once the action went through. The
history embed lists the recorded actions against a member.
"""

from __future__ import annotations

import datetime
from typing import Sequence

import discord

from helpcord.datatypes.action_datatypes import ModerationActionRecord, ModerationActionType, TemporaryData
from helpcord.util import discord_utils

# Emoji mapping for action types
ACTION_EMOJIS = {
    ModerationActionType.WARN: "⚠️",
    ModerationActionType.KICK: "\U0001f462",
    ModerationActionType.MUTE: "\U0001f507",
    ModerationActionType.QUARANTINE: "\U0001f6a7",
    ModerationActionType.BAN: "\U0001f528",
}

# Color mapping for action types
ACTION_COLORS = {
    ModerationActionType.WARN: discord.Color.gold(),
    ModerationActionType.KICK: discord.Color.red(),
    ModerationActionType.MUTE: discord.Color.orange(),
    ModerationActionType.QUARANTINE: discord.Color.orange(),
    ModerationActionType.BAN: discord.Color.dark_red(),
}

# What the target can still do, shown in the direct message
ACTION_EXPLANATIONS = {
    ModerationActionType.WARN: "Please follow the rules of the server to avoid further actions.",
    ModerationActionType.KICK: "You may join the server again, but please respect its rules.",
    ModerationActionType.MUTE: "You can not send messages in the server until the mute is lifted.",
    ModerationActionType.QUARANTINE: "You can only see a restricted part of the server until a moderator lifts it.",
    ModerationActionType.BAN: "You can not join the server again until the ban is lifted.",
}

DM_FAILED_QUALIFIER = "\n(Unable to send them a DM.)"

HISTORY_LIMIT = 10
HISTORY_REASON_LENGTH = 100


def describe_outcome(
    action_type: ModerationActionType,
    temporary_data: TemporaryData | None,
    has_sent_dm: bool,
) -> str:
    """Feedback line for the moderator, e.g. ``The mute duration is: 1 hour``."""
    if action_type.supports_duration:
        description = f"The {action_type.verb} duration is: {discord_utils.describe_duration(temporary_data)}"
    else:
        description = f"The user has been {action_type.past_tense}."
    if not has_sent_dm:
        description += DM_FAILED_QUALIFIER
    return description


def _add_duration_field(embed: discord.Embed, temporary_data: TemporaryData | None) -> None:
    if temporary_data is None:
        embed.add_field(name="Duration", value=discord_utils.PERMANENT_DURATION, inline=False)
        return
    expires_unix = int(temporary_data.expires_at.timestamp())
    # "1 hour (Expires: <relative timestamp>)"
    embed.add_field(
        name="Duration",
        value=f"{temporary_data.duration} (Expires: <t:{expires_unix}:R>)",
        inline=False,
    )


def create_dm_embed(
    action_type: ModerationActionType,
    guild: discord.Guild,
    reason: str,
    temporary_data: TemporaryData | None,
) -> discord.Embed:
    """
    Create the direct message sent to the target before the action is applied.

    Args:
        action_type: Kind of action being issued.
        guild: Guild the action is issued in.
        reason: Reason given by the moderator.
        temporary_data: Expiry of a temporary action, None if permanent or not applicable.

    Returns:
        discord.Embed: Embed naming the guild, the reason and, for timed kinds, the duration.
    """
    embed = discord.Embed(
        title=f"You have been {action_type.past_tense} in {guild.name}",
        description=ACTION_EXPLANATIONS.get(action_type),
        color=ACTION_COLORS.get(action_type, discord.Color.red()),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    if action_type.supports_duration:
        _add_duration_field(embed, temporary_data)
    embed.add_field(name="Reason", value=reason, inline=False)
    embed.set_footer(text=f"Guild: {guild.name}")
    return embed


def create_feedback_embed(
    action_type: ModerationActionType,
    target: discord.abc.User,
    actor: discord.abc.User,
    reason: str,
    description: str,
) -> discord.Embed:
    """Create the embed confirming an issued action to the moderator."""
    emoji = ACTION_EMOJIS.get(action_type, "⚙️")
    embed = discord.Embed(
        title=f"{emoji} {action_type.verb.capitalize()} Issued",
        description=description,
        color=ACTION_COLORS.get(action_type, discord.Color.red()),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    embed.add_field(name="User", value=target.mention, inline=True)
    embed.add_field(name="Moderator", value=actor.mention, inline=True)
    embed.add_field(name="Reason", value=reason, inline=False)
    return embed


def create_revocation_dm_embed(action_type: ModerationActionType, guild: discord.Guild) -> discord.Embed:
    """Direct message informing a member that a temporary action has ended."""
    return discord.Embed(
        title=f"You have been {action_type.past_tense} in {guild.name}",
        description="The duration of your previous action has ended.",
        color=discord.Color.green(),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )


def create_history_embed(
    target: discord.abc.User, actions: Sequence[ModerationActionRecord]
) -> discord.Embed:
    """List the most recent recorded actions against ``target``, newest first."""
    embed = discord.Embed(
        title=f"Moderation history of {target.display_name}",
        color=discord.Color.blurple(),
        timestamp=datetime.datetime.now(datetime.timezone.utc),
    )
    if not actions:
        embed.description = "No moderation actions recorded."
        return embed

    lines = []
    for action in actions[:HISTORY_LIMIT]:
        reason = action.reason
        if len(reason) > HISTORY_REASON_LENGTH:
            reason = reason[: HISTORY_REASON_LENGTH - 3] + "..."
        line = (
            f"`#{action.action_id}` **{action.action_type.verb}** "
            f"<t:{int(action.issued_at.timestamp())}:d> by <@{action.author_id}>: {reason}"
        )
        if action.is_temporary:
            line += f" (expires <t:{int(action.expires_at.timestamp())}:R>)"
        lines.append(line)
    if len(actions) > HISTORY_LIMIT:
        lines.append(f"...and {len(actions) - HISTORY_LIMIT} older actions.")

    embed.description = "\n".join(lines)
    embed.set_footer(text=f"{len(actions)} recorded actions")
    return embed
