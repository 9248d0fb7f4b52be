"""
discord_utils.py
================

Low-level Discord helpers for Helpcord: the duration choices offered by the
moderation commands, best-effort direct messages and role lookups. Nothing in
here keeps state.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Union

import discord

from helpcord.datatypes.action_datatypes import TemporaryData
from helpcord.util.logger import get_logger

logger = get_logger("discord_utils")

PERMANENT_DURATION = "permanent"

DURATIONS = {
    "10 minutes": timedelta(minutes=10),
    "30 minutes": timedelta(minutes=30),
    "1 hour": timedelta(hours=1),
    "3 hours": timedelta(hours=3),
    "1 day": timedelta(days=1),
    "3 days": timedelta(days=3),
    "7 days": timedelta(days=7),
    PERMANENT_DURATION: None,
}

DURATION_CHOICES = list(DURATIONS.keys())


def compute_temporary_data(duration: str, now: datetime | None = None) -> TemporaryData | None:
    """Turn a duration choice into its expiry, or None for a permanent action.

    Raises:
        ValueError: If ``duration`` is not one of ``DURATION_CHOICES``.
    """
    if duration not in DURATIONS:
        raise ValueError(f"Unsupported duration '{duration}', expected one of {DURATION_CHOICES}")

    delta = DURATIONS[duration]
    if delta is None:
        return None
    return TemporaryData(expires_at=(now or datetime.now(timezone.utc)) + delta, duration=duration)


def describe_duration(temporary_data: TemporaryData | None) -> str:
    return temporary_data.duration if temporary_data else PERMANENT_DURATION


def find_role_matching(guild: discord.Guild, pattern: re.Pattern[str]) -> discord.Role | None:
    """Return the first role of ``guild`` whose name fully matches ``pattern``."""
    return discord.utils.find(lambda role: pattern.fullmatch(role.name) is not None, guild.roles)


def has_role_matching(member: discord.Member, pattern: re.Pattern[str]) -> bool:
    return any(pattern.fullmatch(role.name) for role in member.roles)


async def send_dm_safely(
    user: Union[discord.User, discord.Member],
    *,
    content: str | None = None,
    embed: discord.Embed | None = None,
) -> bool:
    """
    Try to send a direct message, never raising on delivery failure.

    Members with closed DMs are common, so failures are only logged at debug.

    Returns:
        bool: True if the message was delivered, False otherwise.
    """
    try:
        await user.send(content=content, embed=embed)
        return True
    except discord.HTTPException as exc:
        logger.debug("Could not send a DM to user %s: %s", user.id, exc)
        return False
