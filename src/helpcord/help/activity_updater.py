"""
Scheduled check keeping the activity tag of help threads up to date.

A thread nobody but its owner has written in is LOW, a thread with many
recent messages is HIGH and everything in between is MEDIUM.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

import discord

from helpcord.configuration.help_system_config import HelpSystemConfig
from helpcord.datatypes.tag_datatypes import ThreadActivity
from helpcord.errors import ConfigurationError
from helpcord.help.help_system_helper import HelpSystemHelper
from helpcord.scheduler.periodic_guild_scheduler import PeriodicGuildScheduler
from helpcord.util.logger import get_logger

logger = get_logger("activity_updater")


def determine_activity(
    messages: Sequence[discord.Message],
    owner_id: int | None,
    config: HelpSystemConfig,
    now: datetime | None = None,
) -> ThreadActivity:
    """Classify a thread from its recent messages (any order)."""
    now = now or datetime.now(timezone.utc)

    has_foreign_messages = any(
        message.author.id != owner_id and not message.author.bot for message in messages
    )
    if not has_foreign_messages:
        return ThreadActivity.LOW

    window_start = now - timedelta(minutes=config.activity_recent_window_minutes)
    recent_count = sum(1 for message in messages if message.created_at >= window_start)
    if recent_count >= config.activity_high_message_threshold:
        return ThreadActivity.HIGH

    return ThreadActivity.MEDIUM


class HelpThreadActivityUpdater:
    """Periodically re-tags the active threads of every help forum."""

    def __init__(self, helper: HelpSystemHelper) -> None:
        self.helper = helper
        self.config = helper.config
        self.scheduler = PeriodicGuildScheduler(
            "activity-updater",
            self.update_guild,
            self.config.activity_check_interval_seconds,
        )

    def start(self, bot: discord.Bot) -> None:
        self.scheduler.start(bot)

    async def shutdown(self) -> None:
        await self.scheduler.shutdown()

    async def update_guild(self, guild: discord.Guild) -> None:
        forum = self.helper.handle_require_help_forum(guild)
        if forum is None:
            return

        threads = self.helper.get_active_threads_in(forum)
        logger.debug("[ACTIVITY] Updating %d active threads in %s", len(threads), guild.name)
        for thread in threads:
            try:
                await self.update_thread(thread)
            except discord.HTTPException as exc:
                logger.warning("[ACTIVITY] Failed to update activity of thread %s: %s", thread.id, exc)
            except ConfigurationError as exc:
                logger.error("[ACTIVITY] Can not update activity of thread %s: %s", thread.id, exc)

    async def update_thread(self, thread: discord.Thread) -> ThreadActivity:
        messages = await thread.history(limit=self.config.activity_message_limit).flatten()
        activity = determine_activity(messages, thread.owner_id, self.config)
        await self.helper.categorization.set_activity(thread, activity)
        return activity
