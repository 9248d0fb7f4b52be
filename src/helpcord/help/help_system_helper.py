"""
Helper offering the help forum operations used by the cogs.

Tag changes are delegated to :class:`ThreadCategorizationService`; this
module adds the surrounding glue such as forum lookup, helper roles, title
renames, the welcome message of new threads and their persistence.
"""

from __future__ import annotations

from typing import List

import discord

from helpcord.configuration.help_system_config import HelpSystemConfig
from helpcord.help.thread_categorization import ThreadCategorizationService
from helpcord.services.help_threads_store import HelpThreadsStore
from helpcord.util.logger import get_logger

logger = get_logger("help_system_helper")

AMBIENT_COLOR = discord.Color.from_rgb(255, 255, 165)

CLOSE_COMMAND_MENTION = "`/help-thread close`"

EXPLANATION_INTRO = "While you are waiting for getting help, here are some tips to improve your experience:"

EXPLANATION_TIPS = (
    "Code is much easier to read if posted with **syntax highlighting** and proper formatting.",
    "If nobody is calling back, that usually means that your question was **not well asked** and "
    "hence nobody feels confident enough answering. Try to use your time to elaborate, "
    "**provide details**, context, more code, examples and maybe some screenshots. "
    "With enough info, someone knows the answer for sure.",
    f"Don't forget to close your thread using the command {CLOSE_COMMAND_MENTION} "
    "when your question has been answered, thanks.",
)


class HelpSystemHelper:
    """Entry point of the cogs into the help system."""

    def __init__(
        self,
        config: HelpSystemConfig,
        threads_store: HelpThreadsStore,
        categorization: ThreadCategorizationService | None = None,
    ) -> None:
        self.config = config
        self.threads_store = threads_store
        self.categorization = categorization or ThreadCategorizationService(config)

    # --------------------------
    # Forum matching
    # --------------------------
    def is_help_forum_name(self, channel_name: str) -> bool:
        return self.categorization.is_help_forum_name(channel_name)

    def is_help_thread(self, channel: object) -> bool:
        if not isinstance(channel, discord.Thread):
            return False
        parent = channel.parent
        return isinstance(parent, discord.ForumChannel) and self.is_help_forum_name(parent.name)

    def handle_require_help_forum(self, guild: discord.Guild) -> discord.ForumChannel | None:
        """Return the help forum of ``guild``, logging the pattern if there is none."""
        forum = discord.utils.find(lambda channel: self.is_help_forum_name(channel.name), guild.forum_channels)
        if forum is None:
            logger.warning(
                "[HELP SYSTEM] Guild %s has no forum matching the pattern '%s'",
                guild.name, self.config.help_forum_pattern,
            )
        return forum

    @staticmethod
    def get_active_threads_in(forum: discord.ForumChannel) -> List[discord.Thread]:
        return [thread for thread in forum.threads if not thread.archived]

    # --------------------------
    # Roles and titles
    # --------------------------
    def handle_find_role_for_category(self, category: str, guild: discord.Guild) -> discord.Role | None:
        role_name = (category + self.config.category_role_suffix).casefold()
        role = discord.utils.find(lambda candidate: candidate.name.casefold() == role_name, guild.roles)
        if role is None:
            logger.warning("[HELP SYSTEM] Unable to find the helper role '%s'.", category + self.config.category_role_suffix)
        return role

    @staticmethod
    async def rename_thread(thread: discord.Thread, title: str) -> bool:
        """Rename the thread; returns False without any API call if the title is unchanged."""
        if thread.name == title:
            return False
        await thread.edit(name=title)
        return True

    # --------------------------
    # New threads
    # --------------------------
    async def write_help_thread_to_database(self, author_id: int, thread: discord.Thread) -> None:
        # Threads older than 2022 carry no creation time
        created_at = thread.created_at or discord.utils.snowflake_time(thread.id)
        await self.threads_store.upsert(author_id=author_id, channel_id=thread.id, created_at=created_at)

    @staticmethod
    def build_explanation_embeds() -> List[discord.Embed]:
        return [discord.Embed(description=tip, color=AMBIENT_COLOR) for tip in EXPLANATION_TIPS]

    async def send_explanation_message(self, thread: discord.Thread) -> discord.Message:
        return await thread.send(EXPLANATION_INTRO, embeds=self.build_explanation_embeds())
