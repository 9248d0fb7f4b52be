"""
Applies category and activity tags to live help threads.

Every mutation reads the thread's tags right before computing the change, so
no cached tag state is ever trusted. Nothing is written when the requested tag
is already the current one, which keeps us away from Discord's rate limits.
"""

from __future__ import annotations

from typing import Dict, List

import discord

from helpcord.configuration.help_system_config import HelpSystemConfig
from helpcord.datatypes.tag_datatypes import Label, TagAssignment, TagFamily, ThreadActivity
from helpcord.errors import ConfigurationError
from helpcord.help.tag_assignment import TagAssignmentEngine
from helpcord.help.tag_catalog import TagCatalog
from helpcord.util.logger import get_logger

logger = get_logger("thread_categorization")


def require_forum_tag(forum: discord.ForumChannel, tag_name: str) -> discord.ForumTag:
    """Return the tag of ``forum`` named exactly ``tag_name``.

    Raises:
        ConfigurationError: If the forum has no such tag.
    """
    for tag in forum.available_tags:
        if tag.name == tag_name:
            return tag
    raise ConfigurationError(
        f"The forum {forum.name} in guild {forum.guild.name} is missing the tag {tag_name}."
    )


class ThreadCategorizationService:
    """Reads, computes and writes the category and activity tags of help threads."""

    def __init__(self, config: HelpSystemConfig, catalog: TagCatalog | None = None) -> None:
        self.config = config
        self.catalog = catalog or TagCatalog.from_config(config)
        self.engine = TagAssignmentEngine(self.catalog)

    def is_help_forum_name(self, channel_name: str) -> bool:
        return self.config.help_forum_regex.fullmatch(channel_name) is not None

    def require_help_forum_of(self, thread: discord.Thread) -> discord.ForumChannel:
        forum = thread.parent
        if forum is None or not self.is_help_forum_name(forum.name):
            raise ValueError(f"Thread {thread.id} is not located in a help forum")
        return forum

    # --------------------------
    # Reads
    # --------------------------
    def get_applied_labels(self, thread: discord.Thread) -> List[Label]:
        return [Label.from_forum_tag(tag) for tag in thread.applied_tags]

    def get_current_category(self, thread: discord.Thread) -> Label | None:
        return self.engine.find_current(self.get_applied_labels(thread), TagFamily.CATEGORY)

    def get_current_activity(self, thread: discord.Thread) -> Label | None:
        return self.engine.find_current(self.get_applied_labels(thread), TagFamily.ACTIVITY)

    def get_current_activity_level(self, thread: discord.Thread) -> ThreadActivity | None:
        label = self.get_current_activity(thread)
        return ThreadActivity.from_tag_name(label.name) if label else None

    # --------------------------
    # Mutations
    # --------------------------
    async def set_category(self, thread: discord.Thread, category: str) -> TagAssignment:
        return await self.change_tag(thread, TagFamily.CATEGORY, category)

    async def set_activity(self, thread: discord.Thread, activity: ThreadActivity) -> TagAssignment:
        return await self.change_tag(thread, TagFamily.ACTIVITY, activity.tag_name)

    async def change_tag(self, thread: discord.Thread, family: TagFamily, tag_name: str) -> TagAssignment:
        """Make ``tag_name`` the thread's tag of ``family``.

        Applied tags the forum no longer offers are dropped from the written
        sequence. Errors from Discord propagate unchanged.
        """
        forum = self.require_help_forum_of(thread)
        forum_tags: Dict[int, discord.ForumTag] = {tag.id: tag for tag in forum.available_tags}

        current: List[Label] = []
        for label in self.get_applied_labels(thread):
            if label.tag_id in forum_tags:
                current.append(label)
            else:
                logger.warning(
                    "[CATEGORIZATION] Dropping tag '%s' from thread %s, forum %s no longer offers it",
                    label.name, thread.id, forum.name,
                )

        assignment = self.engine.compute_next_tags(
            current,
            family,
            tag_name,
            self.config.max_tags_per_thread,
            lambda name: Label.from_forum_tag(require_forum_tag(forum, name)),
        )
        if not assignment.changed:
            logger.debug("[CATEGORIZATION] Thread %s already tagged '%s', skipping", thread.id, tag_name)
            return assignment

        await thread.edit(applied_tags=[forum_tags[label.tag_id] for label in assignment.tags])
        logger.info(
            "[CATEGORIZATION] Set %s of thread %s to '%s', tags now %s",
            family, thread.id, tag_name, list(assignment.names),
        )
        return assignment
