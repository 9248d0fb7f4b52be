"""Listener welcoming new threads of the help forum."""

import discord
from discord.ext import commands

from helpcord.datatypes.tag_datatypes import ThreadActivity
from helpcord.errors import ConfigurationError
from helpcord.help.help_system_helper import HelpSystemHelper
from helpcord.services.bot_services import BotServices
from helpcord.util.logger import get_logger

logger = get_logger("help_thread_listener")


class HelpThreadListenerCog(commands.Cog):
    """Persists new help threads, explains the help system and tags them as unanswered."""

    def __init__(self, discord_bot_instance, helper: HelpSystemHelper):
        self.bot = discord_bot_instance
        self.helper = helper
        logger.info("Help thread listener cog loaded")

    @commands.Cog.listener(name="on_thread_create")
    async def on_thread_create(self, thread: discord.Thread):
        if not self.helper.is_help_thread(thread):
            return

        logger.debug("[HELP LISTENER] New help thread %s (%s) by %s", thread.name, thread.id, thread.owner_id)
        await self.helper.write_help_thread_to_database(thread.owner_id, thread)
        await self.helper.send_explanation_message(thread)
        try:
            await self.helper.categorization.set_activity(thread, ThreadActivity.LOW)
        except ConfigurationError as exc:
            logger.error("[HELP LISTENER] %s", exc)


def setup(discord_bot_instance, services: BotServices):
    """Register the HelpThreadListenerCog with the bot."""
    discord_bot_instance.add_cog(HelpThreadListenerCog(discord_bot_instance, services.help_helper))
