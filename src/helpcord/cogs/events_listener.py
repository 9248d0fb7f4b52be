"""Event listener Cog for Helpcord.

This cog handles bot lifecycle events (on_ready) and command error handling.
"""

import discord
from discord.ext import commands

from helpcord.services.bot_services import BotServices
from helpcord.util.logger import get_logger

logger = get_logger("events_listener")

COMMAND_ERROR_MESSAGE = "A :bug: showed up while running this command."


class EventsListenerCog(commands.Cog):
    """Cog containing bot lifecycle and command error handlers."""

    def __init__(self, discord_bot_instance, services: BotServices):
        """
        Initialize the events listener cog.

        Parameters
        ----------
        discord_bot_instance:
            The Discord bot instance to attach this cog to.
        services:
            Services whose periodic routines start once the bot is connected.
        """
        self.bot = discord_bot_instance
        self.services = services
        logger.info("Events listener cog loaded")

    @commands.Cog.listener(name="on_ready")
    async def on_ready(self):
        """
        Handle bot startup.

        This method:
        1. Updates the bot's Discord presence
        2. Starts the help thread activity updater
        3. Starts the revocation of expired temporary actions

        on_ready may fire again after a reconnect; the schedulers ignore a second start.
        """
        if self.bot.user:
            await self.bot.change_presence(
                status=discord.Status.online,
                activity=discord.Activity(type=discord.ActivityType.watching, name="the help forum"),
            )
            logger.info(f"Bot connected as {self.bot.user} (ID: {self.bot.user.id})")
        else:
            logger.warning("Bot partially connected, but user information not yet available.")

        self.services.activity_updater.start(self.bot)
        self.services.revoker.start(self.bot)

    @commands.Cog.listener(name="on_application_command_error")
    async def on_application_command_error(self, ctx: discord.ApplicationContext, error: discord.DiscordException):
        """
        Global error handler for all application commands.
        Logs the error and sends a generic error message to the user.
        """
        if isinstance(error, commands.CommandNotFound):
            return

        original = getattr(error, "original", error)
        logger.error(
            "[Error] Error in command '%s': %s",
            getattr(ctx.command, "qualified_name", "<unknown>"), original,
            exc_info=original,
        )

        try:
            await ctx.respond(COMMAND_ERROR_MESSAGE, ephemeral=True)
        except discord.InteractionResponded:
            await ctx.followup.send(COMMAND_ERROR_MESSAGE, ephemeral=True)


def setup(discord_bot_instance, services: BotServices):
    """Register the EventsListenerCog with the bot."""
    discord_bot_instance.add_cog(EventsListenerCog(discord_bot_instance, services))
