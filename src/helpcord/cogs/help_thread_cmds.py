"""
Help thread commands cog for Helpcord.

Slash command group ``/help-thread`` usable inside threads of the help forum:
changing the category tag, renaming the thread and closing it.
"""

import discord
from discord import Option
from discord.ext import commands

from helpcord.datatypes.tag_datatypes import TagFamily
from helpcord.errors import ConfigurationError
from helpcord.help.help_system_helper import HelpSystemHelper
from helpcord.services.bot_services import BotServices
from helpcord.util.logger import get_logger

logger = get_logger("help_thread_cmds")

TITLE_MAX_LENGTH = 100

NOT_A_HELP_THREAD = "This command can only be used in threads of the help forum."


async def _category_choices(ctx: discord.AutocompleteContext):
    helper: HelpSystemHelper = ctx.cog.helper
    typed = (ctx.value or "").casefold()
    return [category for category in helper.config.categories if typed in category.casefold()]


class HelpThreadCog(commands.Cog):
    """Commands letting askers and helpers manage a help thread."""

    help_thread = discord.SlashCommandGroup("help-thread", "Manage the current help thread.")

    def __init__(self, discord_bot_instance, helper: HelpSystemHelper):
        self.bot = discord_bot_instance
        self.helper = helper
        logger.info("Help thread cog loaded")

    async def _require_managed_thread(self, ctx: discord.ApplicationContext) -> discord.Thread | None:
        """Return the thread if the command was used in a help thread by its owner or a moderator."""
        thread = ctx.channel
        if not self.helper.is_help_thread(thread):
            await ctx.respond(NOT_A_HELP_THREAD, ephemeral=True)
            return None

        is_owner = thread.owner_id == ctx.author.id
        can_manage = isinstance(ctx.author, discord.Member) and ctx.author.guild_permissions.manage_threads
        if not (is_owner or can_manage):
            await ctx.respond("Only the author of the thread or a moderator can do this.", ephemeral=True)
            return None
        return thread

    @help_thread.command(name="change-category", description="Change the category of this help thread.")
    async def change_category(
        self,
        ctx: discord.ApplicationContext,
        category: Option(str, "The new category.", autocomplete=_category_choices),  # type: ignore
    ) -> None:
        """Swap the category tag of the thread and ping the helpers of the new category."""
        thread = await self._require_managed_thread(ctx)
        if thread is None:
            return

        if not self.helper.categorization.catalog.is_member(TagFamily.CATEGORY, category):
            await ctx.respond(f"Unknown category '{category}'.", ephemeral=True)
            return

        # Refusals stay private; the announcement is posted separately
        await ctx.defer(ephemeral=True)
        try:
            assignment = await self.helper.categorization.set_category(thread, category)
        except ConfigurationError as exc:
            logger.error("[HELP THREAD] %s", exc)
            await ctx.followup.send(str(exc), ephemeral=True)
            return

        if not assignment.changed:
            await ctx.followup.send(f"The thread already has the category **{category}**.", ephemeral=True)
            return

        message = f"Changed the category to **{category}**."
        helper_role = self.helper.handle_find_role_for_category(category, ctx.guild)
        if helper_role is not None:
            message += f" {helper_role.mention}, somebody needs your help."
        await ctx.send(message, allowed_mentions=discord.AllowedMentions(roles=True))
        await ctx.followup.send(f"Category set to **{category}**.", ephemeral=True)

    @help_thread.command(name="change-title", description="Change the title of this help thread.")
    async def change_title(
        self,
        ctx: discord.ApplicationContext,
        title: Option(str, "The new title.", max_length=TITLE_MAX_LENGTH),  # type: ignore
    ) -> None:
        thread = await self._require_managed_thread(ctx)
        if thread is None:
            return

        title = title.strip()
        if not title:
            await ctx.respond("The title can not be empty.", ephemeral=True)
            return

        if await self.helper.rename_thread(thread, title):
            await ctx.respond(f"Changed the title to **{title}**.")
        else:
            await ctx.respond("The thread already has this title.", ephemeral=True)

    @help_thread.command(name="close", description="Close this help thread once your question is answered.")
    async def close(self, ctx: discord.ApplicationContext) -> None:
        thread = await self._require_managed_thread(ctx)
        if thread is None:
            return

        embed = discord.Embed(
            description="Thread closed. Thanks for asking and thanks for helping.",
            color=discord.Color.green(),
        )
        await ctx.respond(embed=embed)
        await thread.edit(archived=True)
        logger.info("[HELP THREAD] %s closed thread %s (%s)", ctx.author, thread.name, thread.id)


def setup(discord_bot_instance, services: BotServices):
    """Setup function for the cog."""
    discord_bot_instance.add_cog(HelpThreadCog(discord_bot_instance, services.help_helper))
