"""
Moderation commands cog for Helpcord.

Every action command is a thin wrapper around
:meth:`ModerationActionFlow.issue_moderation_action`, where the checks, the
direct message, the audit record and the Discord side happen. ``/audit`` reads
the recorded actions back.
"""

import discord
from discord import Option
from discord.ext import commands

from helpcord.datatypes.action_datatypes import ModerationActionType
from helpcord.errors import AuthorizationDenied, ConfigurationError
from helpcord.moderation import action_embed
from helpcord.moderation.moderation_flow import ModerationActionFlow
from helpcord.services.bot_services import BotServices
from helpcord.services.moderation_actions_store import ModerationActionsStore
from helpcord.util import discord_utils
from helpcord.util.logger import get_logger

logger = get_logger("moderation_cmds")

DEFAULT_REASON = "No reason provided."


class ModerationCog(commands.Cog):
    """Cog containing all moderation-related commands."""

    def __init__(
        self,
        discord_bot_instance,
        moderation_flow: ModerationActionFlow,
        actions_store: ModerationActionsStore,
    ):
        self.bot = discord_bot_instance
        self.moderation_flow = moderation_flow
        self.actions_store = actions_store
        logger.info("Moderation cog loaded")

    async def _handle_moderation_command(
        self,
        ctx: discord.ApplicationContext,
        user: discord.Member,
        action_type: ModerationActionType,
        reason: str,
        duration: str | None = None,
    ) -> None:
        """
        Common handler for moderation commands.

        Refusals are answered ephemerally; Discord errors propagate to the
        global command error handler.
        """
        if not isinstance(user, discord.Member):
            await ctx.respond("This user is not a member of the server.", ephemeral=True)
            return

        await ctx.defer(ephemeral=True)
        try:
            feedback = await self.moderation_flow.issue_moderation_action(
                ctx.author, user, action_type, duration, reason
            )
        except AuthorizationDenied as exc:
            await ctx.followup.send(exc.message, ephemeral=True)
            return
        except ConfigurationError as exc:
            logger.error("[MODERATION] %s", exc)
            await ctx.followup.send(str(exc), ephemeral=True)
            return

        await ctx.followup.send(embed=feedback.embed)

    @commands.slash_command(name="warn", description="Warn a user for a specified reason.")
    @discord.default_permissions(moderate_members=True)
    async def warn(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.Member, "The user to warn.", required=True),  # type: ignore
        reason: Option(str, "Reason for the warning.", default=DEFAULT_REASON),  # type: ignore
    ) -> None:
        await self._handle_moderation_command(ctx, user, ModerationActionType.WARN, reason)

    @commands.slash_command(name="kick", description="Kick a user from the server.")
    @discord.default_permissions(kick_members=True)
    async def kick(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.Member, "The user to kick.", required=True),  # type: ignore
        reason: Option(str, "Reason for the kick.", default=DEFAULT_REASON),  # type: ignore
    ) -> None:
        await self._handle_moderation_command(ctx, user, ModerationActionType.KICK, reason)

    @commands.slash_command(name="mute", description="Mute a user, optionally for a limited time.")
    @discord.default_permissions(manage_roles=True)
    async def mute(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.Member, "The user to mute.", required=True),  # type: ignore
        duration: Option(str, "Duration of the mute.", choices=discord_utils.DURATION_CHOICES, default="1 hour"),  # type: ignore
        reason: Option(str, "Reason for the mute.", default=DEFAULT_REASON),  # type: ignore
    ) -> None:
        await self._handle_moderation_command(ctx, user, ModerationActionType.MUTE, reason, duration)

    @commands.slash_command(name="quarantine", description="Restrict a user to the quarantine area of the server.")
    @discord.default_permissions(manage_roles=True)
    async def quarantine(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.Member, "The user to quarantine.", required=True),  # type: ignore
        reason: Option(str, "Reason for the quarantine.", default=DEFAULT_REASON),  # type: ignore
    ) -> None:
        await self._handle_moderation_command(ctx, user, ModerationActionType.QUARANTINE, reason)

    @commands.slash_command(name="ban", description="Ban a user from the server.")
    @discord.default_permissions(ban_members=True)
    async def ban(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.Member, "The user to ban.", required=True),  # type: ignore
        duration: Option(str, "Duration of the ban.", choices=discord_utils.DURATION_CHOICES, default=discord_utils.PERMANENT_DURATION),  # type: ignore
        reason: Option(str, "Reason for the ban.", default=DEFAULT_REASON),  # type: ignore
    ) -> None:
        await self._handle_moderation_command(ctx, user, ModerationActionType.BAN, reason, duration)

    @commands.slash_command(name="audit", description="Show the recorded moderation actions against a user.")
    @discord.default_permissions(moderate_members=True)
    async def audit(
        self,
        ctx: discord.ApplicationContext,
        user: Option(discord.User, "The user to look up.", required=True),  # type: ignore
    ) -> None:
        await ctx.defer(ephemeral=True)
        actions = await self.actions_store.get_actions_by_target(ctx.guild.id, user.id)
        logger.debug("[MODERATION] %s looked up %d actions against %s", ctx.author, len(actions), user)
        await ctx.followup.send(embed=action_embed.create_history_embed(user, actions), ephemeral=True)


def setup(discord_bot_instance, services: BotServices):
    """Setup function for the cog."""
    discord_bot_instance.add_cog(
        ModerationCog(discord_bot_instance, services.moderation_flow, services.actions_store)
    )
