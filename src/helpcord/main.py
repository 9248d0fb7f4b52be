"""
Helpcord
========

A Discord bot keeping a help forum organised: every help thread carries one
category tag and one activity tag, new threads get a short explanation, and
moderators get warn/kick/mute/quarantine/ban commands with an audit trail
and automatic lifting of temporary actions.
"""

import os
import sys
from pathlib import Path


def resolve_base_dir() -> Path:
    """Determine the base directory of the project.

    Resolution order:
    1. HELPCORD_HOME environment variable, if set.
    2. If running in a frozen/compiled context, use the executable's directory.
    3. Otherwise, assume running from source and use the grandparent of this file's directory.
    """
    if env_home := os.getenv("HELPCORD_HOME"):
        return Path(env_home).resolve()

    if getattr(sys, "frozen", False) or getattr(sys, "compiled", False):
        return Path(sys.argv[0]).resolve().parent

    return Path(__file__).resolve().parents[2]


BASE_DIR = resolve_base_dir()
os.chdir(BASE_DIR)

import asyncio
import discord
from dotenv import load_dotenv

from helpcord.configuration.app_configuration import AppConfig
from helpcord.database.database import Database
from helpcord.database.db_connection import db_connection
from helpcord.errors import ConfigurationError
from helpcord.help.activity_updater import HelpThreadActivityUpdater
from helpcord.help.help_system_helper import HelpSystemHelper
from helpcord.moderation.moderation_flow import ModerationActionFlow
from helpcord.moderation.revocation import TemporaryActionRevoker
from helpcord.services.bot_services import BotServices
from helpcord.services.help_threads_store import HelpThreadsStore
from helpcord.services.moderation_actions_store import ModerationActionsStore
from helpcord.util.logger import get_logger, handle_exception


logger = get_logger("main")


def load_environment() -> str:
    """Load environment variables and return the Discord bot token.

    Returns
    -------
    str
        Discord bot token extracted from the loaded environment.

    Raises
    ------
    SystemExit
        If the required ``DISCORD_BOT_TOKEN`` variable is missing.
    """
    load_dotenv(dotenv_path=BASE_DIR / ".env")
    token = os.getenv("DISCORD_BOT_TOKEN")
    if not token:
        logger.critical("'DISCORD_BOT_TOKEN' environment variable not set. Bot cannot start.")
        sys.exit(1)
    return token


def build_intents() -> discord.Intents:
    """Construct the Discord intents required by Helpcord.

    Members are needed to resolve moderation targets and to lift mutes,
    message content is not read at all.
    """
    intents = discord.Intents.default()
    intents.guilds = True
    intents.members = True
    intents.messages = True
    return intents


def build_services(app_config: AppConfig) -> BotServices:
    """Build every service from the configuration and wire them together.

    Raises
    ------
    ConfigurationError
        If a configuration section holds invalid values.
    """
    help_config = app_config.help_system
    moderation_config = app_config.moderation
    database_config = app_config.database

    database = Database(Path(database_config.path).resolve(), db_connection)
    actions_store = ModerationActionsStore(db_connection)
    help_helper = HelpSystemHelper(help_config, HelpThreadsStore(db_connection))

    return BotServices(
        database=database,
        help_helper=help_helper,
        activity_updater=HelpThreadActivityUpdater(help_helper),
        actions_store=actions_store,
        moderation_flow=ModerationActionFlow(moderation_config, actions_store),
        revoker=TemporaryActionRevoker(moderation_config, actions_store),
    )


def load_cogs(discord_bot_instance: discord.Bot, services: BotServices) -> None:
    """Register all operational cogs with the provided Discord bot instance."""
    from helpcord.cogs import events_listener, help_thread_cmds, help_thread_listener, moderation_cmds

    events_listener.setup(discord_bot_instance, services)
    help_thread_cmds.setup(discord_bot_instance, services)
    help_thread_listener.setup(discord_bot_instance, services)
    moderation_cmds.setup(discord_bot_instance, services)

    logger.info("All cogs loaded successfully.")


def create_bot(services: BotServices) -> discord.Bot:
    """Instantiate the Discord bot and register all cogs."""
    bot = discord.Bot(intents=build_intents())
    load_cogs(bot, services)
    return bot


async def start_bot(bot: discord.Bot, token: str) -> None:
    """Start the Discord bot and handle lifecycle logging around the connection."""
    logger.info("Attempting to connect to Discord…")
    try:
        await bot.start(token)
    except asyncio.CancelledError:
        logger.info("Discord bot start cancelled; shutting down")
    finally:
        logger.info("Discord bot start routine finished.")


async def shutdown_runtime(bot: discord.Bot | None, services: BotServices) -> None:
    """Gracefully stop the Discord bot, the periodic routines and the database."""
    if bot is not None and not bot.is_closed():
        await bot.close()

    try:
        await services.shutdown()
    except Exception as exc:
        logger.exception("Error during services shutdown: %s", exc)

    logger.info("Shutdown complete.")


async def async_main() -> int:
    """Bootstrap configuration, database and bot, returning an exit code.

    Returns
    -------
    int
        Process exit code reflecting success or failure of initialization.
    """
    token = load_environment()

    try:
        services = build_services(AppConfig())
    except ConfigurationError as exc:
        logger.critical("Invalid configuration: %s", exc)
        return 1

    logger.info("Initializing database...")
    if not await services.database.initialize():
        logger.critical("Failed to initialize database.")
        return 1

    bot = None
    exit_code = 0
    try:
        bot = create_bot(services)
        await start_bot(bot, token)
    except Exception as exc:
        logger.critical("Discord bot runtime error: %s", exc)
        exit_code = 1
    finally:
        await shutdown_runtime(bot, services)

    return exit_code


def main() -> int:
    """Entrypoint that orchestrates the async runtime and returns the process code."""
    sys.excepthook = handle_exception
    logger.info("Starting Helpcord…")
    try:
        return asyncio.run(async_main())
    except KeyboardInterrupt:
        logger.info("Shutdown requested by user.")
        return 0
    except SystemExit as exit_exc:
        code = exit_exc.code
        if isinstance(code, int):
            return code
        logger.warning("SystemExit.code is not an int (%r); defaulting to 1", code)
        return 1


if __name__ == "__main__":
    print(f"Exited with code: {main()}")
