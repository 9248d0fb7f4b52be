"""Periodic per-guild background routine.

Runs a coroutine for every guild of the bot on a fixed interval. A failure in
one guild is logged and does not stop the sweep of the others.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable

import discord

from helpcord.util.logger import get_logger

logger = get_logger("periodic_scheduler")


class PeriodicGuildScheduler:
    """
    Reusable runner for periodic per-guild routines.

    Args:
        name: Human-readable name used in log lines.
        per_guild_coro: Async callable receiving one ``discord.Guild``.
        interval_seconds: Pause between the end of one sweep and the next.
    """

    def __init__(
        self,
        name: str,
        per_guild_coro: Callable[[discord.Guild], Awaitable[Any]],
        interval_seconds: float,
    ) -> None:
        self.name = name
        self._per_guild_coro = per_guild_coro
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self, bot: discord.Bot) -> None:
        """Run the routine for every guild once."""
        for guild in bot.guilds:
            try:
                await self._per_guild_coro(guild)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("[%s] Routine failed for guild %s", self.name, guild.name)

    async def _run_loop(self, bot: discord.Bot) -> None:
        logger.info("[%s] Starting periodic routine (interval=%.1fs)", self.name, self.interval_seconds)
        try:
            while True:
                await self.run_once(bot)
                await asyncio.sleep(self.interval_seconds)
        except asyncio.CancelledError:
            logger.info("[%s] Periodic routine cancelled", self.name)
            raise

    def start(self, bot: discord.Bot) -> None:
        """Start the background task unless it is already running."""
        if self.running:
            logger.debug("[%s] Routine already running", self.name)
            return
        self._task = asyncio.create_task(self._run_loop(bot), name=f"helpcord-{self.name}")

    async def shutdown(self) -> None:
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        logger.info("[%s] Scheduler shutdown complete", self.name)
