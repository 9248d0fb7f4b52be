"""Container of the long-lived services handed to the cogs at startup."""

from __future__ import annotations

from dataclasses import dataclass

from helpcord.database.database import Database
from helpcord.help.activity_updater import HelpThreadActivityUpdater
from helpcord.help.help_system_helper import HelpSystemHelper
from helpcord.moderation.moderation_flow import ModerationActionFlow
from helpcord.moderation.revocation import TemporaryActionRevoker
from helpcord.services.moderation_actions_store import ModerationActionsStore


@dataclass
class BotServices:
    database: Database
    help_helper: HelpSystemHelper
    activity_updater: HelpThreadActivityUpdater
    actions_store: ModerationActionsStore
    moderation_flow: ModerationActionFlow
    revoker: TemporaryActionRevoker

    async def shutdown(self) -> None:
        """Stop the periodic routines, then close the database."""
        await self.activity_updater.shutdown()
        await self.revoker.shutdown()
        await self.database.shutdown()
