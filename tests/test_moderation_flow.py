"""Tests for ModerationActionFlow.issue_moderation_action."""

from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_fakes import FakeRole, make_guild, make_member
from helpcord.datatypes.action_datatypes import ModerationActionRecord, ModerationActionType
from helpcord.errors import AuthorizationDenied, ConfigurationError
from helpcord.moderation.action_embed import DM_FAILED_QUALIFIER
from helpcord.moderation.moderation_flow import ModerationActionFlow

MUTED = FakeRole(position=5, name="Muted", id=500)
QUARANTINED = FakeRole(position=6, name="Quarantined", id=600)


class FakeActionsStore:
    def __init__(self, calls):
        self.calls = calls
        self.records = []

    async def add_action(self, record: ModerationActionRecord) -> ModerationActionRecord:
        self.calls.append("store")
        self.records.append(record)
        return record.with_id(len(self.records))


@pytest.fixture()
def calls():
    return []


@pytest.fixture()
def guild(calls):
    guild = make_guild(roles=[MUTED, QUARANTINED])
    guild.me = make_member(2, guild, FakeRole(position=30, name="Bot"), manage_roles=True,
                           ban_members=True, kick_members=True, moderate_members=True)
    guild.ban = AsyncMock(side_effect=lambda *a, **k: calls.append("ban"))
    guild.kick = AsyncMock(side_effect=lambda *a, **k: calls.append("kick"))
    return guild


@pytest.fixture()
def actor(guild):
    return make_member(1, guild, FakeRole(position=20, name="Moderator"), manage_roles=True,
                       ban_members=True, kick_members=True, moderate_members=True)


@pytest.fixture()
def target(guild, calls):
    member = make_member(3, guild, FakeRole(position=1, name="Member"))
    member.send = AsyncMock(side_effect=lambda *a, **k: calls.append("dm"))
    member.add_roles = AsyncMock(side_effect=lambda *a, **k: calls.append("add_roles"))
    return member


@pytest.fixture()
def store(calls):
    return FakeActionsStore(calls)


@pytest.fixture()
def flow(moderation_config, store):
    return ModerationActionFlow(moderation_config, store)


@pytest.mark.asyncio
async def test_mute_runs_steps_in_order(flow, actor, target, store, calls):
    feedback = await flow.issue_moderation_action(actor, target, ModerationActionType.MUTE, "1 hour", "spam")

    assert calls == ["dm", "store", "add_roles"]
    target.add_roles.assert_awaited_once_with(MUTED, reason="spam")
    assert feedback.has_sent_dm is True
    assert feedback.description == "The mute duration is: 1 hour"

    record = store.records[0]
    assert record.action_type is ModerationActionType.MUTE
    assert (record.guild_id, record.author_id, record.target_id) == (1, 1, 3)
    assert record.reason == "spam"
    assert record.expires_at is not None


@pytest.mark.asyncio
async def test_already_muted_target_has_no_side_effects(flow, actor, target, store, calls):
    target.roles.append(MUTED)

    with pytest.raises(AuthorizationDenied, match="already muted"):
        await flow.issue_moderation_action(actor, target, ModerationActionType.MUTE, "1 hour", "spam")

    assert calls == []
    target.send.assert_not_awaited()
    assert store.records == []


@pytest.mark.asyncio
async def test_failed_dm_adds_qualifier_and_still_records(flow, actor, target, store, calls):
    target.send = AsyncMock(
        side_effect=discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Cannot send messages to this user")
    )

    feedback = await flow.issue_moderation_action(actor, target, ModerationActionType.MUTE, "1 day", "spam")

    assert feedback.has_sent_dm is False
    assert feedback.description == "The mute duration is: 1 day" + DM_FAILED_QUALIFIER
    assert calls == ["store", "add_roles"]
    assert len(store.records) == 1


@pytest.mark.asyncio
async def test_permanent_ban(flow, actor, target, guild, store, calls):
    feedback = await flow.issue_moderation_action(actor, target, ModerationActionType.BAN, "permanent", "raid")

    assert calls == ["dm", "store", "ban"]
    guild.ban.assert_awaited_once()
    assert guild.ban.await_args.kwargs["reason"] == "raid"
    assert store.records[0].expires_at is None
    assert feedback.description == "The ban duration is: permanent"


@pytest.mark.asyncio
async def test_kick_ignores_duration(flow, actor, target, guild, store, calls):
    feedback = await flow.issue_moderation_action(actor, target, ModerationActionType.KICK, "1 hour", "rude")

    assert calls == ["dm", "store", "kick"]
    guild.kick.assert_awaited_once_with(target, reason="rude")
    assert store.records[0].expires_at is None
    assert feedback.description == "The user has been kicked."


@pytest.mark.asyncio
async def test_warn_only_notifies_and_records(flow, actor, target, store, calls):
    await flow.issue_moderation_action(actor, target, ModerationActionType.WARN, None, "off topic")

    assert calls == ["dm", "store"]
    target.add_roles.assert_not_awaited()


@pytest.mark.asyncio
async def test_quarantine_adds_quarantine_role(flow, actor, target):
    await flow.issue_moderation_action(actor, target, ModerationActionType.QUARANTINE, None, "scam links")

    target.add_roles.assert_awaited_once_with(QUARANTINED, reason="scam links")


@pytest.mark.asyncio
async def test_missing_restriction_role_is_a_configuration_error(flow, actor, target, guild, store, calls):
    guild.roles = [QUARANTINED]

    with pytest.raises(ConfigurationError):
        await flow.issue_moderation_action(actor, target, ModerationActionType.MUTE, "1 hour", "spam")

    assert calls == []


@pytest.mark.asyncio
async def test_failed_authoritative_change_propagates(flow, actor, target, guild, store):
    guild.ban = AsyncMock(side_effect=discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Missing Permissions"))

    with pytest.raises(discord.Forbidden):
        await flow.issue_moderation_action(actor, target, ModerationActionType.BAN, "1 day", "raid")

    # the audit record is written before the change on Discord
    assert len(store.records) == 1
