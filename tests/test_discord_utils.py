import re
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

from discord_fakes import FakeRole
from helpcord.util import discord_utils

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_duration_choices_end_with_permanent():
    assert discord_utils.DURATION_CHOICES[0] == "10 minutes"
    assert discord_utils.DURATION_CHOICES[-1] == discord_utils.PERMANENT_DURATION


def test_compute_temporary_data():
    data = discord_utils.compute_temporary_data("3 hours", now=NOW)

    assert data.expires_at == NOW + timedelta(hours=3)
    assert data.duration == "3 hours"
    assert discord_utils.describe_duration(data) == "3 hours"


def test_permanent_duration_has_no_expiry():
    assert discord_utils.compute_temporary_data("permanent", now=NOW) is None
    assert discord_utils.describe_duration(None) == "permanent"


def test_unknown_duration_raises():
    with pytest.raises(ValueError):
        discord_utils.compute_temporary_data("2 fortnights")


def test_role_matching_uses_full_match():
    guild = SimpleNamespace(roles=[FakeRole(1, "Not Muted"), FakeRole(2, "Muted")])
    pattern = re.compile("Muted")

    assert discord_utils.find_role_matching(guild, pattern).position == 2
    assert discord_utils.has_role_matching(SimpleNamespace(roles=[FakeRole(1, "Not Muted")]), pattern) is False


@pytest.mark.asyncio
async def test_send_dm_safely_reports_success():
    user = SimpleNamespace(id=1, send=AsyncMock())

    assert await discord_utils.send_dm_safely(user, content="hello") is True
    user.send.assert_awaited_once_with(content="hello", embed=None)


@pytest.mark.asyncio
async def test_send_dm_safely_swallows_http_errors():
    error = discord.Forbidden(MagicMock(status=403, reason="Forbidden"), "Cannot send messages to this user")
    user = SimpleNamespace(id=1, send=AsyncMock(side_effect=error))

    assert await discord_utils.send_dm_safely(user, content="hello") is False
