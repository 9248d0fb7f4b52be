"""Small stand-ins for the py-cord objects the tests need."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import SimpleNamespace
from typing import List
from unittest.mock import AsyncMock


@dataclass(order=True)
class FakeRole:
    """Role ordered by position, like ``discord.Role``."""

    position: int
    name: str = field(default="role", compare=False)
    id: int = field(default=0, compare=False)

    @property
    def mention(self) -> str:
        return f"<@&{self.id}>"


def make_permissions(**granted) -> SimpleNamespace:
    names = ("moderate_members", "kick_members", "manage_roles", "ban_members", "manage_threads")
    return SimpleNamespace(**{name: granted.get(name, False) for name in names})


def make_guild(guild_id: int = 1, owner_id: int = 999, roles: List[FakeRole] | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        id=guild_id,
        name="Test Guild",
        owner_id=owner_id,
        roles=roles or [],
        me=None,
        ban=AsyncMock(),
        kick=AsyncMock(),
        unban=AsyncMock(),
        get_member=lambda member_id: None,
    )


def make_member(
    member_id: int,
    guild: SimpleNamespace,
    top_role: FakeRole,
    roles: List[FakeRole] | None = None,
    **permissions,
) -> SimpleNamespace:
    return SimpleNamespace(
        id=member_id,
        guild=guild,
        display_name=f"member-{member_id}",
        mention=f"<@{member_id}>",
        top_role=top_role,
        roles=roles if roles is not None else [top_role],
        guild_permissions=make_permissions(**permissions),
        send=AsyncMock(),
        add_roles=AsyncMock(),
        remove_roles=AsyncMock(),
    )


def make_forum_tag(tag_id: int, name: str) -> SimpleNamespace:
    return SimpleNamespace(id=tag_id, name=name)


class FakeThread:
    """Forum thread whose ``edit`` applies the new tags like Discord does."""

    def __init__(self, forum, applied_tags, thread_id: int = 100, owner_id: int = 7) -> None:
        self.id = thread_id
        self.name = "How do I connect to my database?"
        self.parent = forum
        self.owner_id = owner_id
        self.applied_tags = list(applied_tags)
        self.edits: list = []

    async def edit(self, **kwargs):
        self.edits.append(kwargs)
        if "applied_tags" in kwargs:
            self.applied_tags = list(kwargs["applied_tags"])
        if "name" in kwargs:
            self.name = kwargs["name"]
        return self


def make_forum(tag_names, name: str = "questions") -> SimpleNamespace:
    tags = [make_forum_tag(index + 1, tag_name) for index, tag_name in enumerate(tag_names)]
    return SimpleNamespace(name=name, available_tags=tags, guild=SimpleNamespace(name="Test Guild"), threads=[])


def tags_named(forum, *names):
    by_name = {tag.name: tag for tag in forum.available_tags}
    return [by_name[name] for name in names]
