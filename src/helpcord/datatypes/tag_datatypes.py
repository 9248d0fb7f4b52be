"""
Tag types for help forum threads.

A thread carries an ordered tuple of :class:`Label`; index 0 is the highest
priority tag. Which family a label belongs to is never stored on the label,
it is looked up by name in the :class:`~helpcord.help.tag_catalog.TagCatalog`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import discord


class TagFamily(Enum):
    """Mutually exclusive tag groups; a thread holds at most one tag of each."""

    CATEGORY = "category"
    ACTIVITY = "activity"

    def __str__(self) -> str:
        return self.value


class ThreadActivity(Enum):
    """Engagement level of a help thread, mapped to the forum tag it is shown as.

    Declaration order is the priority order of the activity family.
    """

    LOW = "Nobody helped yet"
    MEDIUM = "Needs attention"
    HIGH = "Active"

    @property
    def tag_name(self) -> str:
        return self.value

    @classmethod
    def from_tag_name(cls, tag_name: str) -> "ThreadActivity | None":
        for activity in cls:
            if activity.tag_name == tag_name:
                return activity
        return None


@dataclass(frozen=True, slots=True)
class Label:
    """A forum tag applied to (or available for) a thread.

    Attributes:
        tag_id: Platform-assigned snowflake of the tag.
        name: Display name, unique within the parent forum.
    """

    tag_id: int
    name: str

    @classmethod
    def from_forum_tag(cls, tag: discord.ForumTag) -> "Label":
        return cls(tag_id=tag.id, name=tag.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class TagAssignment:
    """Outcome of a tag assignment.

    Attributes:
        tags: The tag sequence the thread should carry, in priority order.
        changed: False when the requested tag was already the current one;
            the caller must not write anything back in that case.
    """

    tags: Tuple[Label, ...]
    changed: bool

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(label.name for label in self.tags)
