"""
Immutable configuration sections.

Each section is a frozen dataclass built once from the YAML mapping and then
handed to the components that need it. ``from_mapping`` fills missing keys
with defaults and raises :class:`ConfigurationError` for values that cannot
work at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Tuple

from helpcord.errors import ConfigurationError

# Discord forums accept at most five tags per post
DEFAULT_MAX_TAGS_PER_THREAD = 5

DEFAULT_CATEGORIES = (
    "Frameworks",
    "Database",
    "Algorithms",
    "Build Tools",
    "IDE",
    "Other",
)


def _positive_int(mapping: Mapping[str, Any], key: str, default: int) -> int:
    raw = mapping.get(key, default)
    try:
        value = int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{key}' must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"'{key}' must be positive, got {value}")
    return value


def _compile_pattern(key: str, pattern: str) -> re.Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigurationError(f"'{key}' is not a valid pattern: {pattern!r} ({exc})") from exc


@dataclass(frozen=True)
class HelpSystemConfig:
    """Settings of the help forum system.

    Attributes:
        help_forum_pattern: Regex a forum name must fully match to count as a help forum.
        categories: Category tag names, most specific first.
        category_role_suffix: Appended to a category name to find its helper role.
        max_tags_per_thread: Platform limit of tags on a single thread.
        activity_check_interval_seconds: Delay between two activity sweeps.
        activity_message_limit: Messages inspected per thread during a sweep.
        activity_recent_window_minutes: Window counted towards high activity.
        activity_high_message_threshold: Messages within the window that make a thread active.
    """

    help_forum_pattern: str = "questions"
    categories: Tuple[str, ...] = DEFAULT_CATEGORIES
    category_role_suffix: str = " - Helper"
    max_tags_per_thread: int = DEFAULT_MAX_TAGS_PER_THREAD
    activity_check_interval_seconds: int = 3600
    activity_message_limit: int = 50
    activity_recent_window_minutes: int = 30
    activity_high_message_threshold: int = 10
    help_forum_regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "help_forum_regex", _compile_pattern("help_forum_pattern", self.help_forum_pattern))

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "HelpSystemConfig":
        categories = mapping.get("categories", DEFAULT_CATEGORIES)
        if not isinstance(categories, (list, tuple)) or not all(isinstance(name, str) for name in categories):
            raise ConfigurationError(f"'categories' must be a list of names, got {categories!r}")
        if not categories:
            raise ConfigurationError("'categories' must name at least one category")

        return cls(
            help_forum_pattern=str(mapping.get("help_forum_pattern", cls.help_forum_pattern)),
            categories=tuple(categories),
            category_role_suffix=str(mapping.get("category_role_suffix", cls.category_role_suffix)),
            max_tags_per_thread=_positive_int(mapping, "max_tags_per_thread", DEFAULT_MAX_TAGS_PER_THREAD),
            activity_check_interval_seconds=_positive_int(mapping, "activity_check_interval_seconds", 3600),
            activity_message_limit=_positive_int(mapping, "activity_message_limit", 50),
            activity_recent_window_minutes=_positive_int(mapping, "activity_recent_window_minutes", 30),
            activity_high_message_threshold=_positive_int(mapping, "activity_high_message_threshold", 10),
        )


@dataclass(frozen=True)
class ModerationConfig:
    """Settings of the moderation commands.

    Attributes:
        muted_role_pattern: Regex fully matching the name of the muted role.
        quarantined_role_pattern: Regex fully matching the name of the quarantined role.
        reason_max_length: Longest accepted reason, the audit-log limit of Discord.
        revocation_interval_seconds: Delay between two sweeps for expired actions.
    """

    muted_role_pattern: str = "Muted"
    quarantined_role_pattern: str = "Quarantined"
    reason_max_length: int = 512
    revocation_interval_seconds: int = 300
    muted_role_regex: re.Pattern[str] = field(init=False, repr=False, compare=False)
    quarantined_role_regex: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "muted_role_regex", _compile_pattern("muted_role_pattern", self.muted_role_pattern))
        object.__setattr__(
            self,
            "quarantined_role_regex",
            _compile_pattern("quarantined_role_pattern", self.quarantined_role_pattern),
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ModerationConfig":
        return cls(
            muted_role_pattern=str(mapping.get("muted_role_pattern", cls.muted_role_pattern)),
            quarantined_role_pattern=str(mapping.get("quarantined_role_pattern", cls.quarantined_role_pattern)),
            reason_max_length=_positive_int(mapping, "reason_max_length", 512),
            revocation_interval_seconds=_positive_int(mapping, "revocation_interval_seconds", 300),
        )


@dataclass(frozen=True)
class DatabaseConfig:
    path: Path = Path("./data/helpcord.db")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "DatabaseConfig":
        return cls(path=Path(str(mapping.get("path", cls.path))).resolve())
