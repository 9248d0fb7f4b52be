"""
Static knowledge of the two tag families of help threads.

The category family comes from configuration, ordered most specific first.
The activity family is fixed by :class:`ThreadActivity`. Within a family a
lower rank means a higher priority.
"""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Tuple

from helpcord.configuration.help_system_config import HelpSystemConfig
from helpcord.datatypes.tag_datatypes import TagFamily, ThreadActivity
from helpcord.errors import ConfigurationError


class TagCatalog:
    """Immutable lookup of tag names per family and their priority ranks."""

    def __init__(self, category_names: Iterable[str]) -> None:
        categories = tuple(category_names)
        if not categories:
            raise ConfigurationError("At least one help thread category must be configured")

        activities = tuple(activity.tag_name for activity in ThreadActivity)

        self._names: Dict[TagFamily, Tuple[str, ...]] = {
            TagFamily.CATEGORY: categories,
            TagFamily.ACTIVITY: activities,
        }
        self._ranks: Dict[TagFamily, Mapping[str, int]] = {}
        for family, names in self._names.items():
            ranks = {name: rank for rank, name in enumerate(names)}
            if len(ranks) != len(names):
                raise ConfigurationError(f"Duplicate tag names in the {family} family: {names}")
            self._ranks[family] = ranks

        overlap = set(categories) & set(activities)
        if overlap:
            raise ConfigurationError(f"Categories may not reuse activity tag names: {sorted(overlap)}")

    @classmethod
    def from_config(cls, config: HelpSystemConfig) -> "TagCatalog":
        return cls(config.categories)

    def is_member(self, family: TagFamily, tag_name: str) -> bool:
        return tag_name in self._ranks[family]

    def priority_of(self, family: TagFamily, tag_name: str) -> int:
        """Rank of ``tag_name`` within ``family``; 0 is the most specific.

        Raises:
            KeyError: If the name does not belong to the family.
        """
        return self._ranks[family][tag_name]

    def all_names(self, family: TagFamily) -> Tuple[str, ...]:
        return self._names[family]
