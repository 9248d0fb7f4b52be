"""
Decision logic for changing the tag of one family on a thread.

The engine never talks to Discord. It receives the thread's current tags and
a resolver turning a tag name into a :class:`Label` of the parent forum, and
returns the tag sequence the thread should carry next.
"""

from __future__ import annotations

from typing import Callable, List, Sequence

from helpcord.datatypes.tag_datatypes import Label, TagAssignment, TagFamily
from helpcord.help.tag_catalog import TagCatalog

TagResolver = Callable[[str], Label]


class TagAssignmentEngine:
    """Computes tag sequences keeping one tag per family within the capacity."""

    def __init__(self, catalog: TagCatalog) -> None:
        self.catalog = catalog

    def find_current(self, tags: Sequence[Label], family: TagFamily) -> Label | None:
        """Return the tag treated as the thread's current one of ``family``.

        If several tags of the family are applied, the most specific one
        (lowest catalog rank) wins; equal ranks keep the earlier tag.
        """
        members = [tag for tag in tags if self.catalog.is_member(family, tag.name)]
        return min(members, key=lambda tag: self.catalog.priority_of(family, tag.name), default=None)

    def compute_next_tags(
        self,
        current: Sequence[Label],
        family: TagFamily,
        target_name: str,
        capacity: int,
        resolve_tag: TagResolver,
    ) -> TagAssignment:
        """Replace the current tag of ``family`` by ``target_name``.

        The new tag goes to the front since it takes priority over the
        others. If the thread is still full after removing the replaced tag,
        the last (least important) tag is dropped to make room.

        Args:
            current: Tags applied to the thread, in priority order.
            family: Family of the requested tag.
            target_name: Name of the requested tag.
            capacity: Maximum amount of tags on a thread.
            resolve_tag: Looks up a tag of the parent forum by name. Only
                called when a change is needed.

        Returns:
            TagAssignment: ``changed`` is False if the tag was already current.

        Raises:
            ValueError: For a tag name outside the family or a non-positive capacity.
            ConfigurationError: Propagated from ``resolve_tag``.
        """
        if capacity <= 0:
            raise ValueError(f"Tag capacity must be positive, got {capacity}")
        if not self.catalog.is_member(family, target_name):
            raise ValueError(f"'{target_name}' is not a tag of the {family} family")

        current_tag = self.find_current(current, family)
        if current_tag is not None and current_tag.name == target_name:
            return TagAssignment(tags=tuple(current), changed=False)

        remaining: List[Label] = list(current)
        if current_tag is not None:
            remaining.remove(current_tag)
        # The tag may already be applied further back; it moves to the front
        remaining = [tag for tag in remaining if tag.name != target_name]

        if len(remaining) >= capacity:
            del remaining[capacity - 1:]

        next_tag = resolve_tag(target_name)
        return TagAssignment(tags=(next_tag, *remaining), changed=True)
