"""Tests for the tag assignment engine."""

import pytest

from helpcord.datatypes.tag_datatypes import Label, TagFamily
from helpcord.errors import ConfigurationError
from helpcord.help.tag_assignment import TagAssignmentEngine
from helpcord.help.tag_catalog import TagCatalog

NAMES = ["Bug", "Database", "Frameworks", "UrgentFlag", "Help", "Beginner", "React", "Java",
         "Nobody helped yet", "Needs attention", "Active"]
LABELS = {name: Label(tag_id=index + 1, name=name) for index, name in enumerate(NAMES)}


def labels(*names):
    return [LABELS[name] for name in names]


def resolve(name: str) -> Label:
    return LABELS[name]


@pytest.fixture()
def engine() -> TagAssignmentEngine:
    return TagAssignmentEngine(TagCatalog(["Bug", "Database", "Frameworks"]))


class TestScenarios:
    def test_category_replaced_without_eviction(self, engine):
        current = labels("Bug", "UrgentFlag", "Help", "Beginner", "React")

        result = engine.compute_next_tags(current, TagFamily.CATEGORY, "Database", 5, resolve)

        assert result.changed is True
        assert result.names == ("Database", "UrgentFlag", "Help", "Beginner", "React")

    def test_full_thread_evicts_the_tail(self, engine):
        current = labels("UrgentFlag", "Help", "Beginner", "React", "Java")

        result = engine.compute_next_tags(current, TagFamily.CATEGORY, "Database", 5, resolve)

        assert result.changed is True
        assert result.names == ("Database", "UrgentFlag", "Help", "Beginner", "React")

    def test_same_category_is_a_no_op(self, engine):
        current = labels("Database", "Help")
        resolver_calls = []

        def tracking_resolve(name):
            resolver_calls.append(name)
            return resolve(name)

        result = engine.compute_next_tags(current, TagFamily.CATEGORY, "Database", 5, tracking_resolve)

        assert result.changed is False
        assert list(result.tags) == current
        assert resolver_calls == []


class TestProperties:
    def test_idempotence(self, engine):
        first = engine.compute_next_tags(labels("Help"), TagFamily.CATEGORY, "Bug", 5, resolve)
        second = engine.compute_next_tags(first.tags, TagFamily.CATEGORY, "Bug", 5, resolve)

        assert first.changed is True
        assert second.changed is False
        assert second.tags == first.tags

    def test_family_exclusivity(self, engine):
        result = engine.compute_next_tags(labels("Help", "Frameworks"), TagFamily.CATEGORY, "Bug", 5, resolve)

        category_tags = [tag for tag in result.tags if engine.catalog.is_member(TagFamily.CATEGORY, tag.name)]
        assert [tag.name for tag in category_tags] == ["Bug"]
        assert "Frameworks" not in result.names

    def test_target_lands_at_index_zero(self, engine):
        result = engine.compute_next_tags(
            labels("Help", "Beginner"), TagFamily.ACTIVITY, "Needs attention", 5, resolve
        )
        assert result.names[0] == "Needs attention"
        assert result.names[1:] == ("Help", "Beginner")

    @pytest.mark.parametrize("capacity", [1, 2, 3, 5])
    def test_capacity_bound(self, engine, capacity):
        current = labels("UrgentFlag", "Help", "Beginner", "React", "Java")[:capacity]

        result = engine.compute_next_tags(current, TagFamily.CATEGORY, "Bug", capacity, resolve)

        assert len(result.tags) <= capacity
        assert current[-1] not in result.tags

    def test_overfull_input_is_brought_within_capacity(self, engine):
        current = labels("UrgentFlag", "Help", "Beginner", "React", "Java")

        result = engine.compute_next_tags(current, TagFamily.CATEGORY, "Bug", 3, resolve)

        assert result.names == ("Bug", "UrgentFlag", "Help")

    def test_canonical_tie_break_removes_the_most_specific(self, engine):
        # Frameworks (rank 2) comes first, Bug (rank 0) is the canonical one
        current = labels("Frameworks", "Help", "Bug")

        assert engine.find_current(current, TagFamily.CATEGORY) == LABELS["Bug"]

        result = engine.compute_next_tags(current, TagFamily.CATEGORY, "Database", 5, resolve)

        assert result.names == ("Database", "Frameworks", "Help")

    def test_anomalous_state_with_target_as_second_member(self, engine):
        current = labels("Bug", "Help", "Database")

        result = engine.compute_next_tags(current, TagFamily.CATEGORY, "Database", 5, resolve)

        assert result.changed is True
        assert result.names == ("Database", "Help")

    def test_families_do_not_touch_each_other(self, engine):
        current = labels("Bug", "Nobody helped yet", "Help")

        result = engine.compute_next_tags(current, TagFamily.ACTIVITY, "Active", 5, resolve)

        assert result.names == ("Active", "Bug", "Help")


class TestErrors:
    def test_target_outside_family(self, engine):
        with pytest.raises(ValueError):
            engine.compute_next_tags(labels("Help"), TagFamily.CATEGORY, "Active", 5, resolve)

    def test_non_positive_capacity(self, engine):
        with pytest.raises(ValueError):
            engine.compute_next_tags(labels("Help"), TagFamily.CATEGORY, "Bug", 0, resolve)

    def test_resolver_failure_propagates(self, engine):
        def missing(name):
            raise ConfigurationError(f"missing {name}")

        with pytest.raises(ConfigurationError):
            engine.compute_next_tags(labels("Help"), TagFamily.CATEGORY, "Bug", 5, missing)

    def test_find_current_without_members(self, engine):
        assert engine.find_current(labels("Help", "React"), TagFamily.CATEGORY) is None
