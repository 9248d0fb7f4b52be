from pathlib import Path

import pytest
import yaml

from helpcord.configuration.app_configuration import AppConfig
from helpcord.configuration.help_system_config import (
    DEFAULT_CATEGORIES,
    HelpSystemConfig,
    ModerationConfig,
)
from helpcord.errors import ConfigurationError


@pytest.fixture()
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "app_config.yml"


def test_app_config_reload_parses_yaml(config_path: Path) -> None:
    payload = {
        "help_system": {
            "help_forum_pattern": "questions|help",
            "categories": ["Java", "Python"],
            "max_tags_per_thread": 3,
        },
        "moderation": {"muted_role_pattern": "Muted|Silenced", "reason_max_length": 200},
        "database": {"path": "db/test.db"},
    }
    config_path.write_text(yaml.safe_dump(payload), encoding="utf-8")

    config = AppConfig(config_path)

    help_system = config.help_system
    assert help_system.categories == ("Java", "Python")
    assert help_system.max_tags_per_thread == 3
    assert help_system.help_forum_regex.fullmatch("help")
    assert help_system.category_role_suffix == " - Helper"

    moderation = config.moderation
    assert moderation.muted_role_regex.fullmatch("Silenced")
    assert moderation.reason_max_length == 200
    assert moderation.revocation_interval_seconds == 300

    assert config.database.path.name == "test.db"
    assert config.get("missing", "fallback") == "fallback"


def test_app_config_missing_file_returns_defaults(tmp_path: Path) -> None:
    config = AppConfig(tmp_path / "does_not_exist.yml")

    assert config.reload() == {}
    assert config.help_system.categories == DEFAULT_CATEGORIES
    assert config.moderation.muted_role_pattern == "Muted"


@pytest.mark.parametrize("content", ["help_system: [unclosed", "- just\n- a list\n"])
def test_app_config_invalid_content_is_ignored(config_path: Path, content: str) -> None:
    config_path.write_text(content, encoding="utf-8")

    assert AppConfig(config_path).reload() == {}
    assert AppConfig(config_path).section("help_system") == {}


def test_reload_picks_up_changes(config_path: Path) -> None:
    config_path.write_text("help_system: {categories: [A]}", encoding="utf-8")
    config = AppConfig(config_path)

    config_path.write_text("help_system: {categories: [A, B]}", encoding="utf-8")
    config.reload()

    assert config.help_system.categories == ("A", "B")


@pytest.mark.parametrize(
    "mapping",
    [
        {"help_forum_pattern": "("},
        {"max_tags_per_thread": 0},
        {"activity_message_limit": "many"},
        {"categories": "Java"},
        {"categories": None},
        {"categories": []},
    ],
)
def test_invalid_help_system_values(mapping) -> None:
    with pytest.raises(ConfigurationError):
        HelpSystemConfig.from_mapping(mapping)


def test_invalid_moderation_values() -> None:
    with pytest.raises(ConfigurationError):
        ModerationConfig.from_mapping({"quarantined_role_pattern": "[", "reason_max_length": 10})
