import os
from pathlib import Path

import pytest

from helpcord.configuration.app_configuration import AppConfig

# Importing main changes the working directory to the project root
_cwd = os.getcwd()
from helpcord import main  # noqa: E402
os.chdir(_cwd)


def test_resolve_base_dir_honours_env(monkeypatch, tmp_path):
    monkeypatch.setenv("HELPCORD_HOME", str(tmp_path))
    assert main.resolve_base_dir() == tmp_path.resolve()


def test_resolve_base_dir_defaults_to_project_root(monkeypatch):
    monkeypatch.delenv("HELPCORD_HOME", raising=False)
    assert (main.resolve_base_dir() / "src" / "helpcord" / "main.py").exists()


def test_build_intents_enables_members():
    intents = main.build_intents()
    assert intents.members is True
    assert intents.guilds is True


def test_load_environment_requires_token(monkeypatch):
    monkeypatch.setattr(main, "load_dotenv", lambda **kwargs: False)
    monkeypatch.delenv("DISCORD_BOT_TOKEN", raising=False)

    with pytest.raises(SystemExit):
        main.load_environment()

    monkeypatch.setenv("DISCORD_BOT_TOKEN", "token")
    assert main.load_environment() == "token"


def test_build_services_wires_configuration(tmp_path: Path):
    config_path = tmp_path / "app_config.yml"
    config_path.write_text(
        "help_system: {categories: [Java, Python], activity_check_interval_seconds: 60}\n"
        f"database: {{path: '{tmp_path / 'bot.db'}'}}\n",
        encoding="utf-8",
    )

    services = main.build_services(AppConfig(config_path))

    assert services.help_helper.config.categories == ("Java", "Python")
    assert services.activity_updater.scheduler.interval_seconds == 60
    assert services.revoker.scheduler.interval_seconds == 300
    assert services.database.db_path == (tmp_path / "bot.db").resolve()
    assert services.moderation_flow.actions_store is services.revoker.actions_store
    assert services.actions_store is services.revoker.actions_store
