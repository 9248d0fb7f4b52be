"""
Pytest configuration and fixtures for Helpcord tests.
"""

import os
import sys
import tempfile
from pathlib import Path

# Log files of the test session go to a throwaway directory.
# Must be set before anything imports helpcord.util.logger.
os.environ.setdefault("HELPCORD_LOGS_DIR", tempfile.mkdtemp(prefix="helpcord-test-logs-"))

# Add src directory to path so imports work
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

import pytest
import pytest_asyncio

from helpcord.configuration.help_system_config import HelpSystemConfig, ModerationConfig
from helpcord.database.database import Database
from helpcord.database.db_connection import ConnectionManager


@pytest.fixture()
def help_config() -> HelpSystemConfig:
    return HelpSystemConfig(
        help_forum_pattern="questions",
        categories=("Bug", "Database", "Frameworks", "Other"),
        max_tags_per_thread=5,
    )


@pytest.fixture()
def moderation_config() -> ModerationConfig:
    return ModerationConfig(reason_max_length=50)


@pytest_asyncio.fixture()
async def connection(tmp_path: Path):
    """A fresh database with the Helpcord schema, closed after the test."""
    manager = ConnectionManager()
    database = Database(tmp_path / "helpcord-test.db", manager)
    assert await database.initialize()
    yield manager
    await database.shutdown()
