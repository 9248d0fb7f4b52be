from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from helpcord.configuration.help_system_config import DatabaseConfig, HelpSystemConfig, ModerationConfig
from helpcord.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The raw mapping is read once on construction (and again on ``reload``).
    The typed sections are built on demand from the cached mapping; callers
    build them once at startup and pass them to the components that need them.
    """

    def __init__(self, config_path: Path = CONFIG_PATH) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = {}
        self.reload()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                try:
                    data = yaml.safe_load(f)
                finally:
                    fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except (OSError, yaml.YAMLError) as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping, ignoring it.", self.config_path)
            return {}
        return data

    def section(self, key: str) -> Dict[str, Any]:
        value = self.get(key, {})
        return value if isinstance(value, dict) else {}

    # --------------------------
    # Public API
    # --------------------------
    def reload(self) -> Dict[str, Any]:
        """Reload configuration from disk and return the loaded mapping.

        Returns an empty dict when the file is missing or malformed.
        """
        self._data = self.load_from_disk()
        return self._data

    def get(self, key: str, default: Any = None) -> Any:
        """Safe lookup for top-level configuration keys."""
        return self._data.get(key, default)

    # --------------------------
    # Typed sections
    # --------------------------
    @property
    def help_system(self) -> HelpSystemConfig:
        return HelpSystemConfig.from_mapping(self.section("help_system"))

    @property
    def moderation(self) -> ModerationConfig:
        return ModerationConfig.from_mapping(self.section("moderation"))

    @property
    def database(self) -> DatabaseConfig:
        return DatabaseConfig.from_mapping(self.section("database"))
