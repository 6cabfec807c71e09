from __future__ import annotations
from pathlib import Path
import fcntl
from typing import Any, Dict
import yaml

from grayban.util.logger import get_logger

logger = get_logger("app_configuration")


CONFIG_PATH = Path("./config/app_config.yml").resolve()

DEFAULT_COMMAND_PREFIX = "!"
DEFAULT_TRIGGER_WORD = "uwu"
DEFAULT_TRIGGER_IMAGE_URL = "https://cdn.discordapp.com/emojis/1337169044742078565.png"
DEFAULT_TRIGGER_FILENAME = "cursed_image.png"
DEFAULT_TRIGGER_TEXT = "**🩸 The Dark Ones Whisper...**"
DEFAULT_REPORTS_DB_PATH = "./data/banned_ids.db"
DEFAULT_PERSONS_DB_PATH = "./data/banned_persons.db"
DEFAULT_WEB_HOST = "0.0.0.0"


class AppConfig:
    """File-lock based accessor around the YAML application configuration.

    The file is read exactly once, when the object is built. Every accessor
    falls back to a built-in default so a missing or partial file still
    yields a working bot.
    """

    def __init__(self, config_path: Path) -> None:
        self.config_path = config_path
        self._data: Dict[str, Any] = self.load_from_disk()

    # --------------------------
    # Private helpers
    # --------------------------
    def load_from_disk(self) -> Dict[str, Any]:
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                fcntl.flock(f.fileno(), fcntl.LOCK_SH)
                data = yaml.safe_load(f)
                fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        except FileNotFoundError:
            logger.error("[APP CONFIGURATION] Config file %s not found.", self.config_path)
            return {}
        except Exception as exc:
            logger.error("[APP CONFIGURATION] Failed to load config %s: %s", self.config_path, exc)
            return {}

        if not isinstance(data, dict):
            if data is not None:
                logger.error("[APP CONFIGURATION] Config %s is not a mapping; ignoring it.", self.config_path)
            return {}
        return data

    def _section(self, key: str) -> Dict[str, Any]:
        section = self._data.get(key, {})
        return section if isinstance(section, dict) else {}

    # --------------------------
    # High-level shortcuts
    # --------------------------
    @property
    def command_prefix(self) -> str:
        """Prefix every chat command starts with (``!`` by default)."""
        value = self._data.get("command_prefix")
        return str(value) if value else DEFAULT_COMMAND_PREFIX

    @property
    def trigger_word(self) -> str:
        """Literal message body that gets the fixed attachment reply, lower-cased."""
        return str(self._section("trigger").get("word") or DEFAULT_TRIGGER_WORD).strip().lower()

    @property
    def trigger_image_url(self) -> str:
        return str(self._section("trigger").get("image_url") or DEFAULT_TRIGGER_IMAGE_URL)

    @property
    def trigger_filename(self) -> str:
        return str(self._section("trigger").get("filename") or DEFAULT_TRIGGER_FILENAME)

    @property
    def trigger_text(self) -> str:
        return str(self._section("trigger").get("text") or DEFAULT_TRIGGER_TEXT)

    @property
    def reports_db_path(self) -> Path:
        """SQLite file backing the report blocklist."""
        value = self._section("database").get("reports_path") or DEFAULT_REPORTS_DB_PATH
        return Path(value).resolve()

    @property
    def persons_db_path(self) -> Path:
        """SQLite file backing the person blocklist."""
        value = self._section("database").get("persons_path") or DEFAULT_PERSONS_DB_PATH
        return Path(value).resolve()

    @property
    def web_host(self) -> str:
        return str(self._section("web").get("host") or DEFAULT_WEB_HOST)

    @property
    def console_enabled(self) -> bool:
        """Whether the interactive operator console runs next to the bot."""
        return bool(self._section("console").get("enabled", True))


# Shared application-wide configuration instance
app_config = AppConfig(CONFIG_PATH)
