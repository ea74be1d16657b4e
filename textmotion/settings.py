"""User settings for textmotion.

Settings are stored as JSON in the OS-appropriate config directory and
read once per invocation. A missing or unreadable file yields defaults.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import platformdirs

from .constants import EditorConstants

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    word_pattern: str = EditorConstants.DEFAULT_WORD_PATTERN
    log_level: str = EditorConstants.DEFAULT_LOG_LEVEL

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Build settings from decoded JSON, keeping defaults for bad values."""
        settings = cls()
        word_pattern = data.get("word_pattern")
        if word_pattern is not None:
            if isinstance(word_pattern, str) and _compiles(word_pattern):
                settings.word_pattern = word_pattern
            else:
                logger.warning(f"Ignoring invalid word_pattern setting: {word_pattern!r}")
        log_level = data.get("log_level")
        if log_level is not None:
            if isinstance(log_level, str) and isinstance(logging.getLevelName(log_level.upper()), int):
                settings.log_level = log_level.upper()
            else:
                logger.warning(f"Ignoring invalid log_level setting: {log_level!r}")
        return settings


def _compiles(pattern: str) -> bool:
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True


class SettingsStore:
    """Loads and saves Settings in the user's config directory."""

    def __init__(self, config_dir: Optional[Path] = None):
        self._config_dir = Path(config_dir) if config_dir else Path(
            platformdirs.user_config_dir(EditorConstants.APP_NAME)
        )
        self._settings_file = self._config_dir / EditorConstants.SETTINGS_FILENAME

    @property
    def settings_file(self) -> Path:
        return self._settings_file

    def load(self) -> Settings:
        """Load settings from disk.

        Returns:
            The stored settings, or defaults if the file is missing or invalid.
        """
        if not self._settings_file.exists():
            return Settings()

        try:
            with open(self._settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Could not load settings from {self._settings_file}: {e}")
            return Settings()

        if not isinstance(data, dict):
            logger.warning("Settings file has invalid format (not a dict), ignoring")
            return Settings()
        return Settings.from_dict(data)

    def save(self, settings: Settings) -> bool:
        """Save settings to disk atomically.

        Returns:
            True if save was successful, False otherwise.
        """
        temp_file = self._settings_file.with_suffix(EditorConstants.ATOMIC_SAVE_SUFFIX)
        try:
            self._config_dir.mkdir(parents=True, exist_ok=True)
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(asdict(settings), f, indent=2)
            temp_file.replace(self._settings_file)
            return True
        except OSError as e:
            logger.warning(f"Could not save settings to {self._settings_file}: {e}")
            try:
                if temp_file.exists():
                    temp_file.unlink()
            except OSError:
                pass
            return False


def load_settings() -> Settings:
    """Load settings from the default location."""
    return SettingsStore().load()
