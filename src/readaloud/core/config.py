"""
Configuration management for readaloud.
"""

import json
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from loguru import logger

from readaloud.core.exceptions import ConfigurationError

DEFAULT_PREFERENCES_PATH = Path("~/.config/readaloud/preferences.json")

RATE_RANGE = (0.1, 10.0)
PITCH_RANGE = (0.0, 2.0)

# Persisted record keys
_RECORD_KEYS = {"voiceName": "voice_name", "rate": "rate", "pitch": "pitch"}


@dataclass
class SpeechPreferences:
    """Voice preferences passed through to the speech engine"""

    voice_name: str = ""
    rate: float = 1.0
    pitch: float = 1.0

    def __post_init__(self):
        """Post-initialization validation"""
        try:
            self.rate = float(self.rate)
        except (TypeError, ValueError):
            logger.warning(f"Invalid rate: {self.rate!r}, using 1.0")
            self.rate = 1.0
        if not (RATE_RANGE[0] <= self.rate <= RATE_RANGE[1]):
            logger.warning(f"Invalid rate: {self.rate}, using 1.0")
            self.rate = 1.0

        try:
            self.pitch = float(self.pitch)
        except (TypeError, ValueError):
            logger.warning(f"Invalid pitch: {self.pitch!r}, using 1.0")
            self.pitch = 1.0
        if not (PITCH_RANGE[0] <= self.pitch <= PITCH_RANGE[1]):
            logger.warning(f"Invalid pitch: {self.pitch}, using 1.0")
            self.pitch = 1.0

        if self.voice_name is None:
            self.voice_name = ""

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "SpeechPreferences":
        """Create preferences from a persisted ``{voiceName, rate, pitch}`` record"""
        kwargs = {
            attr: record[key] for key, attr in _RECORD_KEYS.items() if key in record
        }
        return cls(**kwargs)

    def to_record(self) -> dict[str, Any]:
        """Convert to the persisted record layout"""
        return {key: getattr(self, attr) for key, attr in _RECORD_KEYS.items()}

    def merged(self, partial: dict[str, Any]) -> "SpeechPreferences":
        """Return a copy updated with a partial record.

        Accepts both record keys (``voiceName``) and attribute names
        (``voice_name``); unknown keys are ignored.
        """
        updates = {}
        for key, value in partial.items():
            attr = _RECORD_KEYS.get(key, key)
            if attr in _RECORD_KEYS.values():
                updates[attr] = value
        return replace(self, **updates)


@dataclass
class ReaderConfig:
    """Configuration for the playback session and its engine"""

    # Speech request settings
    lang: str = "en-US"

    # Navigation
    rapid_repeat_ms: float = 1500.0
    near_start_fraction: float = 0.25

    # Engine settings
    engine: str = "pyttsx3"
    driver_name: str | None = None
    base_words_per_minute: int = 200

    # Preferences
    preferences_path: Path = field(default_factory=lambda: DEFAULT_PREFERENCES_PATH)

    # Logging
    log_level: str = "INFO"

    def __post_init__(self):
        """Post-initialization validation"""
        self.preferences_path = Path(self.preferences_path).expanduser()

        if self.rapid_repeat_ms < 0:
            logger.warning(
                f"Invalid rapid repeat window: {self.rapid_repeat_ms}, using 1500"
            )
            self.rapid_repeat_ms = 1500.0

        if not (0.0 <= self.near_start_fraction <= 1.0):
            logger.warning(
                f"Invalid near-start fraction: {self.near_start_fraction}, using 0.25"
            )
            self.near_start_fraction = 0.25

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "ReaderConfig":
        """Create config from dictionary"""
        # Filter out unknown keys
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}
        filtered_dict = {k: v for k, v in config_dict.items() if k in valid_keys}

        return cls(**filtered_dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary"""
        result = {}
        for field_name in self.__dataclass_fields__:
            value = getattr(self, field_name)
            result[field_name] = str(value) if isinstance(value, Path) else value
        return result

    @classmethod
    def from_file(cls, config_path: str | Path) -> "ReaderConfig":
        """Load config from JSON file"""
        try:
            with open(config_path, encoding="utf-8") as f:
                config_dict = json.load(f)
            return cls.from_dict(config_dict)
        except FileNotFoundError:
            logger.warning(f"Config file not found: {config_path}, using defaults")
            return cls()
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {config_path} - {e}")
            return cls()

    @classmethod
    def from_env(cls) -> "ReaderConfig":
        """Create configuration from environment variables"""
        config = cls()

        if env_value := os.environ.get("READALOUD_LANG"):
            config.lang = env_value
        if env_value := os.environ.get("READALOUD_RAPID_REPEAT_MS"):
            try:
                config.rapid_repeat_ms = float(env_value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid READALOUD_RAPID_REPEAT_MS={env_value}: {e}")
        if env_value := os.environ.get("READALOUD_NEAR_START_FRACTION"):
            try:
                config.near_start_fraction = float(env_value)
            except (ValueError, TypeError) as e:
                logger.warning(
                    f"Invalid READALOUD_NEAR_START_FRACTION={env_value}: {e}"
                )
        if env_value := os.environ.get("READALOUD_ENGINE"):
            config.engine = env_value
        if env_value := os.environ.get("READALOUD_DRIVER"):
            config.driver_name = env_value
        if env_value := os.environ.get("READALOUD_BASE_WPM"):
            try:
                config.base_words_per_minute = int(env_value)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid READALOUD_BASE_WPM={env_value}: {e}")
        if env_value := os.environ.get("READALOUD_PREFERENCES_PATH"):
            config.preferences_path = Path(env_value).expanduser()
        if env_value := os.environ.get("READALOUD_LOG_LEVEL"):
            config.log_level = env_value.upper()

        return config

    def validate(self) -> bool:
        """Validate configuration settings."""
        if not self.lang:
            raise ConfigurationError("lang must not be empty")
        if self.rapid_repeat_ms < 0:
            raise ConfigurationError(
                f"rapid_repeat_ms must be >= 0, got {self.rapid_repeat_ms}"
            )
        if not (0.0 <= self.near_start_fraction <= 1.0):
            raise ConfigurationError(
                f"near_start_fraction must be within [0, 1], got {self.near_start_fraction}"
            )
        if self.base_words_per_minute <= 0:
            raise ConfigurationError(
                f"base_words_per_minute must be positive, got {self.base_words_per_minute}"
            )
        return True
