"""
Preference stores for voice name, rate and pitch.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from loguru import logger

from readaloud.core.config import DEFAULT_PREFERENCES_PATH, SpeechPreferences
from readaloud.core.exceptions import PreferenceStoreError


class BasePreferenceStore(ABC):
    """Key-value store for speech preferences."""

    @abstractmethod
    def get(self, defaults: SpeechPreferences | None = None) -> SpeechPreferences:
        """
        Load preferences.

        Args:
            defaults: Values used for keys that have never been stored

        Returns:
            Resolved preferences
        """
        pass

    @abstractmethod
    def set(self, partial: dict[str, Any]) -> SpeechPreferences:
        """
        Merge a partial record into the stored preferences.

        Args:
            partial: Keys to update (``voiceName``/``voice_name``, ``rate``, ``pitch``)

        Returns:
            Preferences after the update
        """
        pass


class MemoryPreferenceStore(BasePreferenceStore):
    """Preferences held for the life of the process."""

    def __init__(self, record: dict[str, Any] | None = None):
        self._record: dict[str, Any] = dict(record or {})

    def get(self, defaults: SpeechPreferences | None = None) -> SpeechPreferences:
        base = defaults or SpeechPreferences()
        return base.merged(self._record)

    def set(self, partial: dict[str, Any]) -> SpeechPreferences:
        updated = self.get().merged(partial)
        self._record = updated.to_record()
        return updated


class JsonPreferenceStore(BasePreferenceStore):
    """Preferences persisted as a flat JSON record."""

    def __init__(self, path: str | Path = DEFAULT_PREFERENCES_PATH):
        self.path = Path(path).expanduser()

    def _read_record(self) -> dict[str, Any]:
        try:
            with open(self.path, encoding="utf-8") as f:
                record = json.load(f)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in preferences file: {self.path} - {e}")
            return {}

        if not isinstance(record, dict):
            logger.error(f"Preferences file is not a JSON object: {self.path}")
            return {}
        return record

    def get(self, defaults: SpeechPreferences | None = None) -> SpeechPreferences:
        base = defaults or SpeechPreferences()
        return base.merged(self._read_record())

    def set(self, partial: dict[str, Any]) -> SpeechPreferences:
        updated = self.get().merged(partial)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(updated.to_record(), f, indent=2)
        except OSError as e:
            raise PreferenceStoreError(
                f"Could not save preferences to {self.path}: {e}"
            ) from e
        logger.debug(f"Preferences saved to {self.path}")
        return updated
