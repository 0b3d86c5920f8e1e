"""
Preference persistence.
"""

from readaloud.prefs.store import (
    BasePreferenceStore,
    JsonPreferenceStore,
    MemoryPreferenceStore,
)

__all__ = ["BasePreferenceStore", "JsonPreferenceStore", "MemoryPreferenceStore"]
