"""
Core abstractions: configuration, engine interface, events and errors.
"""

from readaloud.core.base_engine import BaseSpeechEngine
from readaloud.core.config import ReaderConfig, SpeechPreferences
from readaloud.core.events import SpeakOptions, SpeechEvent, SpeechEventType
from readaloud.core.exceptions import (
    ConfigurationError,
    PreferenceStoreError,
    ReadAloudError,
    SpeechEngineError,
    TextSourceError,
)
from readaloud.core.voices import VoiceInfo, english_voices

__all__ = [
    "BaseSpeechEngine",
    "ConfigurationError",
    "PreferenceStoreError",
    "ReadAloudError",
    "ReaderConfig",
    "SpeakOptions",
    "SpeechEngineError",
    "SpeechEvent",
    "SpeechEventType",
    "SpeechPreferences",
    "TextSourceError",
    "VoiceInfo",
    "english_voices",
]
