"""
Engine factory for creating speech engines and playback sessions.
"""

from typing import Literal

from readaloud.core.base_engine import BaseSpeechEngine
from readaloud.core.config import ReaderConfig
from readaloud.prefs.store import BasePreferenceStore, JsonPreferenceStore
from readaloud.reader import PlaybackSession

# Type for supported engines
EngineType = Literal["pyttsx3"]


def get_engine(
    engine_type: EngineType = "pyttsx3",
    config: ReaderConfig | None = None,
    **config_kwargs,
) -> BaseSpeechEngine:
    """
    Factory function to create speech engines.

    Args:
        engine_type: Type of engine ("pyttsx3")
        config: Pre-built reader config (optional)
        **config_kwargs: Config parameters (if config not provided)

    Returns:
        Speech engine instance (not yet initialized)

    Examples:
        # Using default config
        engine = get_engine("pyttsx3")

        # Using kwargs
        engine = get_engine("pyttsx3", driver_name="espeak", base_words_per_minute=180)
    """
    if config is None:
        config = ReaderConfig(**config_kwargs) if config_kwargs else ReaderConfig()

    if engine_type == "pyttsx3":
        from readaloud.engines.pyttsx3_engine import Pyttsx3SpeechEngine

        return Pyttsx3SpeechEngine(config=config)

    else:
        raise ValueError(
            f"Unknown engine type: {engine_type}. Supported engines: pyttsx3"
        )


def list_engines() -> list[str]:
    """
    Get list of available speech engines.

    Returns:
        List of engine names
    """
    return ["pyttsx3"]


def get_default_engine() -> BaseSpeechEngine:
    """
    Get the default speech engine (pyttsx3).

    Returns:
        Default engine instance
    """
    return get_engine("pyttsx3")


def get_session(
    engine_type: EngineType = "pyttsx3",
    config: ReaderConfig | None = None,
    preferences: BasePreferenceStore | None = None,
    **config_kwargs,
) -> PlaybackSession:
    """
    Factory function to create a playback session.

    Args:
        engine_type: Type of engine to use
        config: Pre-built reader config (optional)
        preferences: Preference store (defaults to the JSON store at
            ``config.preferences_path``)
        **config_kwargs: Config parameters (if config not provided)

    Returns:
        Playback session instance

    Examples:
        session = get_session()
        async with session:
            session.start_reading("Hello world. How are you?")
    """
    engine = get_engine(engine_type, config=config, **config_kwargs)
    if preferences is None:
        preferences = JsonPreferenceStore(engine.config.preferences_path)
    return PlaybackSession(engine, config=engine.config, preferences=preferences)
