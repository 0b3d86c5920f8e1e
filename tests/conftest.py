"""
Pytest configuration and fixtures for readaloud tests.
"""


import pytest

from readaloud.core.base_engine import BaseSpeechEngine
from readaloud.core.config import ReaderConfig
from readaloud.core.events import EventCallback, SpeakOptions, SpeechEvent, SpeechEventType
from readaloud.core.voices import VoiceInfo
from readaloud.prefs import MemoryPreferenceStore
from readaloud.reader import PlaybackSession


class MockSpeechEngine(BaseSpeechEngine):
    """Mock speech engine that records requests and lets tests emit events."""

    def __init__(self, config: ReaderConfig | None = None):
        super().__init__(config)
        self.calls: list[str] = []
        self.spoken: list[tuple[str, SpeakOptions]] = []
        self.callbacks: list[EventCallback] = []

    async def initialize(self) -> None:
        self._initialized = True

    async def shutdown(self) -> None:
        self._initialized = False

    def speak(self, text: str, options: SpeakOptions, on_event: EventCallback) -> None:
        self.calls.append("speak")
        self.spoken.append((text, options))
        self.callbacks.append(on_event)

    def pause(self) -> None:
        self.calls.append("pause")

    def resume(self) -> None:
        self.calls.append("resume")

    def stop(self) -> None:
        self.calls.append("stop")

    async def list_voices(self) -> list[VoiceInfo]:
        return [
            VoiceInfo(name="Samantha", lang="en-US"),
            VoiceInfo(name="Google UK English", lang="en-GB", local=False),
            VoiceInfo(name="Thomas", lang="fr-FR"),
        ]

    def emit(self, event_type: SpeechEventType, index: int = -1, **kwargs) -> None:
        """Deliver an event through the callback of utterance ``index``."""
        self.callbacks[index](SpeechEvent(event_type, **kwargs))

    @property
    def last_text(self) -> str:
        return self.spoken[-1][0]


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, now: float = 100_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def mock_engine():
    """Fixture for mock speech engine."""
    return MockSpeechEngine()


@pytest.fixture
def clock():
    """Fixture for a controllable clock."""
    return FakeClock()


@pytest.fixture
def preference_store():
    """Fixture for in-memory preferences."""
    return MemoryPreferenceStore()


@pytest.fixture
def session(mock_engine, clock, preference_store):
    """Fixture for a playback session over the mock engine."""
    return PlaybackSession(mock_engine, preferences=preference_store, clock=clock)


@pytest.fixture
async def initialized_session(session):
    """Fixture for an initialized playback session."""
    await session.initialize()
    yield session
    await session.cleanup()
