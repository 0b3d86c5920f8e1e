"""
Abstract base interface for speech engines.
"""

from abc import ABC, abstractmethod

from readaloud.core.config import ReaderConfig
from readaloud.core.events import EventCallback, SpeakOptions
from readaloud.core.voices import VoiceInfo


class BaseSpeechEngine(ABC):
    """Abstract base class for speech engines.

    Request methods (``speak``, ``pause``, ``resume``, ``stop``) fire and
    return; progress is reported later through the ``on_event`` callback
    given to ``speak``, possibly from another thread.
    """

    def __init__(self, config: ReaderConfig | None = None):
        self.config = config or ReaderConfig()
        self._initialized = False
        self._is_speaking = False

    async def __aenter__(self):
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.shutdown()
        return False

    @abstractmethod
    async def initialize(self) -> None:
        """Initialize the speech engine."""
        pass

    @abstractmethod
    async def shutdown(self) -> None:
        """Shutdown the speech engine."""
        pass

    @abstractmethod
    def speak(self, text: str, options: SpeakOptions, on_event: EventCallback) -> None:
        """
        Start speaking text, pre-empting any active utterance.

        Args:
            text: Text to speak
            options: Voice, language, rate and pitch for this utterance
            on_event: Receives lifecycle events for this utterance only
        """
        pass

    @abstractmethod
    def pause(self) -> None:
        """Pause the active utterance."""
        pass

    @abstractmethod
    def resume(self) -> None:
        """Resume a paused utterance."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Cancel the active utterance, if any."""
        pass

    @abstractmethod
    async def list_voices(self) -> list[VoiceInfo]:
        """List available voices."""
        pass

    @property
    def is_initialized(self) -> bool:
        """Check if engine is initialized."""
        return self._initialized

    @property
    def is_speaking(self) -> bool:
        """Check if engine is currently speaking."""
        return self._is_speaking
