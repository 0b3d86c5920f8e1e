"""
Speech engine lifecycle events and speak request options.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, unique


@unique
class SpeechEventType(Enum):
    """Lifecycle events reported by a speech engine for one utterance"""

    START = "start"
    WORD = "word"
    END = "end"
    PAUSE = "pause"
    RESUME = "resume"
    CANCELLED = "cancelled"
    INTERRUPTED = "interrupted"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        """Whether the utterance is over once this event is seen."""
        return self in (
            SpeechEventType.END,
            SpeechEventType.CANCELLED,
            SpeechEventType.INTERRUPTED,
            SpeechEventType.ERROR,
        )


@dataclass(frozen=True)
class SpeechEvent:
    """A single lifecycle notification.

    ``char_index`` is relative to the text passed to ``speak`` and is only
    set for ``WORD`` events.
    """

    type: SpeechEventType
    char_index: int | None = None
    error_message: str | None = None


@dataclass(frozen=True)
class SpeakOptions:
    """Options carried by a speak request."""

    voice_name: str | None = None
    lang: str = "en-US"
    rate: float = 1.0
    pitch: float = 1.0
    enqueue: bool = False


EventCallback = Callable[[SpeechEvent], None]
