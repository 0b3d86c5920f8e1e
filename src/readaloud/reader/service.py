"""
Playback session with sentence and paragraph navigation.
"""

import threading
import time
from collections.abc import Callable
from enum import Enum
from functools import partial

from blinker import Signal
from loguru import logger

from readaloud.core.base_engine import BaseSpeechEngine
from readaloud.core.config import ReaderConfig, SpeechPreferences
from readaloud.core.events import SpeakOptions, SpeechEvent, SpeechEventType
from readaloud.prefs.store import BasePreferenceStore
from readaloud.reader.navigation import Granularity, NavigationPolicy
from readaloud.sources.base import BaseTextSource
from readaloud.text.boundaries import locate
from readaloud.text.normalizer import TextNormalizer
from readaloud.text.segmenter import Boundary, segment_paragraphs, segment_sentences


class PlaybackState(Enum):
    """Playback session states."""

    STOPPED = "stopped"
    PLAYING = "playing"
    PAUSED = "paused"


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class PlaybackSession:
    """
    Owns the text being read, the reading position and the playback state.

    Commands fire requests at the speech engine and return immediately.
    Engine lifecycle events come back through ``handle_event`` tagged with
    the generation of the utterance that produced them; events from a
    superseded utterance are dropped.
    """

    def __init__(
        self,
        engine: BaseSpeechEngine,
        config: ReaderConfig | None = None,
        preferences: BasePreferenceStore | None = None,
        normalizer: TextNormalizer | None = None,
        clock: Callable[[], float] | None = None,
    ):
        self.engine = engine
        self.config = config or engine.config
        self.preferences = preferences
        self.normalizer = normalizer or TextNormalizer()
        self._clock = clock or _monotonic_ms
        self._lock = threading.RLock()

        # State
        self._state = PlaybackState.STOPPED
        self._current_text: str = ""
        self._current_char_index = 0
        self._sentences: list[Boundary] = []
        self._paragraphs: list[Boundary] = []
        self._prefs = SpeechPreferences()
        self._generation = 0
        self._utterance_offset = 0

        self._policies = {
            granularity: NavigationPolicy(
                granularity,
                rapid_repeat_ms=self.config.rapid_repeat_ms,
                near_start_fraction=self.config.near_start_fraction,
            )
            for granularity in Granularity
        }

        # Signals
        self.on_reading_started = Signal()
        self.on_reading_paused = Signal()
        self.on_reading_resumed = Signal()
        self.on_reading_stopped = Signal()
        self.on_reading_completed = Signal()
        self.on_navigated = Signal()
        self.on_state_changed = Signal()
        self.on_error = Signal()

    @property
    def state(self) -> PlaybackState:
        """Get current playback state."""
        return self._state

    @property
    def current_text(self) -> str:
        return self._current_text

    @property
    def current_char_index(self) -> int:
        return self._current_char_index

    @property
    def sentences(self) -> list[Boundary]:
        return list(self._sentences)

    @property
    def paragraphs(self) -> list[Boundary]:
        return list(self._paragraphs)

    @property
    def prefs(self) -> SpeechPreferences:
        return self._prefs

    @property
    def generation(self) -> int:
        """Generation of the most recent speak request."""
        return self._generation

    def get_state(self) -> PlaybackState:
        return self._state

    def _set_state(self, new_state: PlaybackState) -> None:
        """Set playback state and emit signal."""
        if self._state != new_state:
            old_state = self._state
            self._state = new_state
            self.on_state_changed.send(
                self,
                old_state=old_state.value,
                new_state=new_state.value,
            )
            logger.debug(f"Playback state: {old_state.value} -> {new_state.value}")

    def _resolve_prefs(self, prefs: SpeechPreferences | None) -> SpeechPreferences:
        if prefs is not None:
            return prefs
        if self.preferences is not None:
            return self.preferences.get()
        return SpeechPreferences()

    def _cancel_utterance(self) -> None:
        """Supersede the active utterance so its late events are ignored."""
        self._generation += 1
        self.engine.stop()

    def load(self, raw_text: str, prefs: SpeechPreferences | None = None) -> bool:
        """
        Start a new playback of ``raw_text`` from its beginning.

        Args:
            raw_text: Text to read, normalized before use
            prefs: Voice preferences (resolved from the store if None)

        Returns:
            True if a speak request was issued
        """
        with self._lock:
            self._cancel_utterance()

            text = self.normalizer.normalize(raw_text or "")
            if not text:
                logger.info("Nothing to read after normalization")
                self._set_state(PlaybackState.STOPPED)
                return False

            self._current_text = text
            self._current_char_index = 0
            self._sentences = segment_sentences(text)
            self._paragraphs = segment_paragraphs(text)
            self._prefs = self._resolve_prefs(prefs)
            logger.info(
                f"Loaded {len(text)} chars: {len(self._sentences)} sentences, "
                f"{len(self._paragraphs)} paragraphs"
            )
            self.on_reading_started.send(self, text=text)
            return self.speak_from(0)

    def speak_from(self, offset: int) -> bool:
        """
        Speak the current text from ``offset`` onward.

        Returns:
            True if a speak request was issued, False at the end of the text
        """
        with self._lock:
            self._cancel_utterance()

            remainder = self._current_text[offset:]
            spoken = remainder.strip()
            if not spoken:
                logger.debug(f"Nothing left to read from offset {offset}")
                self._set_state(PlaybackState.STOPPED)
                return False

            start = offset + (len(remainder) - len(remainder.lstrip()))
            self._current_char_index = start
            self._utterance_offset = start

            options = SpeakOptions(
                voice_name=self._prefs.voice_name or None,
                lang=self.config.lang,
                rate=self._prefs.rate,
                pitch=self._prefs.pitch,
                enqueue=False,
            )
            generation = self._generation
            self._set_state(PlaybackState.PLAYING)
            try:
                self.engine.speak(spoken, options, partial(self.handle_event, generation))
            except Exception as e:
                logger.error(f"Speech engine rejected request: {e}")
                self._set_state(PlaybackState.STOPPED)
                self.on_error.send(self, error=str(e))
                return False
            return True

    def start_reading(
        self, text: str, prefs: SpeechPreferences | None = None
    ) -> bool:
        """Read fresh text from the start."""
        return self.load(text, prefs)

    async def read_from(
        self, source: BaseTextSource, prefs: SpeechPreferences | None = None
    ) -> bool:
        """
        Acquire text from a source and read it.

        Acquisition failures are logged and leave the session stopped.
        """
        self.stop()
        try:
            text = await source.get_selected_text()
        except Exception as e:
            logger.error(f"Could not acquire text: {e}")
            return False

        if not text or not text.strip():
            logger.info("Text source returned nothing to read")
            return False

        return self.load(text, prefs)

    def toggle_pause(self) -> None:
        """Pause when playing, resume when paused."""
        with self._lock:
            if self._state == PlaybackState.PLAYING:
                self.engine.pause()
                self._set_state(PlaybackState.PAUSED)
                self.on_reading_paused.send(self)
                logger.info("Reading paused")
            elif self._state == PlaybackState.PAUSED:
                self.engine.resume()
                self._set_state(PlaybackState.PLAYING)
                self.on_reading_resumed.send(self)
                logger.info("Reading resumed")

    def stop(self) -> None:
        """Stop reading."""
        with self._lock:
            self._cancel_utterance()
            if self._state != PlaybackState.STOPPED:
                self._set_state(PlaybackState.STOPPED)
                self.on_reading_stopped.send(self)
                logger.info("Reading stopped")

    def restart(self, granularity: Granularity) -> bool:
        """
        Restart the current sentence or paragraph, or go to the previous one.

        Returns:
            True if speech moved
        """
        with self._lock:
            if self._state == PlaybackState.STOPPED or not self._current_text:
                return False

            boundaries = self._boundaries(granularity)
            decision = self._policies[granularity].decide(
                boundaries, self._current_char_index, self._clock()
            )
            self.on_navigated.send(
                self, granularity=granularity.value, target=decision.target_offset
            )
            return self.speak_from(decision.target_offset)

    def restart_sentence(self) -> bool:
        return self.restart(Granularity.SENTENCE)

    def restart_paragraph(self) -> bool:
        return self.restart(Granularity.PARAGRAPH)

    def next_sentence(self) -> bool:
        """Skip to the start of the following sentence, if there is one."""
        with self._lock:
            if self._state == PlaybackState.STOPPED or not self._current_text:
                return False

            index = locate(self._sentences, self._current_char_index)
            if index + 1 >= len(self._sentences):
                logger.debug("Already in the last sentence")
                return False

            target = self._sentences[index + 1].start
            self.on_navigated.send(
                self, granularity=Granularity.SENTENCE.value, target=target
            )
            return self.speak_from(target)

    def _boundaries(self, granularity: Granularity) -> list[Boundary]:
        if granularity == Granularity.PARAGRAPH:
            return self._paragraphs
        return self._sentences

    def handle_event(self, generation: int, event: SpeechEvent) -> None:
        """
        Apply an engine lifecycle event.

        Args:
            generation: Generation of the utterance that produced the event
            event: The event
        """
        with self._lock:
            if generation != self._generation:
                logger.trace(
                    f"Dropping stale {event.type.value} event "
                    f"(generation {generation}, current {self._generation})"
                )
                return

            if event.type in (SpeechEventType.START, SpeechEventType.RESUME):
                self._set_state(PlaybackState.PLAYING)
            elif event.type == SpeechEventType.WORD:
                if event.char_index is not None:
                    self._current_char_index = self._utterance_offset + event.char_index
            elif event.type == SpeechEventType.PAUSE:
                self._set_state(PlaybackState.PAUSED)
            elif event.type.is_terminal:
                self._set_state(PlaybackState.STOPPED)
                if event.type == SpeechEventType.END:
                    self.on_reading_completed.send(self)
                    logger.info("Reading completed")
                elif event.type == SpeechEventType.ERROR:
                    message = event.error_message or "unknown error"
                    logger.error(f"Speech error: {message}")
                    self.on_error.send(self, error=message)
                else:
                    self.on_reading_stopped.send(self)

    async def initialize(self) -> None:
        """Initialize the speech engine."""
        if not self.engine.is_initialized:
            await self.engine.initialize()
            logger.info("Playback session initialized")

    async def cleanup(self) -> None:
        """Stop reading and shut the engine down."""
        self.stop()
        if self.engine.is_initialized:
            await self.engine.shutdown()
            logger.info("Playback session cleaned up")

    async def __aenter__(self):
        """Async context manager entry."""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.cleanup()
        return False
