"""
Speech engine backed by pyttsx3 (SAPI5, NSSpeechSynthesizer, eSpeak).

pyttsx3 drivers are not thread-safe, so the driver lives on a dedicated
worker thread running the external event loop (``startLoop(False)`` plus
``iterate()``). Requests are queued to that thread; driver callbacks are
translated into ``SpeechEvent``s on it.

pyttsx3 has no native pause. Pausing stops the driver and remembers the
offset of the last spoken word; resuming speaks the rest of the text and
shifts word offsets so they stay relative to the original utterance.
"""

import asyncio
import itertools
import queue
import threading
from dataclasses import dataclass
from typing import Any

import pyttsx3
from loguru import logger

from readaloud.core.base_engine import BaseSpeechEngine
from readaloud.core.config import ReaderConfig
from readaloud.core.events import (
    EventCallback,
    SpeakOptions,
    SpeechEvent,
    SpeechEventType,
)
from readaloud.core.exceptions import SpeechEngineError
from readaloud.core.voices import VoiceInfo

POLL_INTERVAL = 0.01


@dataclass
class _Utterance:
    """Bookkeeping for the utterance owned by the worker thread."""

    text: str
    on_event: EventCallback
    name: str | None = None
    shift: int = 0
    position: int = 0
    paused: bool = False
    resuming: bool = False


def _voice_lang(voice: Any) -> str:
    languages = getattr(voice, "languages", None) or []
    if not languages:
        return ""
    lang = languages[0]
    if isinstance(lang, bytes):
        lang = lang.decode("utf-8", "ignore")
    lang = "".join(ch for ch in str(lang) if ch.isprintable()).strip()
    return lang.replace("_", "-")


class Pyttsx3SpeechEngine(BaseSpeechEngine):
    """Local system speech through pyttsx3."""

    def __init__(self, config: ReaderConfig | None = None):
        super().__init__(config)
        self._commands: queue.Queue[tuple[str, tuple]] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()
        self._init_error: Exception | None = None
        self._driver: Any = None
        self._voices: list[VoiceInfo] = []
        self._utterance: _Utterance | None = None
        self._names = itertools.count(1)

    async def initialize(self) -> None:
        """Start the worker thread and wait for the driver to load."""
        if self._initialized:
            return

        self._ready.clear()
        self._init_error = None
        self._thread = threading.Thread(
            target=self._run, name="readaloud-pyttsx3", daemon=True
        )
        self._thread.start()
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._ready.wait)

        if self._init_error is not None:
            logger.error(f"Failed to initialize pyttsx3: {self._init_error}")
            raise SpeechEngineError(
                f"Failed to initialize pyttsx3: {self._init_error}"
            ) from self._init_error

        self._initialized = True
        logger.info(f"pyttsx3 engine initialized ({len(self._voices)} voices)")

    async def shutdown(self) -> None:
        """Stop speech and the worker thread."""
        if not self._initialized:
            return

        self._commands.put(("shutdown", ()))
        if self._thread is not None:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._thread.join, 5.0)
        self._thread = None
        self._initialized = False
        logger.info("pyttsx3 engine shut down")

    def speak(self, text: str, options: SpeakOptions, on_event: EventCallback) -> None:
        self._submit("speak", text, options, on_event)

    def pause(self) -> None:
        self._submit("pause")

    def resume(self) -> None:
        self._submit("resume")

    def stop(self) -> None:
        if self._initialized:
            self._commands.put(("stop", ()))

    async def list_voices(self) -> list[VoiceInfo]:
        return list(self._voices)

    def _submit(self, command: str, *args: Any) -> None:
        if not self._initialized:
            raise SpeechEngineError("pyttsx3 engine is not initialized")
        self._commands.put((command, args))

    # Worker thread

    def _run(self) -> None:
        try:
            driver = (
                pyttsx3.init(self.config.driver_name)
                if self.config.driver_name
                else pyttsx3.init()
            )
            driver.connect("started-utterance", self._on_started_utterance)
            driver.connect("started-word", self._on_started_word)
            driver.connect("finished-utterance", self._on_finished_utterance)
            driver.connect("error", self._on_error)
            self._voices = [
                VoiceInfo(name=v.name, lang=_voice_lang(v), local=True, id=v.id)
                for v in driver.getProperty("voices") or []
            ]
            driver.startLoop(False)
        except Exception as e:
            self._init_error = e
            self._ready.set()
            return

        self._driver = driver
        self._ready.set()

        try:
            while True:
                try:
                    command, args = self._commands.get(timeout=POLL_INTERVAL)
                except queue.Empty:
                    driver.iterate()
                    continue

                if command == "shutdown":
                    self._do_stop()
                    break
                self._dispatch(command, args)
                driver.iterate()
        finally:
            driver.endLoop()
            self._driver = None

    def _dispatch(self, command: str, args: tuple) -> None:
        handlers = {
            "speak": self._do_speak,
            "pause": self._do_pause,
            "resume": self._do_resume,
            "stop": self._do_stop,
        }
        try:
            handlers[command](*args)
        except Exception as e:
            logger.error(f"pyttsx3 {command} failed: {e}")
            utterance = self._utterance
            if utterance is not None:
                self._utterance = None
                self._emit(utterance, SpeechEventType.ERROR, error_message=str(e))

    def _do_speak(
        self, text: str, options: SpeakOptions, on_event: EventCallback
    ) -> None:
        previous = self._utterance
        if previous is not None:
            self._utterance = None
            self._driver.stop()
            self._emit(previous, SpeechEventType.INTERRUPTED)

        self._apply_options(options)
        utterance = _Utterance(text=text, on_event=on_event)
        self._utterance = utterance
        self._say(utterance, 0)

    def _do_pause(self) -> None:
        utterance = self._utterance
        if utterance is None or utterance.paused:
            return
        utterance.paused = True
        utterance.name = None
        self._driver.stop()
        self._is_speaking = False
        self._emit(utterance, SpeechEventType.PAUSE)

    def _do_resume(self) -> None:
        utterance = self._utterance
        if utterance is None or not utterance.paused:
            return
        utterance.paused = False
        utterance.resuming = True
        self._say(utterance, utterance.position)

    def _do_stop(self) -> None:
        utterance = self._utterance
        if utterance is None:
            return
        self._utterance = None
        self._driver.stop()
        self._is_speaking = False
        self._emit(utterance, SpeechEventType.CANCELLED)

    def _say(self, utterance: _Utterance, shift: int) -> None:
        utterance.shift = shift
        utterance.name = f"utterance-{next(self._names)}"
        self._driver.say(utterance.text[shift:], utterance.name)

    def _apply_options(self, options: SpeakOptions) -> None:
        rate = max(1, round(self.config.base_words_per_minute * options.rate))
        self._driver.setProperty("rate", rate)

        if options.voice_name:
            voice = next(
                (
                    v
                    for v in self._voices
                    if options.voice_name in (v.name, v.id)
                ),
                None,
            )
            if voice is None:
                logger.warning(f"Voice not found: {options.voice_name}, using default")
            else:
                self._driver.setProperty("voice", voice.id)

        if options.pitch != 1.0:
            logger.debug("pyttsx3 does not support pitch, ignoring")

    def _current(self, name: str | None) -> _Utterance | None:
        utterance = self._utterance
        if utterance is None or utterance.paused or utterance.name != name:
            return None
        return utterance

    def _emit(self, utterance: _Utterance, event_type: SpeechEventType, **kwargs) -> None:
        try:
            utterance.on_event(SpeechEvent(event_type, **kwargs))
        except Exception as e:
            logger.error(f"Speech event handler failed on {event_type.value}: {e}")

    def _on_started_utterance(self, name: str) -> None:
        utterance = self._current(name)
        if utterance is None:
            return
        self._is_speaking = True
        if utterance.resuming:
            utterance.resuming = False
            self._emit(utterance, SpeechEventType.RESUME)
        else:
            self._emit(utterance, SpeechEventType.START)

    def _on_started_word(self, name: str, location: int, length: int) -> None:
        utterance = self._current(name)
        if utterance is None:
            return
        utterance.position = utterance.shift + location
        self._emit(utterance, SpeechEventType.WORD, char_index=utterance.position)

    def _on_finished_utterance(self, name: str, completed: bool) -> None:
        utterance = self._current(name)
        if utterance is None:
            return
        self._utterance = None
        self._is_speaking = False
        event_type = SpeechEventType.END if completed else SpeechEventType.CANCELLED
        self._emit(utterance, event_type)

    def _on_error(self, name: str, exception: Exception) -> None:
        utterance = self._current(name)
        if utterance is None:
            return
        self._utterance = None
        self._is_speaking = False
        self._emit(utterance, SpeechEventType.ERROR, error_message=str(exception))
