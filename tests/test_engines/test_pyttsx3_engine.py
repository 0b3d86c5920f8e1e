"""
Tests for the pyttsx3 speech engine.

The driver is replaced with a fake so no audio device is needed.
"""

import pytest

from readaloud.core.config import ReaderConfig
from readaloud.core.events import SpeakOptions, SpeechEventType
from readaloud.core.exceptions import SpeechEngineError
from readaloud.core.voices import VoiceInfo, english_voices
from readaloud.engines.pyttsx3_engine import Pyttsx3SpeechEngine, _voice_lang


class FakeVoice:
    def __init__(self, id, name, languages):
        self.id = id
        self.name = name
        self.languages = languages


class FakeDriver:
    """Records driver calls; callbacks are fired by the tests."""

    def __init__(self):
        self.said: list[tuple[str, str]] = []
        self.properties: dict = {
            "voices": [
                FakeVoice("com.apple.samantha", "Samantha", [b"\x05en_US"]),
                FakeVoice("french", "Thomas", ["fr_FR"]),
            ]
        }
        self.callbacks: dict = {}
        self.stops = 0
        self.loop_started = False
        self.loop_ended = False

    def connect(self, topic, callback):
        self.callbacks[topic] = callback

    def getProperty(self, name):
        return self.properties.get(name)

    def setProperty(self, name, value):
        self.properties[name] = value

    def say(self, text, name=None):
        self.said.append((text, name))

    def stop(self):
        self.stops += 1

    def startLoop(self, use_driver_loop=True):
        self.loop_started = True

    def iterate(self):
        pass

    def endLoop(self):
        self.loop_ended = True


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def engine(driver):
    """Engine wired to a fake driver without starting the worker thread."""
    engine = Pyttsx3SpeechEngine(ReaderConfig(base_words_per_minute=200))
    engine._driver = driver
    engine._voices = [
        VoiceInfo(name="Samantha", lang="en-US", id="com.apple.samantha"),
        VoiceInfo(name="Thomas", lang="fr-FR", id="french"),
    ]
    return engine


@pytest.fixture
def events():
    return []


def speak(engine, events, text="Hello there. General Kenobi.", **options):
    engine._do_speak(text, SpeakOptions(**options), events.append)
    return engine._utterance.name


def test_speak_says_text_and_sets_rate(engine, driver, events):
    name = speak(engine, events, rate=1.5)

    assert driver.said == [("Hello there. General Kenobi.", name)]
    assert driver.properties["rate"] == 300


def test_speak_selects_voice_by_name_or_id(engine, driver, events):
    speak(engine, events, voice_name="Samantha")
    assert driver.properties["voice"] == "com.apple.samantha"

    speak(engine, events, voice_name="french")
    assert driver.properties["voice"] == "french"


def test_unknown_voice_keeps_default(engine, driver, events):
    speak(engine, events, voice_name="Nobody")
    assert "voice" not in driver.properties


def test_lifecycle_events(engine, driver, events):
    name = speak(engine, events)

    engine._on_started_utterance(name)
    engine._on_started_word(name, 6, 5)
    engine._on_finished_utterance(name, True)

    assert [e.type for e in events] == [
        SpeechEventType.START,
        SpeechEventType.WORD,
        SpeechEventType.END,
    ]
    assert events[1].char_index == 6
    assert engine._utterance is None


def test_finished_without_completion_is_cancelled(engine, events):
    name = speak(engine, events)
    engine._on_finished_utterance(name, False)

    assert events[-1].type == SpeechEventType.CANCELLED


def test_driver_error_reported(engine, events):
    name = speak(engine, events)
    engine._on_error(name, RuntimeError("audio device lost"))

    assert events[-1].type == SpeechEventType.ERROR
    assert events[-1].error_message == "audio device lost"


def test_new_speak_interrupts_previous(engine, driver, events):
    first_events = []
    first = speak(engine, first_events)
    speak(engine, events, text="Second.")

    assert first_events[-1].type == SpeechEventType.INTERRUPTED
    assert driver.stops == 1

    # Late callbacks for the first utterance are dropped
    engine._on_finished_utterance(first, True)
    assert [e.type for e in first_events] == [SpeechEventType.INTERRUPTED]
    assert events == []


def test_pause_and_resume_shift_word_offsets(engine, driver, events):
    name = speak(engine, events)
    engine._on_started_utterance(name)
    engine._on_started_word(name, 13, 7)

    engine._do_pause()
    assert events[-1].type == SpeechEventType.PAUSE
    assert driver.stops == 1

    # The stopped driver reports the paused utterance as finished
    engine._on_finished_utterance(name, False)
    assert events[-1].type == SpeechEventType.PAUSE

    engine._do_resume()
    resumed_text, resumed_name = driver.said[-1]
    assert resumed_text == "General Kenobi."

    engine._on_started_utterance(resumed_name)
    engine._on_started_word(resumed_name, 8, 6)

    assert events[-2].type == SpeechEventType.RESUME
    assert events[-1].type == SpeechEventType.WORD
    assert events[-1].char_index == 21


def test_pause_twice_is_noop(engine, driver, events):
    speak(engine, events)
    engine._do_pause()
    engine._do_pause()

    assert driver.stops == 1
    assert [e.type for e in events] == [SpeechEventType.PAUSE]


def test_resume_without_pause_is_noop(engine, driver, events):
    speak(engine, events)
    engine._do_resume()

    assert len(driver.said) == 1


def test_stop_cancels(engine, driver, events):
    speak(engine, events)
    engine._do_stop()

    assert events[-1].type == SpeechEventType.CANCELLED
    assert engine._utterance is None

    engine._do_stop()
    assert len(events) == 1


def test_failing_handler_is_logged(engine, driver):
    def handler(event):
        raise ValueError("boom")

    engine._do_speak("Hi.", SpeakOptions(), handler)
    engine._on_started_utterance(engine._utterance.name)


def test_dispatch_failure_emits_error(engine, driver, events):
    speak(engine, events)

    def broken_stop():
        raise RuntimeError("driver crashed")

    driver.stop = broken_stop
    engine._dispatch("pause", ())

    assert events[-1].type == SpeechEventType.ERROR
    assert events[-1].error_message == "driver crashed"


def test_requests_before_initialize_raise():
    engine = Pyttsx3SpeechEngine()

    with pytest.raises(SpeechEngineError):
        engine.speak("Hi.", SpeakOptions(), lambda event: None)
    with pytest.raises(SpeechEngineError):
        engine.pause()

    # stop is always safe
    engine.stop()


@pytest.mark.parametrize(
    ("languages", "expected"),
    [([b"\x05en_US"], "en-US"), (["en_GB"], "en-GB"), ([], ""), (None, "")],
)
def test_voice_lang(languages, expected):
    assert _voice_lang(FakeVoice("id", "name", languages)) == expected


@pytest.mark.asyncio
async def test_initialize_and_shutdown(monkeypatch, driver):
    monkeypatch.setattr(
        "readaloud.engines.pyttsx3_engine.pyttsx3.init", lambda *args: driver
    )
    engine = Pyttsx3SpeechEngine()

    async with engine:
        assert engine.is_initialized
        assert driver.loop_started
        assert set(driver.callbacks) == {
            "started-utterance",
            "started-word",
            "finished-utterance",
            "error",
        }
        voices = await engine.list_voices()
        assert [(v.name, v.lang) for v in voices] == [
            ("Samantha", "en-US"),
            ("Thomas", "fr-FR"),
        ]

    assert not engine.is_initialized
    assert driver.loop_ended


@pytest.mark.asyncio
async def test_initialize_failure_raises(monkeypatch):
    def broken_init(*args):
        raise RuntimeError("no speech driver")

    monkeypatch.setattr("readaloud.engines.pyttsx3_engine.pyttsx3.init", broken_init)
    engine = Pyttsx3SpeechEngine()

    with pytest.raises(SpeechEngineError, match="no speech driver"):
        await engine.initialize()
    assert not engine.is_initialized


@pytest.mark.asyncio
async def test_voices_without_languages_stay_listed(monkeypatch, driver):
    driver.properties["voices"] = [
        FakeVoice(
            "HKEY_LOCAL_MACHINE\\SOFTWARE\\Microsoft\\Speech\\Voices\\Tokens\\TTS_MS_EN-US_ZIRA_11.0",
            "Microsoft Zira Desktop - English (United States)",
            [],
        )
    ]
    monkeypatch.setattr(
        "readaloud.engines.pyttsx3_engine.pyttsx3.init", lambda *args: driver
    )

    async with Pyttsx3SpeechEngine() as engine:
        voices = english_voices(await engine.list_voices())

    assert [v.name for v in voices] == [
        "Microsoft Zira Desktop - English (United States)"
    ]
    assert voices[0].lang == ""
