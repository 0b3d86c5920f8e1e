"""
Tests for the command-line interface.
"""

import json

import pytest
from typer.testing import CliRunner

from readaloud import __version__
from readaloud.cli import main as cli_main
from readaloud.core.events import SpeechEvent, SpeechEventType
from readaloud.reader import PlaybackSession

runner = CliRunner()


@pytest.fixture
def prefs_path(tmp_path, monkeypatch):
    path = tmp_path / "prefs.json"
    monkeypatch.setenv("READALOUD_PREFERENCES_PATH", str(path))
    return path


@pytest.fixture
def finishing_engine(mock_engine):
    """Mock engine that reports every utterance as finished right away."""
    speak = mock_engine.speak

    def speak_and_finish(text, options, on_event):
        speak(text, options, on_event)
        on_event(SpeechEvent(SpeechEventType.END))

    mock_engine.speak = speak_and_finish
    return mock_engine


@pytest.fixture
def patched_session(monkeypatch, finishing_engine):
    def fake_get_session(engine_type="pyttsx3", config=None, preferences=None):
        return PlaybackSession(finishing_engine, config=config, preferences=preferences)

    monkeypatch.setattr(cli_main, "get_session", fake_get_session)
    return finishing_engine


def test_version():
    result = runner.invoke(cli_main.app, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_prefs_show_defaults(prefs_path):
    result = runner.invoke(cli_main.app, ["prefs", "show"])
    assert result.exit_code == 0
    assert "(default)" in result.stdout


def test_prefs_set_and_show(prefs_path):
    result = runner.invoke(
        cli_main.app, ["prefs", "set", "--voice", "Samantha", "--rate", "1.5"]
    )
    assert result.exit_code == 0
    assert json.loads(prefs_path.read_text()) == {
        "voiceName": "Samantha",
        "rate": 1.5,
        "pitch": 1.0,
    }

    result = runner.invoke(cli_main.app, ["prefs", "show"])
    assert "Samantha" in result.stdout
    assert "1.5" in result.stdout


def test_prefs_set_nothing_to_change(prefs_path):
    result = runner.invoke(cli_main.app, ["prefs", "set"])
    assert result.exit_code == 1
    assert not prefs_path.exists()


def test_prefs_set_rejects_out_of_range_rate(prefs_path):
    result = runner.invoke(cli_main.app, ["prefs", "set", "--rate", "20"])
    assert result.exit_code != 0


def test_voices_lists_english_voices(monkeypatch, mock_engine, prefs_path):
    prefs_path.write_text(json.dumps({"voiceName": "Samantha"}))
    monkeypatch.setattr(cli_main, "get_engine", lambda *args, **kwargs: mock_engine)

    result = runner.invoke(cli_main.app, ["voices"])

    assert result.exit_code == 0
    assert "Samantha" in result.stdout
    assert "(selected)" in result.stdout
    assert "Google UK English (remote)" in result.stdout
    assert "Thomas" not in result.stdout


def test_read_text_option(patched_session, prefs_path):
    result = runner.invoke(
        cli_main.app, ["read", "--text", "Dr. Smith went home.", "--rate", "1.2"]
    )

    assert result.exit_code == 0
    assert "Reading complete" in result.stdout
    text, options = patched_session.spoken[-1]
    assert text == "Doctor Smith went home."
    assert options.rate == 1.2


def test_read_file(patched_session, prefs_path, tmp_path):
    path = tmp_path / "story.txt"
    path.write_text("Once upon a time. The end.", encoding="utf-8")

    result = runner.invoke(cli_main.app, ["read", str(path)])

    assert result.exit_code == 0
    assert patched_session.last_text == "Once upon a time. The end."


def test_read_blank_text(patched_session, prefs_path):
    result = runner.invoke(cli_main.app, ["read", "--text", "   "])

    assert result.exit_code == 0
    assert "Nothing to read" in result.stdout
    assert patched_session.spoken == []


def test_test_command_speaks_phrase(patched_session, prefs_path):
    result = runner.invoke(cli_main.app, ["test", "--voice", "Samantha"])

    assert result.exit_code == 0
    text, options = patched_session.spoken[-1]
    assert text == cli_main.TEST_PHRASE
    assert options.voice_name == "Samantha"
