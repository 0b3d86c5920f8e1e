"""
readaloud - Text-to-Speech Reader with Sentence Navigation
==========================================================

Reads arbitrary text aloud with pause/resume and sentence/paragraph
navigation. Text is normalized into speakable form, segmented into
sentences and paragraphs, and spoken through a pluggable speech engine.

Quick Start:
-----------
```python
from readaloud import get_session

session = get_session()
await session.initialize()

session.start_reading("Dr. Smith went home. He was tired.")
session.toggle_pause()       # pause
session.toggle_pause()       # resume
session.restart_sentence()   # restart, or previous sentence if near the start
session.next_sentence()
```

Reading From a Source:
---------------------
```python
from readaloud import FileTextSource, get_session

async with get_session() as session:
    await session.read_from(FileTextSource("article.txt"))
```

Text Processing Only:
--------------------
```python
from readaloud import normalize, segment_sentences

text = normalize("Meet me at 5 p.m. (sharp) on Main St.")
sentences = segment_sentences(text)
```
"""

# Base classes (for type hints and custom engines)
from readaloud.core.base_engine import BaseSpeechEngine
from readaloud.core.config import ReaderConfig, SpeechPreferences
from readaloud.core.events import SpeakOptions, SpeechEvent, SpeechEventType

# Factory functions (primary API)
from readaloud.factory import (
    get_default_engine,
    get_engine,
    get_session,
    list_engines,
)
from readaloud.prefs import JsonPreferenceStore, MemoryPreferenceStore

# Playback
from readaloud.reader import Granularity, PlaybackSession, PlaybackState
from readaloud.sources import (
    BaseTextSource,
    FileTextSource,
    StaticTextSource,
    StdinTextSource,
)

# Text processing
from readaloud.text import (
    Boundary,
    TextNormalizer,
    locate,
    normalize,
    percent_read,
    segment_paragraphs,
    segment_sentences,
)

__version__ = "0.1.0"

__all__ = [
    # Base classes
    "BaseSpeechEngine",
    "BaseTextSource",
    "Boundary",
    "FileTextSource",
    "Granularity",
    "JsonPreferenceStore",
    "MemoryPreferenceStore",
    # Playback
    "PlaybackSession",
    "PlaybackState",
    "ReaderConfig",
    "SpeakOptions",
    "SpeechEvent",
    "SpeechEventType",
    "SpeechPreferences",
    "StaticTextSource",
    "StdinTextSource",
    # Text processing
    "TextNormalizer",
    # Version
    "__version__",
    "get_default_engine",
    # Factory functions (recommended API)
    "get_engine",
    "get_session",
    "list_engines",
    "locate",
    "normalize",
    "percent_read",
    "segment_paragraphs",
    "segment_sentences",
]
