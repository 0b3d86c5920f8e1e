"""
Text sources the playback session can read from.
"""

from readaloud.sources.base import BaseTextSource
from readaloud.sources.text_sources import (
    FileTextSource,
    StaticTextSource,
    StdinTextSource,
)

__all__ = ["BaseTextSource", "FileTextSource", "StaticTextSource", "StdinTextSource"]
