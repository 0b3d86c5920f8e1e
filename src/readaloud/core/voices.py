"""
Voice descriptions and selection helpers.
"""

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class VoiceInfo:
    """A voice offered by a speech engine."""

    name: str
    lang: str = ""
    local: bool = True
    id: str = ""

    @property
    def label(self) -> str:
        """Display label, remote voices are marked."""
        return self.name if self.local else f"{self.name} (remote)"


def english_voices(voices: Iterable[VoiceInfo]) -> list[VoiceInfo]:
    """
    Keep English voices, local voices first, then alphabetical by name.

    Voices without a language (SAPI5 reports none) are kept when their name
    says they are English.

    Args:
        voices: Voices reported by an engine

    Returns:
        Filtered and sorted voices
    """
    selected = [v for v in voices if is_english(v)]
    return sorted(selected, key=lambda v: (not v.local, v.name.casefold()))


def is_english(voice: VoiceInfo) -> bool:
    if voice.lang:
        return voice.lang.lower().startswith("en")
    return "english" in voice.name.casefold()
