"""
Playback session and navigation policy.
"""

from readaloud.reader.navigation import (
    Granularity,
    NavigationDecision,
    NavigationPolicy,
    decide_target,
)
from readaloud.reader.service import PlaybackSession, PlaybackState

__all__ = [
    "Granularity",
    "NavigationDecision",
    "NavigationPolicy",
    "PlaybackSession",
    "PlaybackState",
    "decide_target",
]
