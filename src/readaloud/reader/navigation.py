"""
Restart-current versus jump-to-previous navigation decisions.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from loguru import logger

from readaloud.text.boundaries import locate, percent_read
from readaloud.text.segmenter import Boundary

RAPID_REPEAT_MS = 1500.0
NEAR_START_FRACTION = 0.25


class Granularity(Enum):
    """Navigation scope."""

    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"


@dataclass(frozen=True)
class NavigationDecision:
    """Where a navigation command should resume speech."""

    target_offset: int
    index: int
    timestamp: float


def decide_target(
    boundaries: Sequence[Boundary],
    char_index: int,
    now: float,
    last_nav_timestamp: float | None,
    rapid_repeat_ms: float = RAPID_REPEAT_MS,
    near_start_fraction: float = NEAR_START_FRACTION,
) -> NavigationDecision:
    """
    Decide whether to restart the current boundary or go to the previous one.

    The previous boundary wins when the command repeats within
    ``rapid_repeat_ms`` of the last one, or when less than
    ``near_start_fraction`` of the current boundary has been read. The
    returned timestamp is always ``now``.

    Args:
        boundaries: Ordered boundaries for one granularity
        char_index: Current reading position
        now: Current time in milliseconds
        last_nav_timestamp: Time of the previous command, None if there was none

    Returns:
        Navigation decision carrying the target offset and updated timestamp
    """
    if not boundaries:
        return NavigationDecision(target_offset=0, index=0, timestamp=now)

    index = locate(boundaries, char_index)
    fraction = percent_read(boundaries, index, char_index)
    rapid_repeat = (
        last_nav_timestamp is not None and now - last_nav_timestamp < rapid_repeat_ms
    )

    if (rapid_repeat or fraction < near_start_fraction) and index > 0:
        index -= 1

    return NavigationDecision(
        target_offset=boundaries[index].start, index=index, timestamp=now
    )


class NavigationPolicy:
    """Rapid-repeat memory for one granularity."""

    def __init__(
        self,
        granularity: Granularity,
        rapid_repeat_ms: float = RAPID_REPEAT_MS,
        near_start_fraction: float = NEAR_START_FRACTION,
    ):
        self.granularity = granularity
        self.rapid_repeat_ms = rapid_repeat_ms
        self.near_start_fraction = near_start_fraction
        self.last_nav_timestamp: float | None = None

    def decide(
        self, boundaries: Sequence[Boundary], char_index: int, now: float
    ) -> NavigationDecision:
        """Decide a target and remember ``now`` as the last navigation time."""
        decision = decide_target(
            boundaries,
            char_index,
            now,
            self.last_nav_timestamp,
            rapid_repeat_ms=self.rapid_repeat_ms,
            near_start_fraction=self.near_start_fraction,
        )
        self.last_nav_timestamp = decision.timestamp
        logger.debug(
            f"Restart {self.granularity.value}: offset {char_index} -> "
            f"{decision.target_offset} (boundary {decision.index})"
        )
        return decision

    def reset(self) -> None:
        """Forget the last navigation time."""
        self.last_nav_timestamp = None
