"""
Sentence and paragraph segmentation over normalized text.

Both segmenters make a single left-to-right ``finditer`` pass and return
half-open ``[start, end)`` ranges over the input. The result is never
empty: text without delimiters is one boundary spanning all of it.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Boundary:
    """A half-open character range ``[start, end)``"""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def __contains__(self, char_index: object) -> bool:
        return isinstance(char_index, int) and self.start <= char_index < self.end

    def slice(self, text: str) -> str:
        """Return the text covered by this boundary."""
        return text[self.start : self.end]


# Terminator run plus its trailing whitespace, or a newline opening a
# capitalized or quoted line.
SENTENCE_END = re.compile(r"[.!?]+(?:\s+|\Z)|\n(?=[A-Z\"'“‘])")

# Blank line (optionally holding horizontal whitespace) or a lone newline.
PARAGRAPH_BREAK = re.compile(r"\n[^\S\n]*\n|\n")


def segment_sentences(text: str) -> list[Boundary]:
    """
    Split text into contiguous sentence boundaries.

    Args:
        text: Normalized text

    Returns:
        Ordered boundaries, ``boundaries[i].end == boundaries[i + 1].start``
    """
    boundaries: list[Boundary] = []
    start = 0

    for match in SENTENCE_END.finditer(text):
        end = match.end()
        if end > start:
            boundaries.append(Boundary(start, end))
            start = end

    if start < len(text):
        boundaries.append(Boundary(start, len(text)))

    return boundaries or [Boundary(0, len(text))]


def segment_paragraphs(text: str) -> list[Boundary]:
    """
    Split text into paragraph boundaries.

    Delimiter runs are skipped, so consecutive paragraphs may have a gap
    between them. A trailing delimiter run belongs to the last paragraph.

    Args:
        text: Normalized text

    Returns:
        Ordered, non-overlapping boundaries
    """
    boundaries: list[Boundary] = []
    start = 0

    for match in PARAGRAPH_BREAK.finditer(text):
        if match.start() > start:
            boundaries.append(Boundary(start, match.start()))
        start = match.end()

    if start < len(text):
        boundaries.append(Boundary(start, len(text)))
    elif boundaries:
        last = boundaries[-1]
        boundaries[-1] = Boundary(last.start, len(text))

    return boundaries or [Boundary(0, len(text))]
