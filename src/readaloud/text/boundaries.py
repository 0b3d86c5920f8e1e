"""
Locating character offsets within boundary sequences.
"""

from collections.abc import Sequence

from readaloud.text.segmenter import Boundary


def locate(boundaries: Sequence[Boundary], char_index: int) -> int:
    """
    Find the boundary containing a character offset.

    Offsets outside every boundary (a paragraph gap, or the end of the
    text) fall back to index 0 instead of raising.

    Args:
        boundaries: Ordered boundaries
        char_index: Offset into the segmented text

    Returns:
        Index of the first boundary containing ``char_index``, or 0
    """
    for index, boundary in enumerate(boundaries):
        if boundary.start <= char_index < boundary.end:
            return index
    return 0


def percent_read(
    boundaries: Sequence[Boundary], index: int, char_index: int
) -> float:
    """
    Fraction of a boundary already read, in ``[0, 1]``.

    A zero-length boundary counts as fully read.
    """
    boundary = boundaries[index]
    length = boundary.end - boundary.start
    if length <= 0:
        return 1.0
    fraction = (char_index - boundary.start) / length
    return min(1.0, max(0.0, fraction))
