"""
Abstract base interface for text sources.
"""

from abc import ABC, abstractmethod


class BaseTextSource(ABC):
    """Something that can hand over the text the user wants read."""

    @abstractmethod
    async def get_selected_text(self) -> str:
        """
        Acquire the text to read.

        Returns:
            The text, possibly empty

        Raises:
            TextSourceError: If the source cannot be read
        """
        pass
