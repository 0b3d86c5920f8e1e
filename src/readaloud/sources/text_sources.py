"""
Concrete text sources: in-memory strings, files and standard input.
"""

import asyncio
import sys
from pathlib import Path
from typing import TextIO

from loguru import logger

from readaloud.core.exceptions import TextSourceError
from readaloud.sources.base import BaseTextSource


class StaticTextSource(BaseTextSource):
    """Returns a fixed string."""

    def __init__(self, text: str):
        self.text = text

    async def get_selected_text(self) -> str:
        return self.text


class FileTextSource(BaseTextSource):
    """Reads a UTF-8 text file."""

    def __init__(self, file_path: str | Path, encoding: str = "utf-8"):
        self.file_path = Path(file_path)
        self.encoding = encoding

    def _read(self) -> str:
        try:
            return self.file_path.read_text(encoding=self.encoding)
        except FileNotFoundError as e:
            raise TextSourceError(f"File not found: {self.file_path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise TextSourceError(f"Could not read {self.file_path}: {e}") from e

    async def get_selected_text(self) -> str:
        loop = asyncio.get_running_loop()
        text = await loop.run_in_executor(None, self._read)
        logger.debug(f"Read {len(text)} chars from {self.file_path}")
        return text


class StdinTextSource(BaseTextSource):
    """Reads everything available on standard input."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream

    async def get_selected_text(self) -> str:
        stream = self.stream or sys.stdin
        if stream.isatty():
            raise TextSourceError("No text piped to standard input")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, stream.read)
