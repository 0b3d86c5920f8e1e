"""Custom engine example.

This example demonstrates plugging a custom speech engine into a session.
The engine "speaks" by printing one word at a time.
"""

import asyncio
import re

from readaloud import (
    BaseSpeechEngine,
    PlaybackSession,
    PlaybackState,
    SpeakOptions,
    SpeechEvent,
    SpeechEventType,
)
from readaloud.core.events import EventCallback
from readaloud.core.voices import VoiceInfo


class PrintingSpeechEngine(BaseSpeechEngine):
    """Prints words at a steady pace instead of producing audio."""

    def __init__(self, words_per_second: float = 4.0):
        super().__init__()
        self.words_per_second = words_per_second
        self._task: asyncio.Task | None = None
        self._paused = asyncio.Event()

    async def initialize(self) -> None:
        self._initialized = True

    async def shutdown(self) -> None:
        self.stop()
        self._initialized = False

    def speak(self, text: str, options: SpeakOptions, on_event: EventCallback) -> None:
        self.stop()
        self._paused.set()
        self._task = asyncio.get_running_loop().create_task(
            self._speak(text, options.rate, on_event)
        )

    async def _speak(self, text: str, rate: float, on_event: EventCallback) -> None:
        try:
            on_event(SpeechEvent(SpeechEventType.START))
            for match in re.finditer(r"\S+", text):
                await self._paused.wait()
                on_event(SpeechEvent(SpeechEventType.WORD, char_index=match.start()))
                print(match.group(), end=" ", flush=True)
                await asyncio.sleep(1 / (self.words_per_second * rate))
            on_event(SpeechEvent(SpeechEventType.END))
        except asyncio.CancelledError:
            on_event(SpeechEvent(SpeechEventType.CANCELLED))
            raise

    def pause(self) -> None:
        self._paused.clear()

    def resume(self) -> None:
        self._paused.set()

    def stop(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def list_voices(self) -> list[VoiceInfo]:
        return [VoiceInfo(name="Console", lang="en-US")]


async def main():
    """Custom engine example."""
    async with PlaybackSession(PrintingSpeechEngine()) as session:
        session.start_reading("One two three. Four five six. Seven eight nine.")

        await asyncio.sleep(1.6)
        session.restart_sentence()

        while session.state != PlaybackState.STOPPED:
            await asyncio.sleep(0.1)
        print()


if __name__ == "__main__":
    asyncio.run(main())
