"""Navigation example.

This example demonstrates pause/resume and sentence/paragraph navigation.
"""

import asyncio

from readaloud import PlaybackState, SpeechPreferences, get_session

TEXT = """Chapter One
It was a bright cold day in April. The clocks were striking thirteen.

Outside, even through the shut window, the world looked cold. Down in the
street little eddies of wind were whirling dust into spirals."""


async def main():
    """Navigation example."""
    async with get_session() as session:
        session.start_reading(TEXT, SpeechPreferences(rate=1.2))
        print(f"Sentences: {len(session.sentences)}")
        print(f"Paragraphs: {len(session.paragraphs)}")

        await asyncio.sleep(3)
        print("⏸ Pause")
        session.toggle_pause()

        await asyncio.sleep(1)
        print("▶ Resume")
        session.toggle_pause()

        await asyncio.sleep(2)
        print("⏮ Restart sentence")
        session.restart_sentence()

        # A second tap within 1.5 s goes to the previous sentence
        await asyncio.sleep(0.5)
        print("⏮⏮ Previous sentence")
        session.restart_sentence()

        await asyncio.sleep(2)
        print("⏭ Next sentence")
        session.next_sentence()

        await asyncio.sleep(2)
        print("⏮ Restart paragraph")
        session.restart_paragraph()

        while session.state != PlaybackState.STOPPED:
            await asyncio.sleep(0.1)


if __name__ == "__main__":
    asyncio.run(main())
