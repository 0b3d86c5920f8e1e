"""Basic reading example.

This example demonstrates reading text aloud with the default engine.
"""

import asyncio

from readaloud import PlaybackState, get_session


async def main():
    """Basic reading example."""
    async with get_session() as session:
        text = "Dr. Smith went home. He was tired. It had been a long day."
        print(f"Reading: {text}")

        session.start_reading(text)

        # Wait for completion
        while session.state != PlaybackState.STOPPED:
            await asyncio.sleep(0.1)

        print("✓ Done")


if __name__ == "__main__":
    asyncio.run(main())
