"""Event handling example.

This example demonstrates using signals to monitor playback.
"""

import asyncio

from readaloud import PlaybackState, get_session


async def main():
    """Event handling example."""
    session = get_session()
    await session.initialize()

    # Track events
    events = []

    @session.on_reading_started.connect
    def on_start(sender, **kwargs):
        events.append(("started", kwargs.get("text", "")[:30]))
        print(f"✓ Reading started: {kwargs.get('text', '')[:50]}...")

    @session.on_state_changed.connect
    def on_state(sender, **kwargs):
        events.append(("state", f"{kwargs['old_state']} -> {kwargs['new_state']}"))

    @session.on_navigated.connect
    def on_navigated(sender, **kwargs):
        events.append(("navigated", kwargs["target"]))
        print(f"  → Jumped to {kwargs['granularity']} at {kwargs['target']}")

    @session.on_reading_stopped.connect
    def on_stop(sender, **kwargs):
        events.append(("stopped", None))
        print("⏹ Reading stopped")

    @session.on_reading_completed.connect
    def on_complete(sender, **kwargs):
        events.append(("completed", None))
        print("✓ Reading completed!")

    @session.on_error.connect
    def on_error(sender, **kwargs):
        events.append(("error", kwargs.get("error")))
        print(f"✗ Error: {kwargs.get('error')}")

    text = "This example demonstrates signals. Watch them as they occur! Then it ends."
    session.start_reading(text)

    await asyncio.sleep(1.5)
    session.next_sentence()

    while session.state != PlaybackState.STOPPED:
        await asyncio.sleep(0.1)

    # Print event summary
    print(f"\n{'='*50}")
    print("Event Summary:")
    print(f"{'='*50}")
    for event_type, data in events:
        if data is not None:
            print(f"  - {event_type}: {data}")
        else:
            print(f"  - {event_type}")

    await session.cleanup()


if __name__ == "__main__":
    asyncio.run(main())
