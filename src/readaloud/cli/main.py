"""
Command-line interface for readaloud.
"""

import asyncio
import sys
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from readaloud import get_engine, get_session
from readaloud.core.config import ReaderConfig, SpeechPreferences
from readaloud.core.exceptions import PreferenceStoreError, SpeechEngineError
from readaloud.core.voices import english_voices
from readaloud.prefs import JsonPreferenceStore
from readaloud.reader import PlaybackSession, PlaybackState
from readaloud.sources import (
    BaseTextSource,
    FileTextSource,
    StaticTextSource,
    StdinTextSource,
)

TEST_PHRASE = "This is a test of the text to speech reader."

app = typer.Typer(
    name="readaloud",
    help="readaloud - read text aloud with sentence and paragraph navigation",
    add_completion=False,
)
prefs_app = typer.Typer(help="Show or change voice preferences.")
app.add_typer(prefs_app, name="prefs")
console = Console()


def _apply_overrides(
    prefs: SpeechPreferences,
    voice: str | None,
    rate: float | None,
    pitch: float | None,
) -> SpeechPreferences:
    overrides = {
        key: value
        for key, value in (("voiceName", voice), ("rate", rate), ("pitch", pitch))
        if value is not None
    }
    return prefs.merged(overrides) if overrides else prefs


async def _initialize(session: PlaybackSession) -> None:
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Initializing speech engine...", total=None)
        try:
            await session.initialize()
        finally:
            progress.remove_task(task)


def _stopped_event(session: PlaybackSession) -> tuple[asyncio.Event, object]:
    """Event set from any thread once playback returns to stopped."""
    loop = asyncio.get_running_loop()
    finished = asyncio.Event()

    def on_state_changed(sender, **kwargs):
        if kwargs["new_state"] == PlaybackState.STOPPED.value:
            loop.call_soon_threadsafe(finished.set)

    session.on_state_changed.connect(on_state_changed)
    # Caller keeps the receiver alive, blinker holds it weakly
    return finished, on_state_changed


@app.command()
def read(
    file_path: Path | None = typer.Argument(None, help="Text file to read"),
    text: str
    | None = typer.Option(
        None, "--text", "-t", help="Text to read (alternative to file)"
    ),
    voice: str | None = typer.Option(None, "--voice", "-v", help="Voice to use"),
    rate: float
    | None = typer.Option(None, "--rate", "-r", min=0.1, max=10.0, help="Speech rate"),
    pitch: float
    | None = typer.Option(None, "--pitch", min=0.0, max=2.0, help="Speech pitch"),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Interactive mode with controls"
    ),
):
    """Read text from a file, a string or standard input."""
    config = ReaderConfig.from_env()
    store = JsonPreferenceStore(config.preferences_path)
    prefs = _apply_overrides(store.get(), voice, rate, pitch)

    source: BaseTextSource
    if text:
        source = StaticTextSource(text)
    elif file_path:
        source = FileTextSource(file_path)
    else:
        source = StdinTextSource()

    async def run():
        session = get_session(config=config, preferences=store)
        try:
            await _initialize(session)
        except SpeechEngineError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e

        finished, _receiver = _stopped_event(session)
        try:
            if not await session.read_from(source, prefs):
                console.print("[yellow]Nothing to read[/yellow]")
                return

            console.print(f"📖 Reading: [cyan]{session.current_text[:100]}[/cyan]")
            await finished.wait()
            console.print("✓ Reading complete")

        except (KeyboardInterrupt, asyncio.CancelledError):
            console.print("\n⏹ Stopping...")
            session.stop()

        finally:
            await session.cleanup()

    async def run_interactive():
        """Run in interactive mode with keyboard controls."""
        import termios
        import threading
        import tty

        session = get_session(config=config, preferences=store)
        try:
            await _initialize(session)
        except SpeechEngineError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e

        console.print("\n[bold green]Interactive Mode Controls:[/bold green]")
        console.print("  [cyan]SPACE[/cyan] - Pause/Resume")
        console.print("  [cyan]S[/cyan]     - Restart sentence (twice: previous)")
        console.print("  [cyan]P[/cyan]     - Restart paragraph (twice: previous)")
        console.print("  [cyan]N[/cyan]     - Next sentence")
        console.print("  [cyan]X[/cyan]     - Stop")
        console.print("  [cyan]Q[/cyan]     - Quit\n")

        # Handle keyboard input
        def get_key():
            """Get a single keypress."""
            fd = sys.stdin.fileno()
            old_settings = termios.tcgetattr(fd)
            try:
                tty.setraw(fd)
                ch = sys.stdin.read(1)
            finally:
                termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
            return ch

        loop = asyncio.get_running_loop()
        key_queue: asyncio.Queue[str] = asyncio.Queue()

        def key_listener():
            """Listen for keypresses in a separate thread."""
            while True:
                key = get_key()
                loop.call_soon_threadsafe(key_queue.put_nowait, key)
                if key.lower() == "q":
                    break

        try:
            if not await session.read_from(source, prefs):
                console.print("[yellow]Nothing to read[/yellow]")
                return
            console.print(f"📖 Reading: [cyan]{session.current_text[:100]}[/cyan]")

            # Start key listener thread
            listener_thread = threading.Thread(target=key_listener, daemon=True)
            listener_thread.start()

            # Process key commands
            while True:
                try:
                    key = await asyncio.wait_for(key_queue.get(), timeout=0.2)
                except asyncio.TimeoutError:
                    if session.state == PlaybackState.STOPPED:
                        console.print("✓ Reading complete")
                        break
                    continue

                if key == " ":
                    session.toggle_pause()
                    if session.state == PlaybackState.PAUSED:
                        console.print("⏸ [yellow]Paused[/yellow]")
                    elif session.state == PlaybackState.PLAYING:
                        console.print("▶ [green]Resumed[/green]")

                elif key.lower() == "s":
                    if session.restart_sentence():
                        console.print("⏮ Sentence")

                elif key.lower() == "p":
                    if session.restart_paragraph():
                        console.print("⏮ Paragraph")

                elif key.lower() == "n":
                    if session.next_sentence():
                        console.print("⏭ Next sentence")

                elif key.lower() == "x":
                    session.stop()
                    console.print("⏹ [red]Stopped[/red]")
                    break

                elif key.lower() == "q":
                    console.print("👋 Quitting...")
                    break

        except KeyboardInterrupt:
            console.print("\n⏹ Stopping...")
            session.stop()

        finally:
            await session.cleanup()

    if interactive:
        asyncio.run(run_interactive())
    else:
        asyncio.run(run())


@app.command()
def voices():
    """List available English voices, local voices first."""

    async def run():
        config = ReaderConfig.from_env()
        engine = get_engine(config.engine, config=config)  # type: ignore[arg-type]
        try:
            async with engine:
                available = english_voices(await engine.list_voices())
        except SpeechEngineError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e

        selected = JsonPreferenceStore(config.preferences_path).get().voice_name
        console.print(f"\n[bold]English voices for {config.engine}:[/bold]")
        for voice in available:
            marker = ""
            if selected and selected in (voice.name, voice.id):
                marker = " [green](selected)[/green]"
            console.print(f"  • {voice.label} [dim]{voice.lang}[/dim]{marker}")

    asyncio.run(run())


@app.command()
def test(
    voice: str | None = typer.Option(None, "--voice", "-v", help="Voice to use"),
    rate: float
    | None = typer.Option(None, "--rate", "-r", min=0.1, max=10.0, help="Speech rate"),
    pitch: float
    | None = typer.Option(None, "--pitch", min=0.0, max=2.0, help="Speech pitch"),
):
    """Speak a short test phrase with the current preferences."""
    config = ReaderConfig.from_env()
    store = JsonPreferenceStore(config.preferences_path)
    prefs = _apply_overrides(store.get(), voice, rate, pitch)

    async def run():
        session = get_session(config=config, preferences=store)
        try:
            await _initialize(session)
        except SpeechEngineError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(1) from e

        finished, _receiver = _stopped_event(session)
        try:
            console.print("▶ Speaking test phrase...")
            if session.start_reading(TEST_PHRASE, prefs):
                await finished.wait()
        finally:
            await session.cleanup()

    asyncio.run(run())


@prefs_app.command("show")
def prefs_show():
    """Show the saved voice preferences."""
    config = ReaderConfig.from_env()
    prefs = JsonPreferenceStore(config.preferences_path).get()

    console.print(f"[bold]Preferences[/bold] ([dim]{config.preferences_path}[/dim])")
    console.print(f"  voice: [cyan]{prefs.voice_name or '(default)'}[/cyan]")
    console.print(f"  rate:  [cyan]{prefs.rate}[/cyan]")
    console.print(f"  pitch: [cyan]{prefs.pitch}[/cyan]")


@prefs_app.command("set")
def prefs_set(
    voice: str | None = typer.Option(None, "--voice", "-v", help="Voice name"),
    rate: float
    | None = typer.Option(None, "--rate", "-r", min=0.1, max=10.0, help="Speech rate"),
    pitch: float
    | None = typer.Option(None, "--pitch", min=0.0, max=2.0, help="Speech pitch"),
):
    """Update the saved voice preferences."""
    partial = {
        key: value
        for key, value in (("voiceName", voice), ("rate", rate), ("pitch", pitch))
        if value is not None
    }
    if not partial:
        console.print("[yellow]Nothing to change[/yellow]")
        raise typer.Exit(1)

    config = ReaderConfig.from_env()
    try:
        prefs = JsonPreferenceStore(config.preferences_path).set(partial)
    except PreferenceStoreError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(
        f"✓ Saved: voice=[cyan]{prefs.voice_name or '(default)'}[/cyan] "
        f"rate=[cyan]{prefs.rate}[/cyan] pitch=[cyan]{prefs.pitch}[/cyan]"
    )


@app.command()
def version():
    """Show readaloud version."""
    from readaloud import __version__

    console.print(f"readaloud version [cyan]{__version__}[/cyan]")


def main():
    """Main CLI entry point."""
    # Configure logging
    logger.remove()
    logger.add(
        sys.stderr,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=ReaderConfig.from_env().log_level,
    )

    app()


if __name__ == "__main__":
    main()
