"""CLI commands for listkeeper."""

import asyncio
import os
import signal
import sys
from pathlib import Path

import typer
from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from prompt_toolkit.patch_stdout import patch_stdout
from rich.console import Console
from rich.markdown import Markdown
from rich.text import Text

from listkeeper import __logo__, __version__

app = typer.Typer(
    name="listkeeper",
    help=f"{__logo__} listkeeper - shared lists for group chats",
    no_args_is_help=True,
)

console = Console()
EXIT_COMMANDS = {"exit", "quit", "/exit", "/quit", ":q"}

# ---------------------------------------------------------------------------
# CLI input: prompt_toolkit for editing, paste, history, and display
# ---------------------------------------------------------------------------

_PROMPT_SESSION: PromptSession | None = None


def _init_prompt_session() -> None:
    """Create the prompt_toolkit session with persistent file history."""
    global _PROMPT_SESSION

    history_file = Path.home() / ".listkeeper" / "history" / "cli_history"
    history_file.parent.mkdir(parents=True, exist_ok=True)

    _PROMPT_SESSION = PromptSession(
        history=FileHistory(str(history_file)),
        enable_open_in_editor=False,
        multiline=False,   # Enter submits (single line mode)
    )


async def _read_interactive_input_async() -> str:
    if _PROMPT_SESSION is None:
        raise RuntimeError("Call _init_prompt_session() first")
    try:
        with patch_stdout():
            return await _PROMPT_SESSION.prompt_async(
                HTML("<b fg='ansiblue'>You:</b> "),
            )
    except EOFError as exc:
        raise KeyboardInterrupt from exc


def _print_reply(response: str, render_markdown: bool) -> None:
    """Render a bot reply with consistent terminal styling."""
    console.print()
    console.print(f"[cyan]{__logo__} listkeeper[/cyan]")
    if not response:
        console.print("[dim](no reply)[/dim]")
    else:
        console.print(Markdown(response) if render_markdown else Text(response))
    console.print()


def _is_exit_command(command: str) -> bool:
    return command.lower() in EXIT_COMMANDS


def _setup_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} listkeeper v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """listkeeper - shared lists for group chats."""
    pass


# ============================================================================
# Gateway
# ============================================================================


@app.command()
def gateway(
    port: int = typer.Option(None, "--port", "-p", help="Health endpoint port"),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
):
    """Start channels, the message loop and the health endpoint."""
    from listkeeper.channels.manager import ChannelManager
    from listkeeper.channels.telegram import TelegramChannel
    from listkeeper.runtime import build_runtime
    from listkeeper.settings import get_settings

    settings = get_settings()
    _setup_logging("DEBUG" if verbose else settings.log_level)
    bind_port = port or settings.port

    console.print(f"{__logo__} Starting listkeeper gateway (health on :{bind_port})...")

    runtime = build_runtime(settings)
    channels = []
    if settings.telegram_token:
        channels.append(TelegramChannel(settings.telegram_token, runtime.bus, proxy=settings.telegram_proxy))
    manager = ChannelManager(runtime.bus, channels)

    if manager.enabled_channels:
        console.print(f"[green]✓[/green] Channels enabled: {', '.join(manager.enabled_channels)}")
    else:
        console.print("[yellow]Warning: No channels enabled (set LISTKEEPER_TELEGRAM_TOKEN)[/yellow]")

    async def _run_http_server() -> None:
        import uvicorn
        from listkeeper.api.app import create_app
        uvi_config = uvicorn.Config(
            create_app(runtime.store),
            host=settings.host,
            port=bind_port,
            log_level="warning",
        )
        server = uvicorn.Server(uvi_config)
        await server.serve()

    async def run():
        _shutdown_done = False

        async def _graceful_shutdown() -> None:
            nonlocal _shutdown_done
            if _shutdown_done:
                return
            _shutdown_done = True
            console.print("\nShutting down...")
            await manager.stop_all()
            runtime.close()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda: asyncio.ensure_future(_graceful_shutdown()),
            )

        try:
            await asyncio.gather(runtime.agent.run(), manager.start_all(), _run_http_server())
        except (KeyboardInterrupt, asyncio.CancelledError):
            await _graceful_shutdown()

    asyncio.run(run())


# ============================================================================
# Local chat
# ============================================================================


@app.command()
def chat(
    message: str = typer.Option(None, "--message", "-m", help="Single message to send"),
    group: str = typer.Option(None, "--group", "-g", help="Simulate a group chat with this id"),
    name: str = typer.Option("cli-user", "--name", "-n", help="Sender display name"),
    markdown: bool = typer.Option(False, "--markdown/--no-markdown", help="Render replies as Markdown"),
    logs: bool = typer.Option(False, "--logs/--no-logs", help="Show runtime logs during chat"),
):
    """Talk to the bot locally, as a private chat or a simulated group."""
    from listkeeper.runtime import build_runtime
    from listkeeper.settings import get_settings

    settings = get_settings()
    if logs:
        logger.enable("listkeeper")
    else:
        logger.disable("listkeeper")

    runtime = build_runtime(settings)
    chat_id = group or "direct"
    chat_type = "group" if group else "private"

    async def _send(text: str) -> str:
        return await runtime.agent.process_direct(
            text, chat_id=chat_id, sender_name=name, chat_type=chat_type,
        )

    if message:
        async def run_once():
            with console.status("[dim]thinking...[/dim]", spinner="dots"):
                response = await _send(message)
            _print_reply(response, render_markdown=markdown)

        asyncio.run(run_once())
        return

    _init_prompt_session()
    console.print(f"{__logo__} Interactive mode (type [bold]exit[/bold] or [bold]Ctrl+C[/bold] to quit)\n")
    if group:
        console.print(f"[dim]Simulating group '{group}': send !ativar first.[/dim]\n")

    def _exit_on_sigint(signum, frame):
        console.print("\nGoodbye!")
        os._exit(0)

    signal.signal(signal.SIGINT, _exit_on_sigint)

    async def run_interactive():
        while True:
            try:
                user_input = await _read_interactive_input_async()
                command = user_input.strip()
                if not command:
                    continue
                if _is_exit_command(command):
                    console.print("\nGoodbye!")
                    break
                response = await _send(user_input)
                _print_reply(response, render_markdown=markdown)
            except (KeyboardInterrupt, EOFError):
                console.print("\nGoodbye!")
                break

    asyncio.run(run_interactive())


# ============================================================================
# Status / Serve
# ============================================================================


@app.command()
def status():
    """Show listkeeper configuration status."""
    from listkeeper.settings import get_settings

    settings = get_settings()
    env_file = Path(".env")

    console.print(f"{__logo__} listkeeper Status\n")
    console.print(f".env: {env_file.resolve()} {'[green]✓[/green]' if env_file.exists() else '[dim]not found[/dim]'}")
    console.print(f"Model: {settings.model}")
    console.print(f"API key: {'[green]✓[/green]' if settings.api_key else '[dim]not set (heuristics only)[/dim]'}")
    console.print(f"Classifier timeout: {settings.classifier_timeout}s")
    console.print(f"Group activation required: {settings.require_activation}")
    console.print(f"Pre-authorized groups: {len(settings.authorized_groups)}")
    console.print(f"Telegram: {'[green]✓[/green]' if settings.telegram_token else '[dim]not set[/dim]'}")
    console.print("[yellow]Lists are kept in memory and lost on restart.[/yellow]")


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind host"),
    port: int = typer.Option(8080, "--port", "-p", help="Bind port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Start only the HTTP health API (FastAPI + Uvicorn)."""
    import uvicorn

    console.print(f"{__logo__} Starting listkeeper API on {host}:{port} ...")
    uvicorn.run(
        "listkeeper.api.app:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


if __name__ == "__main__":
    app()
