"""Main CLI application using Typer."""
import asyncio
import logging

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..chat.layout import format_clock
from ..config import Settings, config_path, resolve_settings, save_config
from ..errors import PersistenceError, RemoteStoreError
from ..logging_utils import configure_logging
from ..persistence import create_history_store
from ..remote import create_remote_store

# Load environment variables (HANK_HOST, HANK_PORT) from a .env file
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="hank-tui",
    help="Terminal UI for Hank chat server",
    add_completion=True,
)

# Console for rich output
console = Console()
logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 60


def _settings(ctx: typer.Context) -> Settings:
    options = ctx.obj or {}
    return resolve_settings(
        host=options.get("host"),
        port=options.get("port"),
        no_history=options.get("no_history", False),
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    host: str | None = typer.Option(
        None,
        "--host",
        "-H",
        help="Host to connect to (can also be set via HANK_HOST)"
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        min=1,
        max=65535,
        help="Port to connect to (can also be set via HANK_PORT)"
    ),
    no_history: bool = typer.Option(
        False,
        "--no-history",
        help="Neither load nor save the chat history"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
    log_file: str | None = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file"
    ),
    backend: str = typer.Option(
        "http",
        "--backend",
        "-b",
        help="Remote store: 'http' (Hank server) or 'memory' (offline echo)"
    ),
):
    """Chat with a Hank server. Runs the TUI unless a command is given."""
    ctx.obj = {"host": host, "port": port, "no_history": no_history}
    if ctx.invoked_subcommand is not None:
        return

    configure_logging(log_level or "warning", log_file)
    settings = _settings(ctx)

    try:
        save_config(settings)
    except OSError as e:
        logger.warning("Could not save config: %s", e)

    async def _tui():
        from ..ui import run_tui

        await run_tui(settings, backend=backend, log_level=log_level)

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass
    console.print("\n[dim]Goodbye![/dim]")


@app.command()
def history(
    ctx: typer.Context,
    limit: int = typer.Option(
        20,
        "--limit",
        "-n",
        help="Number of most recent messages to show"
    ),
):
    """Show the saved chat history."""
    settings = _settings(ctx)
    store = create_history_store("json")
    try:
        saved = store.load()
    except PersistenceError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    if saved is None:
        console.print("[dim]No saved history.[/dim]")
        return

    console.print(
        f"[bold]{saved.server_url}[/bold] "
        f"[dim]({len(saved.messages)} messages, saved {saved.saved_at:%Y-%m-%d %H:%M:%S})[/dim]"
    )
    if not saved.belongs_to(settings.server_url):
        console.print(f"[yellow]Not loaded when connecting to {settings.server_url}[/yellow]")

    table = Table(show_header=True, box=None)
    table.add_column("Time", style="dim", width=8)
    table.add_column("Role", style="bold cyan")
    table.add_column("Message")

    for message in saved.messages[-limit:] if limit > 0 else []:
        text = message.text.replace("\n", " ")
        if len(text) > PREVIEW_LENGTH:
            text = text[:PREVIEW_LENGTH] + "..."
        table.add_row(format_clock(message), message.role.value, escape(text))

    console.print(table)


@app.command()
def forget(
    yes: bool = typer.Option(
        False,
        "--yes",
        "-y",
        help="Skip confirmation prompt"
    )
):
    """Delete the saved chat history."""
    if not yes:
        confirm = typer.confirm("Delete the saved chat history?")
        if not confirm:
            console.print("[dim]Aborted.[/dim]")
            return

    store = create_history_store("json")
    try:
        store.delete()
    except PersistenceError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Chat history deleted.[/green]")


@app.command()
def config(ctx: typer.Context):
    """Show the resolved settings and where they come from."""
    settings = _settings(ctx)

    table = Table(show_header=False, box=None)
    table.add_column("Setting", style="bold cyan", width=16)
    table.add_column("Value")

    table.add_row("Config file", str(config_path()))
    table.add_row("Server", settings.server_url)
    table.add_row("History", "enabled" if settings.history_enabled else "disabled")
    table.add_row("Poll interval", f"{settings.poll_interval:g}s")
    table.add_row("Fetch timeout", f"{settings.fetch_timeout:g}s")
    table.add_row("Send timeout", f"{settings.send_timeout:g}s")
    table.add_row("Assistant name", settings.assistant_name)

    console.print(table)


@app.command()
def health(ctx: typer.Context):
    """Check that the chat server answers."""
    settings = _settings(ctx)

    async def _health():
        store = create_remote_store(
            "http",
            base_url=settings.server_url,
            fetch_timeout=settings.fetch_timeout,
        )
        async with store:
            messages = await store.fetch_messages(since=0)
        return len(messages)

    try:
        count = asyncio.run(_health())
    except RemoteStoreError as e:
        console.print(f"[red]x[/red] {settings.server_url}: FAILED ({escape(str(e))})")
        raise typer.Exit(code=1)
    console.print(f"[green]+[/green] {settings.server_url}: OK ({count} messages on server)")


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
