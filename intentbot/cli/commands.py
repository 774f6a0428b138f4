"""CLI commands for intentbot."""

from __future__ import annotations

import asyncio

import typer
from rich.table import Table

from intentbot import __logo__

from .core import app, console

# ============================================================================
# Onboard / Setup
# ============================================================================


@app.command()
def onboard() -> None:
    """Initialize intentbot configuration."""
    from intentbot.config.loader import get_config_path, save_config
    from intentbot.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config())
    console.print(f"[green]✓[/green] Created config at {config_path}")

    console.print(f"\n{__logo__} intentbot is ready!")
    console.print("\nNext steps:")
    console.print("  1. Add your Dialogflow client token to [cyan]~/.intentbot/config.json[/cyan] (nlu.clientToken)")
    console.print("  2. Chat: [cyan]intentbot chat -m \"ai hello there\"[/cyan]")
    console.print("     No token yet? Try [cyan]intentbot chat --offline[/cyan]")


# ============================================================================
# Status / Query
# ============================================================================


@app.command()
def status() -> None:
    """Show intentbot configuration status."""
    from intentbot.config.loader import get_config_path, load_config

    config_path = get_config_path()
    config = load_config()

    table = Table(title=f"{__logo__} intentbot status")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Config", f"{config_path} ({'found' if config_path.exists() else 'missing'})")
    table.add_row("NLU endpoint", config.nlu.base_url)
    table.add_row("NLU token", "[green]valid[/green]" if config.nlu.token_valid else "[red]missing or invalid[/red]")
    table.add_row("Dispatch", "enabled" if config.intelligence_enabled else "disabled")
    table.add_row("Workers", str(config.dispatcher.workers))
    table.add_row("Queue", "unbounded" if config.dispatcher.queue_maxsize == 0 else str(config.dispatcher.queue_maxsize))
    table.add_row("Query failure policy", config.dispatcher.on_query_failure)
    table.add_row("Diagnostics", "on" if config.logging.diagnostics_enabled else "off")
    table.add_row(
        "Prometheus",
        f"http://{config.telemetry.host}:{config.telemetry.port}/metrics"
        if config.telemetry.prometheus_enabled
        else "off",
    )
    console.print(table)


@app.command()
def query(
    text: str = typer.Argument(..., help="Utterance to send to the NLU service"),
    session_id: str = typer.Option("cli:default", "--session", "-s", help="Session ID"),
) -> None:
    """Send one utterance to the NLU service and show the resolved action."""
    from intentbot.app.bootstrap import build_nlu
    from intentbot.config.loader import load_config
    from intentbot.core.errors import NLUQueryError

    config = load_config()
    nlu = build_nlu(config)
    if nlu is None:
        console.print("[red]NLU client token is missing or invalid.[/red] Run [cyan]intentbot status[/cyan].")
        raise typer.Exit(1)

    try:
        result = asyncio.run(nlu.query(text, session_id=session_id))
    except NLUQueryError as e:
        console.print(f"[red]Query failed:[/red] {e}")
        raise typer.Exit(1)

    table = Table(title="NLU result")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="yellow")
    table.add_row("Action", result.action or "-")
    table.add_row("Status", f"{result.status_code} ({result.status.error_type or '-'})")
    table.add_row("Fulfillment", result.fulfillment or "-")
    table.add_row("Score", "-" if result.score is None else f"{result.score:.2f}")
    if result.status.error_details:
        table.add_row("Error", result.status.error_details)
    console.print(table)


from . import chat_commands  # noqa: E402,F401
