"""Shared CLI application context and setup helpers."""

from __future__ import annotations

from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console

from intentbot import __logo__, __version__

app = typer.Typer(
    name="intentbot",
    help=f"{__logo__} intentbot - natural-language intent dispatch",
    no_args_is_help=True,
)

console = Console()


def get_env_path() -> Path:
    return Path.home() / ".intentbot" / ".env"


def version_callback(value: bool) -> None:
    if value:
        console.print(f"{__logo__} intentbot v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
    """intentbot - natural-language intent dispatch."""
    # Existing environment variables win over the .env file
    load_dotenv(get_env_path(), override=False)
