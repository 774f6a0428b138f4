"""Interactive dispatch command."""

from __future__ import annotations

import asyncio
import os

import typer

from intentbot import __logo__
from intentbot.core.models import (
    ChatChannel,
    ChatMessage,
    ChatUser,
    DispatchContext,
    DispatchOutcome,
    DispatchRecord,
)

from .core import app, console


class ConsoleReply:
    """Reply port printing to the terminal."""

    async def send(self, message: ChatMessage, text: str) -> None:
        console.print(f"{__logo__} {text}")

    async def send_error(self, message: ChatMessage, text: str) -> None:
        console.print(f"[red]✗ {text}[/red]")


def _print_record(record: DispatchRecord) -> None:
    if record.outcome is DispatchOutcome.UNMATCHED and record.result is not None:
        console.print(f"[dim]no intent for action '{record.result.action}'[/dim]")
    elif record.outcome is DispatchOutcome.QUERY_FAILED:
        console.print(f"[dim]query failed: {record.error}[/dim]")
    elif record.outcome is DispatchOutcome.HANDLER_FAILED:
        console.print(f"[dim]{record.intent_name} failed: {record.error}[/dim]")


def _cli_message(content: str) -> ChatMessage:
    user = os.environ.get("USER") or "cli"
    return ChatMessage(
        author=ChatUser(id=f"cli:{user}", name=user),
        channel=ChatChannel(id="cli", name="cli", is_guild=False),
        content=content,
    )


@app.command()
def chat(
    message: str = typer.Option(None, "--message", "-m", help="Message to dispatch"),
    trigger: str = typer.Option("ai", "--trigger", "-t", help="Command word prepended to each message"),
    offline: bool = typer.Option(False, "--offline", help="Use the built-in phrase NLU instead of Dialogflow"),
    session_id: str = typer.Option(None, "--session", "-s", help="Session ID"),
) -> None:
    """Dispatch messages through the NLU service to the built-in intents."""
    from intentbot.app.bootstrap import build_dispatcher, build_telemetry, configure_logging
    from intentbot.config.loader import load_config
    from intentbot.intents import default_intents
    from intentbot.nlu.static import StaticNLU

    config = load_config()
    configure_logging(config.logging.level)

    reply = ConsoleReply()
    dispatcher = build_dispatcher(
        config,
        reply=reply,
        telemetry=build_telemetry(config),
        nlu=StaticNLU() if offline else None,
        intents=default_intents(reply),
        observer=_print_record,
    )
    if not dispatcher.enabled:
        console.print("[red]Dispatch is disabled:[/red] set nlu.clientToken or use [cyan]--offline[/cyan].")
        raise typer.Exit(1)

    def context_for(text: str) -> DispatchContext:
        content = f"{trigger} {text}"
        return DispatchContext(message=_cli_message(content), utterance=content, session_id=session_id)

    async def run_once() -> None:
        async with dispatcher:
            dispatcher.submit(context_for(message))
            await dispatcher.join()

    async def run_interactive() -> None:
        async with dispatcher:
            while True:
                try:
                    user_input = console.input("[bold blue]You:[/bold blue] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\nGoodbye!")
                    break
                if not user_input.strip():
                    continue
                dispatcher.submit(context_for(user_input))
                await dispatcher.join()

    if message:
        asyncio.run(run_once())
    else:
        console.print(f"{__logo__} Interactive mode (Ctrl+C to exit)\n")
        asyncio.run(run_interactive())
