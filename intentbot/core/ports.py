"""Port interfaces for the intent dispatch core."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from intentbot.core.models import ChatMessage, DispatchContext, DispatchRecord, NLUResult


@runtime_checkable
class Intent(Protocol):
    """Application-defined handler for one NLU action.

    ``action`` is the registration string; a trailing ``*`` marks a
    wildcard that matches every action starting with the prefix.
    """

    action: str

    async def invoke(self, context: DispatchContext, result: NLUResult) -> None:
        """Handle one matched request."""


class NLUPort(Protocol):
    """Natural-language understanding service port."""

    async def query(self, utterance: str, *, session_id: str) -> NLUResult:
        """Resolve ``utterance`` into a structured result.

        Raises ``NLUQueryError`` when the call could not complete.
        """


class ReplyPort(Protocol):
    """User-visible output toward the chat transport."""

    async def send(self, message: ChatMessage, text: str) -> None:
        """Reply to ``message`` with plain text."""

    async def send_error(self, message: ChatMessage, text: str) -> None:
        """Reply to ``message`` with an error notice."""


class DispatchObserver(Protocol):
    """Receives the terminal record of every dispatched request."""

    def __call__(self, record: DispatchRecord) -> None: ...


def intent_name(intent: Intent) -> str:
    """Metric/log identity of an intent."""
    return type(intent).__name__
