"""Domain models for the intent dispatch core."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

SUCCESS_STATUS_CODE = 200
WILDCARD_SUFFIX = "*"


@dataclass(frozen=True, slots=True, kw_only=True)
class ChatUser:
    """Author of a chat message."""

    id: str
    name: str
    discriminator: str = "0000"


@dataclass(frozen=True, slots=True, kw_only=True)
class ChatGuild:
    """Server (guild) a message was sent in."""

    id: str
    name: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ChatChannel:
    """Channel a message was sent in."""

    id: str
    name: str
    is_guild: bool = True


@dataclass(frozen=True, slots=True, kw_only=True)
class ChatMessage:
    """Narrow view of a chat-transport message used by the dispatcher."""

    author: ChatUser
    channel: ChatChannel
    content: str
    guild: ChatGuild | None = None
    message_id: str | None = None

    @property
    def is_guild(self) -> bool:
        """True for guild channels, False for private/direct messages."""
        return self.channel.is_guild and self.guild is not None


@dataclass(frozen=True, slots=True, kw_only=True)
class DispatchContext:
    """Immutable snapshot of one inbound request."""

    message: ChatMessage
    utterance: str
    session_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def resolved_session_id(self) -> str:
        """Session id sent to the NLU service, defaults to the author id."""
        return self.session_id or self.message.author.id

    def with_utterance(self, utterance: str) -> DispatchContext:
        return replace(self, utterance=utterance)


@dataclass(frozen=True, slots=True, kw_only=True)
class NLUStatus:
    """Status block embedded in an NLU response payload."""

    code: int
    error_type: str = "success"
    error_details: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NLUResult:
    """Structured outcome of one NLU query."""

    action: str
    status: NLUStatus
    fulfillment: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    resolved_query: str = ""
    score: float | None = None

    @property
    def status_code(self) -> int:
        return self.status.code

    @property
    def ok(self) -> bool:
        return self.status.code == SUCCESS_STATUS_CODE

    def error_text(self) -> str:
        """User-facing description of a non-success status."""
        if self.status.error_details:
            return self.status.error_details
        if self.fulfillment:
            return self.fulfillment
        return f"The language service answered with status {self.status.code} ({self.status.error_type})."


@dataclass(frozen=True, slots=True)
class IntentKey:
    """Registry key for an intent action.

    Equality and hashing use ``action`` only, so a wildcard and an exact
    registration for the same string occupy the same registry slot.
    """

    action: str
    wildcard: bool = field(default=False, compare=False)

    @classmethod
    def parse(cls, raw: str) -> IntentKey:
        """Build a key from a registration string, ``"smalltalk.*"`` is a wildcard."""
        raw = raw.strip()
        if raw.endswith(WILDCARD_SUFFIX):
            return cls(raw[: -len(WILDCARD_SUFFIX)], True)
        return cls(raw, False)

    def matches(self, action: str) -> bool:
        if self.wildcard:
            return action.startswith(self.action)
        return action == self.action

    def __str__(self) -> str:
        return f"{self.action}{WILDCARD_SUFFIX}" if self.wildcard else self.action


class DispatchOutcome(str, Enum):
    """Terminal state of one submitted request."""

    REJECTED = "rejected"
    QUERY_FAILED = "query_failed"
    STATUS_ERROR = "status_error"
    UNMATCHED = "unmatched"
    INVOKED = "invoked"
    HANDLER_FAILED = "handler_failed"


@dataclass(frozen=True, slots=True, kw_only=True)
class DispatchRecord:
    """Terminal record of one request, handed to dispatch observers."""

    context: DispatchContext
    outcome: DispatchOutcome
    intent_name: str | None = None
    result: NLUResult | None = None
    error: BaseException | None = None
