"""Typed core domain and dispatch primitives."""

from intentbot.core.dispatcher import Dispatcher
from intentbot.core.errors import (
    DispatchQueueFullError,
    IntentbotError,
    NLUQueryError,
    NLUTimeoutError,
)
from intentbot.core.matcher import match_intent
from intentbot.core.models import (
    ChatChannel,
    ChatGuild,
    ChatMessage,
    ChatUser,
    DispatchContext,
    DispatchOutcome,
    DispatchRecord,
    IntentKey,
    NLUResult,
    NLUStatus,
)
from intentbot.core.ports import Intent, NLUPort, ReplyPort
from intentbot.core.registry import IntentRegistry

__all__ = [
    "ChatChannel",
    "ChatGuild",
    "ChatMessage",
    "ChatUser",
    "DispatchContext",
    "DispatchOutcome",
    "DispatchQueueFullError",
    "DispatchRecord",
    "Dispatcher",
    "Intent",
    "IntentKey",
    "IntentRegistry",
    "IntentbotError",
    "NLUPort",
    "NLUQueryError",
    "NLUResult",
    "NLUStatus",
    "NLUTimeoutError",
    "ReplyPort",
    "match_intent",
]
