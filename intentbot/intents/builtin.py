"""Built-in intents shipped with intentbot."""

from __future__ import annotations

from dataclasses import dataclass

from intentbot.core.models import DispatchContext, NLUResult
from intentbot.core.ports import Intent, ReplyPort

UNKNOWN_FALLBACK = "I'm not sure what you mean, could you rephrase that?"


@dataclass(slots=True)
class SmalltalkIntent:
    """Answer every ``smalltalk.*`` action with the NLU fulfillment."""

    reply: ReplyPort
    action: str = "smalltalk.*"

    async def invoke(self, context: DispatchContext, result: NLUResult) -> None:
        if result.fulfillment:
            await self.reply.send(context.message, result.fulfillment)


@dataclass(slots=True)
class UnknownIntent:
    """Fallback for utterances the NLU agent could not classify."""

    reply: ReplyPort
    action: str = "input.unknown"
    fallback: str = UNKNOWN_FALLBACK

    async def invoke(self, context: DispatchContext, result: NLUResult) -> None:
        await self.reply.send(context.message, result.fulfillment or self.fallback)


@dataclass(slots=True)
class EchoIntent:
    """Repeat the text that was sent to the NLU service."""

    reply: ReplyPort
    action: str = "echo"

    async def invoke(self, context: DispatchContext, result: NLUResult) -> None:
        text = result.fulfillment or context.utterance
        if text:
            await self.reply.send(context.message, text)


def default_intents(reply: ReplyPort) -> list[Intent]:
    return [SmalltalkIntent(reply), UnknownIntent(reply), EchoIntent(reply)]
