"""In-process NLU used for offline runs and tests."""

from __future__ import annotations

from collections.abc import Mapping

from intentbot.core.models import NLUResult, NLUStatus

DEFAULT_OFFLINE_PHRASES: dict[str, tuple[str, str]] = {
    "hello": ("smalltalk.greetings.hello", "Hi there!"),
    "hi": ("smalltalk.greetings.hello", "Hey!"),
    "how are you": ("smalltalk.greetings.how_are_you", "Doing great, thanks for asking."),
    "bye": ("smalltalk.greetings.bye", "See you soon!"),
    "echo": ("echo", ""),
}


class StaticNLU:
    """NLU port resolving utterances by phrase prefix.

    Phrases are compared case-insensitively against the start of the
    utterance, longest phrase first. Unknown utterances resolve to
    ``default_action``.
    """

    def __init__(
        self,
        phrases: Mapping[str, tuple[str, str]] | None = None,
        *,
        default_action: str = "input.unknown",
        default_fulfillment: str = "",
    ) -> None:
        source = DEFAULT_OFFLINE_PHRASES if phrases is None else phrases
        self._phrases = sorted(
            ((phrase.lower().strip(), value) for phrase, value in source.items()),
            key=lambda item: len(item[0]),
            reverse=True,
        )
        self._default_action = default_action
        self._default_fulfillment = default_fulfillment

    async def query(self, utterance: str, *, session_id: str) -> NLUResult:
        text = utterance.lower().strip()
        for phrase, (action, speech) in self._phrases:
            if text.startswith(phrase):
                return NLUResult(
                    action=action,
                    status=NLUStatus(code=200),
                    fulfillment=speech,
                    resolved_query=utterance,
                    score=1.0,
                )
        return NLUResult(
            action=self._default_action,
            status=NLUStatus(code=200),
            fulfillment=self._default_fulfillment,
            resolved_query=utterance,
            score=0.0,
        )
