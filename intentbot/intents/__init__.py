"""Application intents."""

from intentbot.intents.builtin import EchoIntent, SmalltalkIntent, UnknownIntent, default_intents

__all__ = ["EchoIntent", "SmalltalkIntent", "UnknownIntent", "default_intents"]
