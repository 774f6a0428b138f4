"""intentbot - natural-language intent dispatch for chat bots."""

__version__ = "0.1.0"
__logo__ = "🧭"
