"""Exception types raised by the dispatch core and its adapters."""


class IntentbotError(Exception):
    """Base error for intentbot failures."""


class NLUQueryError(IntentbotError):
    """Raised when the NLU service call could not complete."""


class NLUTimeoutError(NLUQueryError):
    """Raised when the NLU service did not answer within the configured timeout."""


class DispatchQueueFullError(IntentbotError):
    """Raised by ``submit`` when a bounded dispatch queue is full."""


__all__ = [
    "DispatchQueueFullError",
    "IntentbotError",
    "NLUQueryError",
    "NLUTimeoutError",
]
