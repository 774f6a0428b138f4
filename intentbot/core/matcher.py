"""Deterministic selection of the intent for a resolved action."""

from __future__ import annotations

from collections.abc import Sequence

from intentbot.core.registry import IntentEntry


def match_intent(action: str, entries: Sequence[IntentEntry]) -> IntentEntry | None:
    """Select at most one entry for ``action``.

    Exact matches win over wildcard prefixes. Within a group the longest
    action string wins, and ties go to the entry registered first.
    """
    best: IntentEntry | None = None
    best_rank: tuple[int, int] | None = None
    for key, handler in entries:
        if key.wildcard:
            if not action.startswith(key.action):
                continue
            rank = (0, len(key.action))
        elif key.action == action:
            rank = (1, len(key.action))
        else:
            continue
        # Strict comparison keeps the earliest registration on ties.
        if best_rank is None or rank > best_rank:
            best, best_rank = (key, handler), rank
    return best


__all__ = ["match_intent"]
