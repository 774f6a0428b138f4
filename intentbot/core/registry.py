"""Process-wide registry of intents keyed by action."""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import TypeAlias

from loguru import logger

from intentbot.core.models import WILDCARD_SUFFIX, IntentKey
from intentbot.core.ports import Intent, intent_name

IntentEntry: TypeAlias = tuple[IntentKey, Intent]


class IntentRegistry:
    """Mapping from intent action to handler.

    Writes are serialized and publish a new immutable snapshot, so readers
    never lock and always see a consistent set of entries. Entries keep their
    registration order; replacing an action keeps its original position.
    """

    def __init__(
        self,
        *,
        enabled: bool = True,
        on_register: Callable[[str], None] | None = None,
    ) -> None:
        self._enabled = enabled
        self._on_register = on_register
        self._entries: tuple[IntentEntry, ...] = ()
        self._write_lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def register(self, action: str, wildcard: bool, handler: Intent) -> bool:
        """Register or replace the handler for ``action``.

        A wildcard action may be given with or without its trailing ``*``.
        Returns False without touching the registry when disabled.
        """
        if not self._enabled:
            return False

        if wildcard:
            action = action.strip().removesuffix(WILDCARD_SUFFIX)
        key = IntentKey(action, wildcard)
        name = intent_name(handler)
        if self._on_register is not None:
            self._on_register(name)

        with self._write_lock:
            entries = list(self._entries)
            for index, (existing, previous) in enumerate(entries):
                if existing == key:
                    entries[index] = (key, handler)
                    logger.debug(
                        "Replaced intent {} for action '{}' with {}",
                        intent_name(previous),
                        key,
                        name,
                    )
                    break
            else:
                entries.append((key, handler))
                logger.debug("Registered intent {} for action '{}'", name, key)
            self._entries = tuple(entries)
        return True

    def register_intent(self, handler: Intent) -> bool:
        """Register ``handler`` under its own ``action`` (``"prefix.*"`` for wildcards)."""
        key = IntentKey.parse(handler.action)
        return self.register(key.action, key.wildcard, handler)

    def entries(self) -> tuple[IntentEntry, ...]:
        """Snapshot of all registered entries in registration order."""
        return self._entries

    def get(self, action: str) -> Intent | None:
        for key, handler in self._entries:
            if key.action == action:
                return handler
        return None

    def __contains__(self, action: object) -> bool:
        return any(key.action == action for key, _ in self._entries)

    def __len__(self) -> int:
        return len(self._entries)
