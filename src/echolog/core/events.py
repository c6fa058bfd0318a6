"""Event bus for observing journal activity.

The journal engine publishes an event after every mutation and after
every persistence attempt. Observers (a UI refreshing its list, a
telemetry sink counting failed saves) subscribe here instead of reaching
into the engine. Hooks can be sync or async; a failing hook is logged
and never affects the operation that emitted the event.

Usage::

    from echolog.core.events import EventBus, Event, JOURNAL_SAVE_FAILED

    bus = EventBus()

    def on_failed_save(event: Event) -> None:
        print(f"Unsaved changes: {event.payload['count']} entries")

    bus.on(JOURNAL_SAVE_FAILED, on_failed_save)
"""

from __future__ import annotations

import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

# ---------------------------------------------------------------------------
# Well-known event names
# ---------------------------------------------------------------------------

JOURNAL_ENTRY_CREATED = "journal.entry.created"
JOURNAL_ENTRY_UPDATED = "journal.entry.updated"
JOURNAL_ENTRY_DELETED = "journal.entry.deleted"
JOURNAL_LOADED = "journal.loaded"
JOURNAL_SAVED = "journal.saved"
JOURNAL_SAVE_FAILED = "journal.save_failed"

# Callable[[Event], None] | Callable[[Event], Awaitable[None]]
Hook = Any


@dataclass(frozen=True)
class Event:
    """An immutable event that flows through the bus."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""


class EventBus:
    """Simple pub/sub event bus supporting sync and async hooks."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)
        self._wildcard_hooks: list[Hook] = []

    def on(self, event_name: str, hook: Hook) -> None:
        """Register *hook* for a specific event name."""
        self._hooks[event_name].append(hook)

    def on_all(self, hook: Hook) -> None:
        """Register *hook* for all events (wildcard)."""
        self._wildcard_hooks.append(hook)

    def off(self, event_name: str, hook: Hook) -> None:
        """Unregister *hook* from a specific event name."""
        try:
            self._hooks[event_name].remove(hook)
        except ValueError:
            pass

    async def emit(self, event: Event) -> None:
        """Emit an event, running all matching hooks in registration order."""
        hooks = list(self._hooks.get(event.name, []))
        hooks.extend(self._wildcard_hooks)
        for hook in hooks:
            try:
                if inspect.iscoroutinefunction(hook):
                    await hook(event)
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")
