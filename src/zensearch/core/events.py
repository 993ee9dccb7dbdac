"""Event bus connecting the host's journal store to the search index.

The host emits ``JOURNAL_CHANGED`` whenever its entry collection mutates;
the search binder listens and re-syncs, then announces ``JOURNAL_INDEXED``.
Hooks can be sync or async.

Usage::

    from zensearch.core.events import EventBus, Event, JOURNAL_CHANGED

    bus = EventBus()
    bus.on(JOURNAL_CHANGED, lambda event: print(event.payload))
    bus.emit_sync(Event(name=JOURNAL_CHANGED, source="store"))
"""

from __future__ import annotations

import asyncio
import inspect
from collections import defaultdict
from dataclasses import dataclass, field
from time import time
from typing import Any

from loguru import logger

# ---------------------------------------------------------------------------
# Well-known event names
# ---------------------------------------------------------------------------

JOURNAL_CHANGED = "journal.changed"
JOURNAL_INDEXED = "journal.indexed"

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
        self._background_tasks: set[asyncio.Task] = set()

    def on(self, event_name: str, hook: Hook) -> None:
        """Register *hook* for a specific event name."""
        self._hooks[event_name].append(hook)

    def on_all(self, hook: Hook) -> None:
        """Register *hook* for all events (wildcard)."""
        self._wildcard_hooks.append(hook)

    def off(self, event_name: str, hook: Hook) -> None:
        """Unregister *hook* from a specific event name. Unknown hooks are ignored."""
        hooks = self._hooks.get(event_name)
        if hooks and hook in hooks:
            hooks.remove(hook)

    def hook_count(self, event_name: str) -> int:
        return len(self._hooks.get(event_name, []))

    def _hooks_for(self, event: Event) -> list[Hook]:
        return [*self._hooks.get(event.name, []), *self._wildcard_hooks]

    async def emit(self, event: Event) -> None:
        """Emit an event, awaiting async hooks in registration order."""
        for hook in self._hooks_for(event):
            try:
                if inspect.iscoroutinefunction(hook):
                    await hook(event)
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")

    def emit_sync(self, event: Event) -> None:
        """Emit from a sync context.

        Async hooks are scheduled as tasks when an event loop is running and
        skipped otherwise.
        """
        try:
            loop: asyncio.AbstractEventLoop | None = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        for hook in self._hooks_for(event):
            try:
                if not inspect.iscoroutinefunction(hook):
                    hook(event)
                elif loop is not None:
                    task = loop.create_task(hook(event))
                    self._background_tasks.add(task)
                    task.add_done_callback(self._background_tasks.discard)
                else:
                    logger.debug(f"Skipping async hook {hook!r}: no running event loop")
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")
