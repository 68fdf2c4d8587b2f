"""Event bus connecting the host workspace to the reflection coordinator.

A lightweight publish/subscribe system: the host publishes workspace
events (leaf activation, window open) and the coordinator publishes its
own lifecycle events. Hooks can be sync or async.

Usage::

    from reflection.core.events import EventBus, Event, ACTIVE_LEAF_CHANGE

    bus = EventBus()
    reflection.attach(bus)
    await bus.emit(Event(name=ACTIVE_LEAF_CHANGE, payload={"leaf": leaf}, source="host"))
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

ACTIVE_LEAF_CHANGE = "workspace.active_leaf_change"
WINDOW_OPEN = "workspace.window_open"
REFLECTION_READY = "reflection.ready"
REFLECTION_RENDERED = "reflection.rendered"

# Type alias for hook callables (sync or async)
Hook = Any  # Callable[[Event], None] | Callable[[Event], Awaitable[None]]


# ---------------------------------------------------------------------------
# Event model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Event:
    """An immutable event that flows through the bus."""

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time)
    source: str = ""


# ---------------------------------------------------------------------------
# EventBus
# ---------------------------------------------------------------------------


class EventBus:
    """Simple pub/sub event bus supporting sync and async hooks."""

    def __init__(self) -> None:
        self._hooks: dict[str, list[Hook]] = defaultdict(list)

    def on(self, event_name: str, hook: Hook) -> None:
        """Register *hook* for a specific event name."""
        self._hooks[event_name].append(hook)

    def off(self, event_name: str, hook: Hook) -> None:
        """Unregister *hook* from a specific event name."""
        try:
            self._hooks[event_name].remove(hook)
        except ValueError:
            pass

    async def emit(self, event: Event) -> None:
        """Emit an event, running all matching hooks in registration order."""
        for hook in list(self._hooks.get(event.name, [])):
            try:
                if inspect.iscoroutinefunction(hook):
                    await hook(event)
                else:
                    hook(event)
            except Exception as exc:
                logger.warning(f"Event hook failed for {event.name}: {exc}")
