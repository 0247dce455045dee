"""
Synchronous event bus.

Sinks receive every event; handlers subscribed to an event type receive only
events of that type. Dispatch happens inline on the emitting call.
"""
from __future__ import annotations

from collections import defaultdict
from typing import Any, Callable, Iterable, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a domain event."""


class EventBus:
    """Dispatches events to registered sinks and typed handlers."""

    def __init__(self, sinks: Iterable[EventSink] | None = None) -> None:
        self._sinks: list[EventSink] = list(sinks) if sinks is not None else []
        self._handlers: defaultdict[type, list[Callable[[Any], None]]] = defaultdict(list)
        self._closed = False

    def register(self, sink: EventSink) -> None:
        """Register a sink for all events."""
        self._sinks.append(sink)

    def subscribe(self, event_type: type, handler: Callable[[Any], None]) -> None:
        """Call handler for every emitted event that is an instance of event_type."""
        self._handlers[event_type].append(handler)

    def emit(self, event: Any) -> None:
        """Emit an event to all sinks, then to matching handlers."""
        for sink in self._sinks:
            sink.on_event(event)

        for event_type, handlers in list(self._handlers.items()):
            if isinstance(event, event_type):
                for handler in handlers:
                    handler(event)

    def close(self) -> None:
        """
        Finalize all sinks that expose a close() method.
        """
        if self._closed:
            return

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True
