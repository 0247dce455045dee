"""In-memory sinks, mostly for tests and one-shot command runs."""
from __future__ import annotations

from typing import Any, TypeVar

from order_console.core.events.event_bus import EventBus

E = TypeVar("E")


class MemorySink:
    """Keeps every event it receives, in emission order."""

    def __init__(self) -> None:
        self.events: list[Any] = []

    def on_event(self, event: Any) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[E]) -> list[E]:
        return [e for e in self.events if isinstance(e, event_type)]

    def clear(self) -> None:
        self.events.clear()


class NullEventBus(EventBus):
    """EventBus without sinks: every event is discarded."""

    def __init__(self) -> None:
        super().__init__(sinks=[])


def recording_event_bus() -> tuple[EventBus, MemorySink]:
    """Return an EventBus wired to a fresh MemorySink."""
    sink = MemorySink()
    return EventBus(sinks=[sink]), sink
