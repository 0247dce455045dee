"""
Logging event sink.

Stands in for the operator notification layer: successful actions are
logged at INFO, refusals and failures at WARNING.
"""
from __future__ import annotations

import logging
from typing import Any

from order_console.core.events.events import (
    ActionFailedEvent,
    ProductionGateUnavailableEvent,
    TransitionRefusedEvent,
)

_WARNING_EVENTS = (ActionFailedEvent, ProductionGateUnavailableEvent, TransitionRefusedEvent)


class LoggingEventSink:
    """Logs domain events using the standard logging module."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def on_event(self, event: Any) -> None:
        level = logging.WARNING if isinstance(event, _WARNING_EVENTS) else logging.INFO
        self._logger.log(level, "%s %s", type(event).__name__, event, extra={"event": event})
