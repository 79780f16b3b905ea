"""
Failure events and the default notifier.

The notifier fans each event out to its registered listeners. Listener
errors are logged and never interrupt delivery to the other listeners.
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .protocols import EventListener

logger = logging.getLogger(__name__)

CACHE_FAILURE = "cache_failure"

EVENTS = frozenset({CACHE_FAILURE})


class CacheAction(str, Enum):
    """Cache operation that failed."""

    READ = "read"
    WRITE = "write"


@dataclass(frozen=True)
class FailureEvent:
    """One contained backend failure.

    Attributes:
        key: Cache key involved in the failed operation
        action: Operation that failed
        error: Exception raised by the backend
    """

    key: str
    action: CacheAction
    error: Exception

    @property
    def event_kind(self) -> str:
        return CACHE_FAILURE

    def payload(self) -> dict[str, Any]:
        """Return the event attributes as sent to a notifier."""
        return {"key": self.key, "action": self.action, "error": self.error}


class Notifier:
    """Default ``FailureNotifier`` that delegates to a list of listeners.

    Example:
        notifier = Notifier([
            LogListener(),
            OpenTelemetryListener(),
        ])
    """

    def __init__(self, listeners: Iterable[EventListener] = ()) -> None:
        """Initialize notifier.

        Args:
            listeners: Listeners that receive every event
        """
        self._listeners = list(listeners)

    @property
    def listeners(self) -> list[EventListener]:
        """Registered listeners (copy)."""
        return list(self._listeners)

    def notify(self, event: str, payload: Mapping[str, Any]) -> None:
        """Deliver an event to all listeners.

        Args:
            event: Event name
            payload: Event attributes

        Raises:
            ValueError: If the event name is unknown
        """
        if event not in EVENTS:
            raise ValueError(f"Unknown event: {event}")

        for listener in self._listeners:
            try:
                listener.handle(event, payload)
            except Exception as e:
                # Don't let listener errors break cache operations
                logger.warning("Listener %s failed handling '%s': %s", type(listener).__name__, event, e)

    def add_listener(self, listener: EventListener) -> None:
        """Add a new listener.

        Args:
            listener: Listener to add
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: EventListener) -> bool:
        """Remove a listener.

        Args:
            listener: Listener to remove

        Returns:
            True if listener was found and removed, False otherwise
        """
        try:
            self._listeners.remove(listener)
            return True
        except ValueError:
            return False
