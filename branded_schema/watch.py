"""
Watchers for interface create and validate events.

Each TypeRegistry owns a WatcherRegistry. Definitions built by the factory
notify it after every successful ``create`` and ``validate`` call.

Example:
    >>> events = []
    >>> unwatch = registry.watchers.watch(User, events.append)
    >>> User.create({"name": "Alice"})
    >>> events[0].event_type
    'create'
    >>> unwatch()
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

CREATE = "create"
VALIDATE = "validate"


@dataclass(frozen=True)
class InterfaceEvent:
    """Event passed to watcher callbacks.

    Attributes:
        interface_id: Definition that produced the event
        event_type: "create" or "validate"
        value: The created instance, or the validated input
        timestamp: Unix milliseconds
    """

    interface_id: str
    event_type: str
    value: Any
    timestamp: int


WatchCallback = Callable[[InterfaceEvent], None]


class WatcherRegistry:
    """Per-definition and global watcher callbacks."""

    def __init__(self) -> None:
        self._watchers: Dict[str, List[WatchCallback]] = {}
        self._global: List[WatchCallback] = []
        self._lock = threading.Lock()

    def watch(self, definition: Any, callback: WatchCallback) -> Callable[[], None]:
        """Watch one definition (or definition id).

        Returns:
            A function that removes the callback
        """
        interface_id = definition if isinstance(definition, str) else definition.id
        with self._lock:
            self._watchers.setdefault(interface_id, []).append(callback)

        def unwatch() -> None:
            with self._lock:
                callbacks = self._watchers.get(interface_id)
                if callbacks and callback in callbacks:
                    callbacks.remove(callback)
                    if not callbacks:
                        del self._watchers[interface_id]

        return unwatch

    def watch_all(self, callback: WatchCallback) -> Callable[[], None]:
        """Watch every definition.

        Returns:
            A function that removes the callback
        """
        with self._lock:
            self._global.append(callback)

        def unwatch() -> None:
            with self._lock:
                if callback in self._global:
                    self._global.remove(callback)

        return unwatch

    def notify(self, interface_id: str, event_type: str, value: Any) -> None:
        """Invoke the callbacks registered for interface_id, then global ones.

        Exceptions raised by callbacks propagate to the caller. A validate
        call whose watcher raises reports the input as invalid.
        """
        with self._lock:
            callbacks = list(self._watchers.get(interface_id, ())) + list(self._global)
        if not callbacks:
            return

        event = InterfaceEvent(
            interface_id=interface_id,
            event_type=event_type,
            value=value,
            timestamp=int(time.time() * 1000),
        )
        for callback in callbacks:
            callback(event)

    def clear(self) -> None:
        """Remove every callback."""
        with self._lock:
            self._watchers.clear()
            self._global.clear()
