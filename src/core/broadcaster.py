"""Fire-and-forget delivery of progress events to subscribed observers.

One Broadcaster is created by the server at startup and injected wherever
events are emitted. Delivery is at-most-once and best effort: each sink is
called once per event, failures are logged and never reach the publisher.
"""

from __future__ import annotations

import logging
import threading
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from core.events import EventKind, ProgressEvent

logger = logging.getLogger(__name__)

Sink = Callable[[ProgressEvent], None]


class Broadcaster:
    def __init__(self) -> None:
        self._observers: Dict[str, Sink] = {}
        # Registry is shared by concurrent request handlers and stream connections
        self._lock = threading.Lock()

    @property
    def observer_count(self) -> int:
        with self._lock:
            return len(self._observers)

    def subscribe(self, sink: Sink) -> str:
        observer_id = uuid.uuid4().hex
        with self._lock:
            self._observers[observer_id] = sink
        logger.debug("Observer %s subscribed", observer_id)
        return observer_id

    def unsubscribe(self, observer_id: str) -> None:
        with self._lock:
            removed = self._observers.pop(observer_id, None)
        if removed is not None:
            logger.debug("Observer %s unsubscribed", observer_id)

    def publish(self, event: ProgressEvent, target_id: Optional[str] = None) -> None:
        """Deliver `event` to one observer (target_id) or to all of them."""
        with self._lock:
            if target_id is not None:
                sink = self._observers.get(target_id)
                targets: List[Tuple[str, Sink]] = [(target_id, sink)] if sink is not None else []
            else:
                targets = list(self._observers.items())

        # Sinks run outside the lock so they may (un)subscribe themselves
        for observer_id, sink in targets:
            try:
                sink(event)
            except Exception:
                logger.warning(
                    "Dropping %s event for observer %s",
                    event.name,
                    observer_id,
                    exc_info=True,
                )

    def emit(
        self,
        kind: EventKind,
        payload: Mapping[str, Any],
        target_id: Optional[str] = None,
    ) -> ProgressEvent:
        event = ProgressEvent(kind=kind, payload=dict(payload))
        self.publish(event, target_id=target_id)
        return event
