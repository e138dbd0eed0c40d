"""
Event service: the ledger's event sink, fanning events out to a store and
to subscribers.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Deque, Dict, List, Optional, Set

from ..core.entities import Event
from ..core.enums import EventType
from ..core.interfaces import EventHandler, EventSink, EventStore
from ..persistence.event_store import InMemoryEventStore

logger = logging.getLogger(__name__)


@dataclass
class EventSubscription:
    """Event subscription information."""
    subscriber_id: str
    event_types: Set[EventType]
    handler: Callable[[Event], None]
    created_at: float = field(default_factory=time.time)

    def matches(self, event: Event) -> bool:
        return not self.event_types or event.event_type in self.event_types


class EventService(EventSink):
    """Persists every emitted event, then notifies subscribers.

    ``record`` appends to the store and queues the event; the ledger calls it
    under its write lock. ``dispatch`` drains the queue in record order and is
    called after that lock is released, so subscribers never hold up readers
    or writers. Store failures propagate to the caller. A failing subscriber
    is logged and skipped; it never undoes an operation that already committed.
    """

    def __init__(self, event_store: Optional[EventStore] = None):
        self._event_store = event_store or InMemoryEventStore()
        self._subscriptions: Dict[str, EventSubscription] = {}
        self._handlers: List[EventHandler] = []
        self._lock = threading.RLock()
        self._dispatch_lock = threading.Lock()
        self._local = threading.local()
        self._pending: Deque[Event] = deque()
        self._published = 0
        self._handler_failures = 0

    @property
    def event_store(self) -> EventStore:
        return self._event_store

    def subscribe(self, subscriber_id: str, handler: Callable[[Event], None],
                  event_types: Optional[Set[EventType]] = None) -> EventSubscription:
        """Subscribe a callable; an empty ``event_types`` means every type."""
        subscription = EventSubscription(
            subscriber_id=subscriber_id,
            event_types=set(event_types or ()),
            handler=handler,
        )
        with self._lock:
            self._subscriptions[subscriber_id] = subscription
        return subscription

    def unsubscribe(self, subscriber_id: str) -> bool:
        with self._lock:
            return self._subscriptions.pop(subscriber_id, None) is not None

    def add_event_handler(self, handler: EventHandler) -> None:
        with self._lock:
            self._handlers.append(handler)

    def emit(self, event: Event) -> None:
        self.record(event)
        self.dispatch()

    def record(self, event: Event) -> None:
        """Append to the store and queue for delivery. Store errors propagate."""
        with self._lock:
            self._event_store.append_event(event)
            self._published += 1
            self._pending.append(event)
        logger.debug("Event %s on stream %s", event.event_type.value, event.stream_id)

    def dispatch(self) -> None:
        """Deliver queued events to subscribers and handlers in record order."""
        if getattr(self._local, 'dispatching', False):
            # a subscriber emitted; the outer loop on this thread delivers it
            return
        with self._dispatch_lock:
            self._local.dispatching = True
            try:
                while True:
                    with self._lock:
                        if not self._pending:
                            return
                        event = self._pending.popleft()
                        subscriptions = list(self._subscriptions.values())
                        handlers = list(self._handlers)

                    for subscription in subscriptions:
                        if subscription.matches(event):
                            self._deliver(subscription.subscriber_id, subscription.handler, event)
                    for handler in handlers:
                        if handler.can_handle(event.event_type.value):
                            self._deliver(handler.__class__.__name__, handler.handle_event, event)
            finally:
                self._local.dispatching = False

    def _deliver(self, name: str, callback: Callable[[Event], None], event: Event) -> None:
        try:
            callback(event)
        except Exception:
            with self._lock:
                self._handler_failures += 1
            logger.exception("Error in event handler %s for %s", name, event.event_type.value)

    def get_events(self, stream_id: str, from_version: int = 0) -> List[Event]:
        return self._event_store.get_events(stream_id, from_version)

    def get_processing_statistics(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'published': self._published,
                'handler_failures': self._handler_failures,
                'subscriptions': len(self._subscriptions),
                'handlers': len(self._handlers),
                'streams': len(self._event_store.get_all_streams()),
            }
