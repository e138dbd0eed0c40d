"""
Event store implementations.
"""

import json
import logging
import os
import threading
from collections import defaultdict
from typing import Dict, List

from ..core.entities import Event
from ..core.exceptions import ConfigurationError, EventSourcingError
from ..core.interfaces import EventStore

logger = logging.getLogger(__name__)


class InMemoryEventStore(EventStore):
    """In-memory implementation of event store."""

    def __init__(self):
        self._events: Dict[str, List[Event]] = defaultdict(list)
        self._lock = threading.RLock()

    def append_event(self, event: Event) -> None:
        """Append an event to the store."""
        with self._lock:
            self._events[event.stream_id].append(event)

    def get_events(self, stream_id: str, from_version: int = 0) -> List[Event]:
        """Get events for a stream."""
        with self._lock:
            return list(self._events.get(stream_id, [])[from_version:])

    def get_all_streams(self) -> List[str]:
        with self._lock:
            return sorted(self._events)


class FileEventStore(EventStore):
    """File-based event store, one JSON-lines file per stream."""

    def __init__(self, base_path: str = "events"):
        self._base_path = base_path
        self._lock = threading.RLock()
        os.makedirs(self._base_path, exist_ok=True)

    def _get_stream_path(self, stream_id: str) -> str:
        return os.path.join(self._base_path, f"{stream_id}.jsonl")

    def append_event(self, event: Event) -> None:
        """Append an event to the store."""
        with self._lock:
            try:
                with open(self._get_stream_path(event.stream_id), "a", encoding="utf-8") as f:
                    f.write(json.dumps(event.to_dict()) + "\n")
            except OSError as e:
                raise EventSourcingError(f"Failed to append event: {e}") from e

    def get_events(self, stream_id: str, from_version: int = 0) -> List[Event]:
        """Get events for a stream, skipping the first ``from_version``."""
        with self._lock:
            stream_path = self._get_stream_path(stream_id)
            if not os.path.exists(stream_path):
                return []

            events = []
            try:
                with open(stream_path, "r", encoding="utf-8") as f:
                    for line_num, line in enumerate(f, 1):
                        if line_num <= from_version:
                            continue
                        try:
                            events.append(Event.from_dict(json.loads(line)))
                        except (json.JSONDecodeError, KeyError, ValueError) as e:
                            logger.warning("Skipping malformed event at %s:%d: %s", stream_path, line_num, e)
            except OSError as e:
                raise EventSourcingError(f"Failed to read events: {e}") from e

            return events

    def get_all_streams(self) -> List[str]:
        with self._lock:
            return sorted(
                filename[:-len(".jsonl")]
                for filename in os.listdir(self._base_path)
                if filename.endswith(".jsonl")
            )


class EventStoreFactory:
    """Factory for creating event store instances."""

    @staticmethod
    def create_event_store(store_type: str, **kwargs) -> EventStore:
        """Create an event store instance based on type."""
        if store_type.lower() == "memory":
            return InMemoryEventStore()
        elif store_type.lower() == "file":
            return FileEventStore(**kwargs)
        else:
            raise ConfigurationError(f"Unsupported event store type: {store_type}")
