"""
Core interfaces and abstract base classes for the Registrar ledger.
"""

from abc import ABC, abstractmethod
from typing import List

from .entities import Event


class EventSink(ABC):
    """Receives every event the ledger emits, in commit order."""

    @abstractmethod
    def emit(self, event: Event) -> None:
        """Deliver one event."""
        pass

    def record(self, event: Event) -> None:
        """Durably accept an event; delivery may wait for ``dispatch``."""
        self.emit(event)

    def dispatch(self) -> None:
        """Deliver events accepted by ``record`` that are still pending."""
        pass


class EventHandler(ABC):
    """Abstract base class for event subscribers."""

    @abstractmethod
    def handle_event(self, event: Event) -> None:
        """Handle an event."""
        pass

    @abstractmethod
    def can_handle(self, event_type: str) -> bool:
        """Check if handler can handle event type."""
        pass


class EventStore(ABC):
    """Abstract base class for event stores."""

    @abstractmethod
    def append_event(self, event: Event) -> None:
        """Append an event to the store."""
        pass

    @abstractmethod
    def get_events(self, stream_id: str, from_version: int = 0) -> List[Event]:
        """Get events for a stream."""
        pass

    @abstractmethod
    def get_all_streams(self) -> List[str]:
        """Get all stream IDs."""
        pass
