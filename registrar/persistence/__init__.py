"""
Persistence module for event storage and ledger snapshots.
"""

from .event_store import InMemoryEventStore, FileEventStore, EventStoreFactory
from .snapshot_manager import SnapshotManager

__all__ = [
    "InMemoryEventStore",
    "FileEventStore",
    "EventStoreFactory",
    "SnapshotManager",
]
