"""
Snapshot manager: durable JSON snapshots of the whole ledger state.
"""

import json
import logging
import os
import threading
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..core.exceptions import PersistenceError
from ..core.interfaces import EventSink

logger = logging.getLogger(__name__)


class SnapshotManager:
    """Writes and restores ledger snapshots.

    A snapshot carries the counters, every record, the enrollment relation,
    the grade links and the teacher set, so a restored ledger answers every
    query exactly as the original did.
    """

    def __init__(self, path: str = "registrar_snapshot.json"):
        self._path = path
        self._lock = threading.RLock()

    @property
    def path(self) -> str:
        return self._path

    def save(self, service) -> Dict[str, Any]:
        """Write the ledger's current state, replacing any older snapshot."""
        snapshot = {
            'created_at': datetime.now(timezone.utc).isoformat(),
            'state': service.export_state(),
        }
        with self._lock:
            directory = os.path.dirname(self._path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp_path = f"{self._path}.tmp"
            try:
                with open(tmp_path, "w", encoding="utf-8") as f:
                    json.dump(snapshot, f, indent=2)
                os.replace(tmp_path, self._path)
            except OSError as e:
                raise PersistenceError(f"Failed to save snapshot: {e}") from e

        logger.info("Snapshot saved to %s", self._path)
        return snapshot

    def exists(self) -> bool:
        return os.path.exists(self._path)

    def load(self, event_sink: Optional[EventSink] = None):
        """Rebuild a ``LedgerService`` from the snapshot file."""
        from ..services.ledger_service import STATE_FORMAT_VERSION, LedgerService

        with self._lock:
            try:
                with open(self._path, "r", encoding="utf-8") as f:
                    snapshot = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                raise PersistenceError(f"Failed to read snapshot: {e}") from e

        state = snapshot.get('state') or {}
        if state.get('format_version') != STATE_FORMAT_VERSION:
            raise PersistenceError(
                "Unsupported snapshot format",
                details={'format_version': state.get('format_version')},
            )

        try:
            service = LedgerService.from_state(state, event_sink=event_sink)
        except (KeyError, TypeError, ValueError) as e:
            raise PersistenceError(f"Corrupt snapshot: {e}") from e

        logger.info("Ledger restored from %s", self._path)
        return service
