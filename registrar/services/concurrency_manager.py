"""
Concurrency management for the ledger: one writer at a time, shared readers.
"""

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from ..core.enums import LockType


class ConcurrencyManager:
    """Readers-writer lock guarding all ledger state.

    Writers are exclusive and get preference over newly arriving readers. The
    thread holding the write side may re-enter either side, so a mutating
    operation can call read helpers without deadlocking.
    """

    def __init__(self):
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._waiting_writers = 0
        self._writer: Optional[int] = None
        self._writer_depth = 0
        self._reads = 0
        self._writes = 0

    def acquire(self, lock_type: LockType) -> None:
        me = threading.get_ident()
        with self._condition:
            if self._writer == me:
                if lock_type is LockType.WRITE:
                    self._writer_depth += 1
                return

            if lock_type is LockType.READ:
                while self._writer is not None or self._waiting_writers:
                    self._condition.wait()
                self._readers += 1
                self._reads += 1
            else:
                self._waiting_writers += 1
                try:
                    while self._writer is not None or self._readers:
                        self._condition.wait()
                finally:
                    self._waiting_writers -= 1
                self._writer = me
                self._writer_depth = 1
                self._writes += 1

    def release(self, lock_type: LockType) -> None:
        me = threading.get_ident()
        with self._condition:
            if self._writer == me:
                if lock_type is LockType.WRITE:
                    self._writer_depth -= 1
                    if self._writer_depth == 0:
                        self._writer = None
                        self._condition.notify_all()
                return

            if lock_type is LockType.WRITE:
                raise RuntimeError("Write lock released by a thread that does not hold it")
            self._readers -= 1
            if self._readers == 0:
                self._condition.notify_all()

    @contextmanager
    def lock(self, lock_type: LockType) -> Iterator[None]:
        """Context manager for acquiring and releasing a lock."""
        self.acquire(lock_type)
        try:
            yield
        finally:
            self.release(lock_type)

    def read(self):
        return self.lock(LockType.READ)

    def write(self):
        return self.lock(LockType.WRITE)

    def get_statistics(self) -> Dict[str, Any]:
        with self._condition:
            return {
                'reads': self._reads,
                'writes': self._writes,
                'active_readers': self._readers,
                'writer_active': self._writer is not None,
            }
