"""
Main entry point for the Registrar platform.
"""

import argparse
import logging
import time
from typing import Optional

from .api.rest_api import LedgerRestAPI
from .config import RegistrarSettings, load_settings
from .logging_setup import setup_logging
from .persistence import EventStoreFactory, SnapshotManager
from .services import EventService, LedgerService

logger = logging.getLogger(__name__)


class RegistrarPlatform:
    """Wires the ledger, its event sink, snapshots and the REST boundary."""

    def __init__(self, settings: Optional[RegistrarSettings] = None):
        self._settings = settings or RegistrarSettings()
        self._running = False

        store_kwargs = {}
        if self._settings.event_store_type == "file":
            store_kwargs['base_path'] = self._settings.event_store_path
        self._event_store = EventStoreFactory.create_event_store(self._settings.event_store_type, **store_kwargs)
        self._event_service = EventService(self._event_store)
        logger.info("Event store initialized: %s", self._settings.event_store_type)

        self._snapshots = SnapshotManager(self._settings.snapshot_path) if self._settings.snapshot_path else None
        if self._snapshots and self._snapshots.exists():
            self._ledger = self._snapshots.load(event_sink=self._event_service)
        else:
            self._ledger = LedgerService(self._settings.admin_identity, event_sink=self._event_service)
        if self._ledger.admin != self._settings.admin_identity:
            logger.warning("Snapshot admin %s differs from configured admin %s; keeping the snapshot's",
                           self._ledger.admin, self._settings.admin_identity)

        self._rest_api = LedgerRestAPI(self._ledger)
        logger.info("Registrar platform initialized (admin=%s)", self._ledger.admin)

    @property
    def ledger(self) -> LedgerService:
        return self._ledger

    @property
    def event_service(self) -> EventService:
        return self._event_service

    @property
    def app(self):
        return self._rest_api.app

    def save_snapshot(self) -> bool:
        if self._snapshots is None:
            return False
        self._snapshots.save(self._ledger)
        return True

    def start_rest_server(self, host: Optional[str] = None, port: Optional[int] = None) -> None:
        """Run the REST server in the foreground until interrupted."""
        import uvicorn

        self._running = True
        try:
            uvicorn.run(
                self._rest_api.app,
                host=host or self._settings.rest_host,
                port=port or self._settings.rest_port,
                log_level=self._settings.log_level.lower(),
            )
        finally:
            self.stop_platform()

    def stop_platform(self) -> None:
        if not self._running:
            return
        if self.save_snapshot():
            logger.info("Final snapshot written")
        self._running = False
        logger.info("Registrar platform stopped")

    def run_demo(self) -> None:
        """Run the reference scenario against an in-process ledger."""
        ledger = self._ledger
        admin = ledger.admin
        teacher = "teacher-1"
        now = int(time.time())

        ledger.add_teacher(admin, teacher, now)
        ahmad = ledger.register_student(admin, "Ahmad", 15, now)
        fatimah = ledger.register_student(admin, "Fatimah", 16, now)
        math = ledger.create_course(admin, "Mathematics", "Advanced Math Course", teacher, 2, now)
        ledger.enroll_student_in_course(admin, ahmad, math, now)
        ledger.enroll_student_in_course(admin, fatimah, math, now)
        ledger.assign_grade(teacher, ahmad, math, 85, "Good work!", now)

        score, remarks, _ = ledger.get_student_grade_for_course(ahmad, math)
        logger.info("Ahmad scored %d in Mathematics (%s)", score, remarks)
        logger.info("Ledger statistics: %s", ledger.get_statistics())
        logger.info("Event statistics: %s", self._event_service.get_processing_statistics())


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Registrar academic record ledger")
    parser.add_argument("--rest-host", type=str, help="REST server host")
    parser.add_argument("--rest-port", type=int, help="REST server port")
    parser.add_argument("--demo", action="store_true", help="Run demo mode")
    parser.add_argument("--config", type=str, help="Configuration file path (JSON)")

    args = parser.parse_args()

    settings = load_settings(args.config, rest_host=args.rest_host, rest_port=args.rest_port)
    setup_logging(settings.log_level, settings.log_format)

    platform = RegistrarPlatform(settings)
    if args.demo:
        platform.run_demo()
    else:
        platform.start_rest_server()


if __name__ == "__main__":
    main()
