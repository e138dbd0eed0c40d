"""
Services module containing the registries, ledgers and the ledger facade.
"""

from .identity_registry import IdentityRegistry
from .student_registry import StudentRegistry
from .course_registry import CourseRegistry
from .enrollment_ledger import EnrollmentLedger
from .grade_ledger import GradeLedger
from .concurrency_manager import ConcurrencyManager
from .event_service import EventService, EventSubscription
from .ledger_service import LedgerService

__all__ = [
    "IdentityRegistry",
    "StudentRegistry",
    "CourseRegistry",
    "EnrollmentLedger",
    "GradeLedger",
    "ConcurrencyManager",
    "EventService",
    "EventSubscription",
    "LedgerService",
]
