"""Shared fixtures for the Registrar test suite."""

import pytest

from registrar.persistence import InMemoryEventStore
from registrar.services import EventService, LedgerService

ADMIN = "admin"
TEACHER = "teacher-1"
OTHER_TEACHER = "teacher-2"
STRANGER = "stranger"
T0 = 1_700_000_000


@pytest.fixture
def events():
    return EventService(InMemoryEventStore())


@pytest.fixture
def ledger(events):
    return LedgerService(ADMIN, event_sink=events)


@pytest.fixture
def staffed(ledger):
    """Ledger with one teacher, one student and one course (capacity 2)."""
    ledger.add_teacher(ADMIN, TEACHER, T0)
    ledger.register_student(ADMIN, "Ahmad", 15, T0 + 1)
    ledger.create_course(ADMIN, "Mathematics", "Advanced Math Course", TEACHER, 2, T0 + 2)
    return ledger


@pytest.fixture
def enrolled(staffed):
    """Student 1 enrolled in course 1."""
    staffed.enroll_student_in_course(ADMIN, 1, 1, T0 + 3)
    return staffed
