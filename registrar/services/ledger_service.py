"""
Ledger facade: the externally callable operation set.

Every call passes the caller identity and, for mutations, the effective
timestamp explicitly. Mutations run under the write lock, emit exactly one
event and return; reads run under the shared read lock.
"""

import functools
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional, Tuple

from ..core.entities import Course, Event, Grade, Identity, Student
from ..core.enums import EventType, Role
from ..core.exceptions import RegistrarError
from ..core.interfaces import EventSink
from .concurrency_manager import ConcurrencyManager
from .course_registry import CourseRegistry
from .enrollment_ledger import EnrollmentLedger
from .event_service import EventService
from .grade_ledger import GradeLedger
from .identity_registry import IdentityRegistry
from .student_registry import StudentRegistry

logger = logging.getLogger(__name__)

STATE_FORMAT_VERSION = 1


def _logs_rejections(method):
    """Log a rejected call with its error code before re-raising."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except RegistrarError as e:
            logger.warning("%s rejected: %s (%s)", method.__name__, e.message, e.error_code)
            raise

    return wrapper


class LedgerService:
    """Composes the registries and ledgers behind a single-writer lock."""

    def __init__(self, admin: Identity, event_sink: Optional[EventSink] = None,
                 concurrency_manager: Optional[ConcurrencyManager] = None):
        self._identities = IdentityRegistry(admin)
        self._students = StudentRegistry(self._identities)
        self._courses = CourseRegistry(self._identities)
        self._enrollments = EnrollmentLedger(self._identities, self._students, self._courses)
        self._grades = GradeLedger(self._identities, self._students, self._courses, self._enrollments)
        self._concurrency = concurrency_manager or ConcurrencyManager()
        self._event_sink = event_sink or EventService()

    @property
    def event_sink(self) -> EventSink:
        return self._event_sink

    @property
    def admin(self) -> Identity:
        return self._identities.admin

    @contextmanager
    def _transaction(self, *parts) -> Iterator[None]:
        """Run one mutation under the write lock, all or nothing.

        ``parts`` are the components the mutation may write. Their state is
        captured first and put back if anything in the block raises, which
        covers an event that could not be recorded after the change was
        applied. Subscribers are notified once the lock is released.
        """
        with self._concurrency.write():
            saved = [(part, part.export_state()) for part in parts]
            try:
                yield
            except Exception:
                for part, state in saved:
                    part.restore_state(state)
                raise
        self._event_sink.dispatch()

    def _emit(self, event_type: EventType, stream_id: str, data: Dict[str, Any], now: int) -> None:
        self._event_sink.record(Event(event_type=event_type, stream_id=stream_id, event_data=data, timestamp=now))

    # Roles

    @_logs_rejections
    def add_teacher(self, caller: Identity, identity: Identity, now: int) -> None:
        with self._transaction(self._identities):
            self._identities.add_teacher(caller, identity)
            self._emit(EventType.TEACHER_ADDED, "teachers", {'teacher': identity, 'timestamp': now}, now)

    @_logs_rejections
    def remove_teacher(self, caller: Identity, identity: Identity, now: int) -> None:
        with self._transaction(self._identities):
            self._identities.remove_teacher(caller, identity)
            self._emit(EventType.TEACHER_REMOVED, "teachers", {'teacher': identity, 'timestamp': now}, now)

    def is_teacher(self, identity: Identity) -> bool:
        with self._concurrency.read():
            return self._identities.is_teacher(identity)

    def is_admin_or_teacher(self, identity: Identity) -> bool:
        with self._concurrency.read():
            return self._identities.is_admin_or_teacher(identity)

    def list_teachers(self) -> Tuple[Identity, ...]:
        with self._concurrency.read():
            return self._identities.teachers()

    def role_of(self, identity: Identity) -> Role:
        with self._concurrency.read():
            return self._identities.role_of(identity)

    # Students and courses

    @_logs_rejections
    def register_student(self, caller: Identity, name: str, age: int, now: int) -> int:
        with self._transaction(self._students):
            student = self._students.register(caller, name, age, now)
            self._emit(
                EventType.STUDENT_REGISTERED, f"student_{student.id}",
                {'student_id': student.id, 'name': name, 'timestamp': now}, now,
            )
            return student.id

    @_logs_rejections
    def create_course(self, caller: Identity, name: str, description: str,
                      teacher: Identity, capacity: int, now: int) -> int:
        with self._transaction(self._courses):
            course = self._courses.create(caller, name, description, teacher, capacity)
            self._emit(
                EventType.COURSE_CREATED, f"course_{course.id}",
                {'course_id': course.id, 'name': name, 'teacher': teacher}, now,
            )
            return course.id

    @_logs_rejections
    def enroll_student_in_course(self, caller: Identity, student_id: int, course_id: int, now: int) -> None:
        with self._transaction(self._enrollments, self._courses, self._students):
            self._enrollments.enroll(caller, student_id, course_id)
            self._emit(
                EventType.STUDENT_ENROLLED_IN_COURSE, f"course_{course_id}",
                {'student_id': student_id, 'course_id': course_id, 'timestamp': now}, now,
            )

    @_logs_rejections
    def assign_grade(self, caller: Identity, student_id: int, course_id: int,
                     score: int, remarks: str, now: int) -> int:
        with self._transaction(self._grades):
            grade = self._grades.assign(caller, student_id, course_id, score, remarks, now)
            self._emit(
                EventType.GRADE_ASSIGNED, f"student_{student_id}",
                {'student_id': student_id, 'course_id': course_id, 'score': score, 'timestamp': now}, now,
            )
            return grade.id

    # Queries

    def get_student(self, student_id: int) -> Student:
        with self._concurrency.read():
            return self._students.get(student_id)

    def get_course(self, course_id: int) -> Course:
        with self._concurrency.read():
            return self._courses.get(course_id)

    def get_grade(self, grade_id: int) -> Grade:
        with self._concurrency.read():
            return self._grades.get(grade_id)

    def get_student_grade_for_course(self, student_id: int, course_id: int) -> Tuple[int, str, int]:
        """Score, remarks and timestamp of the grade linked to the pair."""
        with self._concurrency.read():
            return self._grades.get_for_pair(student_id, course_id).summary()

    def get_student_course_count(self, student_id: int) -> int:
        with self._concurrency.read():
            return self._students.course_count(student_id)

    def is_student_enrolled_in_course(self, student_id: Any, course_id: Any) -> bool:
        with self._concurrency.read():
            return self._enrollments.is_enrolled(student_id, course_id)

    def get_course_roster(self, course_id: int) -> Tuple[int, ...]:
        with self._concurrency.read():
            self._courses.get(course_id)
            return self._enrollments.students_in(course_id)

    def get_total_students(self) -> int:
        with self._concurrency.read():
            return self._students.total

    def get_total_courses(self) -> int:
        with self._concurrency.read():
            return self._courses.total

    def get_total_grades(self) -> int:
        with self._concurrency.read():
            return self._grades.total

    def get_statistics(self) -> Dict[str, Any]:
        with self._concurrency.read():
            return {
                'students': self._students.total,
                'courses': self._courses.total,
                'grades': self._grades.total,
                'teachers': len(self._identities.teachers()),
            }

    # State transfer

    def export_state(self) -> Dict[str, Any]:
        """Full ledger state as plain JSON-compatible data."""
        with self._concurrency.read():
            return {
                'format_version': STATE_FORMAT_VERSION,
                'identities': self._identities.export_state(),
                'students': self._students.export_state(),
                'courses': self._courses.export_state(),
                'enrollments': self._enrollments.export_state(),
                'grades': self._grades.export_state(),
            }

    @classmethod
    def from_state(cls, state: Dict[str, Any], event_sink: Optional[EventSink] = None) -> "LedgerService":
        """Rebuild a ledger from ``export_state`` output."""
        service = cls(state['identities']['admin'], event_sink=event_sink)
        with service._concurrency.write():
            service._identities.restore_state(state['identities'])
            service._students.restore_state(state['students'])
            service._courses.restore_state(state['courses'])
            service._enrollments.restore_state(state['enrollments'])
            service._grades.restore_state(state['grades'])
        return service
