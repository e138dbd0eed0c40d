"""
Student registry: owns student records and their course lists.
"""

import logging
from typing import Any, Dict, List

from ..core.entities import Identity, Student
from ..core.enums import MAX_STUDENT_AGE, MIN_STUDENT_AGE, RecordStatus
from ..core.exceptions import NotFound
from ..core.guards import is_record_id, require_admin, require_in_range, require_non_empty
from .identity_registry import IdentityRegistry

logger = logging.getLogger(__name__)


class StudentRegistry:
    """Sequentially numbered student records, starting at 1."""

    def __init__(self, identities: IdentityRegistry):
        self._identities = identities
        self._students: Dict[int, Student] = {}
        self._counter = 0

    @property
    def total(self) -> int:
        return self._counter

    def register(self, caller: Identity, name: str, age: int, now: int) -> Student:
        """Register a new student. Admin only."""
        require_admin(caller, self._identities.admin)
        require_non_empty(name, "Name cannot be empty")
        require_in_range(age, MIN_STUDENT_AGE, MAX_STUDENT_AGE, "Invalid age")

        self._counter += 1
        student = Student(id=self._counter, name=name, age=age, enrolled_at=now)
        self._students[student.id] = student
        logger.info("Student %d registered: %s", student.id, name)
        return student

    def get(self, student_id: int) -> Student:
        """Get an addressable student or raise ``NotFound``."""
        student = self._students.get(student_id) if is_record_id(student_id, self._counter) else None
        if student is None or not student.active:
            raise NotFound("Student does not exist", details={'student_id': student_id})
        return student

    def course_count(self, student_id: int) -> int:
        return self.get(student_id).course_count

    def append_course(self, student_id: int, course_id: int) -> Student:
        """Append ``course_id`` to the student's course list.

        No duplicate check: the enrollment ledger guarantees uniqueness.
        """
        student = self._students[student_id].with_course(course_id)
        self._students[student_id] = student
        return student

    def export_state(self) -> Dict[str, Any]:
        return {
            'counter': self._counter,
            'records': [student.to_dict() for student in self._students.values()],
        }

    def restore_state(self, state: Dict[str, Any]) -> None:
        records: List[Dict[str, Any]] = state['records']
        self._students = {
            record['id']: Student(
                id=record['id'],
                name=record['name'],
                age=record['age'],
                enrolled_at=record['enrolled_at'],
                course_ids=tuple(record['course_ids']),
                status=RecordStatus.ACTIVE if record['active'] else RecordStatus.INACTIVE,
            )
            for record in records
        }
        self._counter = state['counter']
