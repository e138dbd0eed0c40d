"""
Enrollment ledger: the student x course relation and its capacity accounting.
"""

import logging
from typing import Any, Dict, List, Set, Tuple

from ..core.entities import Identity
from ..core.exceptions import AlreadyEnrolled, CapacityExceeded
from ..core.guards import require_admin
from .course_registry import CourseRegistry
from .identity_registry import IdentityRegistry
from .student_registry import StudentRegistry

logger = logging.getLogger(__name__)


class EnrollmentLedger:
    """Single source of truth for "is this student enrolled in this course"."""

    def __init__(self, identities: IdentityRegistry, students: StudentRegistry,
                 courses: CourseRegistry):
        self._identities = identities
        self._students = students
        self._courses = courses
        self._pairs: Set[Tuple[int, int]] = set()
        self._rosters: Dict[int, List[int]] = {}  # course_id -> student ids in enrollment order

    def enroll(self, caller: Identity, student_id: int, course_id: int) -> None:
        """Enroll a student in a course.

        Checks run in a fixed order, which decides the error an invalid call
        surfaces: authorization, student, course, duplicate, capacity. All of
        them run before anything is written.
        """
        require_admin(caller, self._identities.admin)
        self._students.get(student_id)
        course = self._courses.get(course_id)
        if (student_id, course_id) in self._pairs:
            raise AlreadyEnrolled(
                "Student already enrolled in this course",
                details={'student_id': student_id, 'course_id': course_id},
            )
        if course.is_full:
            raise CapacityExceeded("Course is full", details={'course_id': course_id, 'capacity': course.capacity})

        self._pairs.add((student_id, course_id))
        self._rosters.setdefault(course_id, []).append(student_id)
        self._courses.increment_enrollment(course_id)
        self._students.append_course(student_id, course_id)
        logger.info("Student %d enrolled in course %d", student_id, course_id)

    def is_enrolled(self, student_id: Any, course_id: Any) -> bool:
        """Pure membership test; unknown or malformed ids give ``False``."""
        # True == 1 and hashes alike, so it would match pair (1, 1)
        if isinstance(student_id, bool) or isinstance(course_id, bool):
            return False
        try:
            return (student_id, course_id) in self._pairs
        except TypeError:
            return False

    def students_in(self, course_id: int) -> Tuple[int, ...]:
        return tuple(self._rosters.get(course_id, ()))

    def export_state(self) -> Dict[str, Any]:
        return {
            'rosters': {str(course_id): list(roster) for course_id, roster in self._rosters.items()},
        }

    def restore_state(self, state: Dict[str, Any]) -> None:
        self._rosters = {int(course_id): list(roster) for course_id, roster in state['rosters'].items()}
        self._pairs = {
            (student_id, course_id)
            for course_id, roster in self._rosters.items()
            for student_id in roster
        }
