"""
Grade ledger: grade records and the per-pair grade link.
"""

import logging
from typing import Any, Dict, Tuple

from ..core.entities import Grade, Identity
from ..core.enums import MAX_SCORE, MIN_SCORE
from ..core.exceptions import NotAssigned, NotFound
from ..core.guards import (
    is_record_id, require_admin_or_teacher, require_course_teacher_or_admin,
    require_enrolled, require_in_range,
)
from .course_registry import CourseRegistry
from .enrollment_ledger import EnrollmentLedger
from .identity_registry import IdentityRegistry
from .student_registry import StudentRegistry

logger = logging.getLogger(__name__)


class GradeLedger:
    """Append-only grade history; each pair links to its latest grade."""

    def __init__(self, identities: IdentityRegistry, students: StudentRegistry,
                 courses: CourseRegistry, enrollments: EnrollmentLedger):
        self._identities = identities
        self._students = students
        self._courses = courses
        self._enrollments = enrollments
        self._grades: Dict[int, Grade] = {}
        self._links: Dict[Tuple[int, int], int] = {}
        self._counter = 0

    @property
    def total(self) -> int:
        return self._counter

    def assign(self, caller: Identity, student_id: int, course_id: int,
               score: int, remarks: str, now: int) -> Grade:
        """Record a grade and make it the one linked to the pair.

        The coarse role gate runs first, so an identity removed from the
        teacher set is rejected even for a course it still teaches.
        """
        require_admin_or_teacher(caller, self._identities.admin, self._identities.is_teacher(caller))
        self._students.get(student_id)
        course = self._courses.get(course_id)
        require_enrolled(self._enrollments.is_enrolled(student_id, course_id), student_id, course_id)
        require_in_range(score, MIN_SCORE, MAX_SCORE, "Score must be between 0 and 100")
        require_course_teacher_or_admin(caller, course.teacher, self._identities.admin)

        self._counter += 1
        grade = Grade(
            id=self._counter,
            student_id=student_id,
            course_id=course_id,
            score=score,
            remarks=remarks or "",
            assigned_at=now,
            grader=caller,
        )
        self._grades[grade.id] = grade
        previous = self._links.get((student_id, course_id))
        self._links[(student_id, course_id)] = grade.id
        if previous is not None:
            logger.info("Grade %d replaces grade %d for student %d in course %d",
                        grade.id, previous, student_id, course_id)
        else:
            logger.info("Grade %d assigned to student %d in course %d", grade.id, student_id, course_id)
        return grade

    def get(self, grade_id: int) -> Grade:
        grade = self._grades.get(grade_id) if is_record_id(grade_id, self._counter) else None
        if grade is None:
            raise NotFound("Grade does not exist", details={'grade_id': grade_id})
        return grade

    def get_for_pair(self, student_id: int, course_id: int) -> Grade:
        require_enrolled(self._enrollments.is_enrolled(student_id, course_id), student_id, course_id)
        grade_id = self._links.get((student_id, course_id))
        if grade_id is None:
            raise NotAssigned(
                "No grade assigned for this course",
                details={'student_id': student_id, 'course_id': course_id},
            )
        return self._grades[grade_id]

    def export_state(self) -> Dict[str, Any]:
        return {
            'counter': self._counter,
            'records': [grade.to_dict() for grade in self._grades.values()],
            'links': [
                {'student_id': student_id, 'course_id': course_id, 'grade_id': grade_id}
                for (student_id, course_id), grade_id in self._links.items()
            ],
        }

    def restore_state(self, state: Dict[str, Any]) -> None:
        self._grades = {record['id']: Grade(**record) for record in state['records']}
        self._links = {
            (link['student_id'], link['course_id']): link['grade_id']
            for link in state['links']
        }
        self._counter = state['counter']
