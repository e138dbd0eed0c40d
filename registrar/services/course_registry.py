"""
Course registry: owns course records, capacity and teacher assignment.
"""

import logging
from typing import Any, Dict

from ..core.entities import Course, Identity
from ..core.enums import RecordStatus
from ..core.exceptions import CapacityExceeded, InvalidArgument, NotFound
from ..core.guards import is_record_id, require_admin, require_non_empty
from .identity_registry import IdentityRegistry

logger = logging.getLogger(__name__)


class CourseRegistry:
    """Sequentially numbered course records, starting at 1."""

    def __init__(self, identities: IdentityRegistry):
        self._identities = identities
        self._courses: Dict[int, Course] = {}
        self._counter = 0

    @property
    def total(self) -> int:
        return self._counter

    def create(self, caller: Identity, name: str, description: str,
               teacher: Identity, capacity: int) -> Course:
        """Create a course taught by the admin or a registered teacher."""
        require_admin(caller, self._identities.admin)
        require_non_empty(name, "Course name cannot be empty")
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidArgument("Capacity must be greater than 0", details={'capacity': capacity})
        if teacher != self._identities.admin and not self._identities.is_teacher(teacher):
            raise InvalidArgument("Invalid teacher address", details={'teacher': teacher})

        self._counter += 1
        course = Course(
            id=self._counter,
            name=name,
            description=description or "",
            teacher=teacher,
            capacity=capacity,
        )
        self._courses[course.id] = course
        logger.info("Course %d created: %s (teacher=%s, capacity=%d)", course.id, name, teacher, capacity)
        return course

    def get(self, course_id: int) -> Course:
        """Get an addressable course or raise ``NotFound``."""
        course = self._courses.get(course_id) if is_record_id(course_id, self._counter) else None
        if course is None or not course.active:
            raise NotFound("Course does not exist", details={'course_id': course_id})
        return course

    def increment_enrollment(self, course_id: int) -> Course:
        course = self._courses[course_id]
        if course.is_full:
            raise CapacityExceeded("Course is full", details={'course_id': course_id, 'capacity': course.capacity})

        course = course.with_enrollment()
        self._courses[course_id] = course
        return course

    def export_state(self) -> Dict[str, Any]:
        return {
            'counter': self._counter,
            'records': [course.to_dict() for course in self._courses.values()],
        }

    def restore_state(self, state: Dict[str, Any]) -> None:
        self._courses = {
            record['id']: Course(
                id=record['id'],
                name=record['name'],
                description=record['description'],
                teacher=record['teacher'],
                capacity=record['capacity'],
                enrolled_count=record['enrolled_count'],
                status=RecordStatus.ACTIVE if record['active'] else RecordStatus.INACTIVE,
            )
            for record in state['records']
        }
        self._counter = state['counter']
