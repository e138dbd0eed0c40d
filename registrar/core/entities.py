"""
Core records for the Registrar ledger.

Records are immutable value objects. Registries never mutate a record in
place; they build a replacement with ``dataclasses.replace`` so that a record
handed to a reader stays a consistent snapshot.
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from .enums import EventType, RecordStatus


Identity = str


@dataclass(frozen=True)
class Student:
    """Student record."""
    id: int
    name: str
    age: int
    enrolled_at: int
    course_ids: Tuple[int, ...] = ()
    status: RecordStatus = RecordStatus.ACTIVE

    @property
    def active(self) -> bool:
        return self.status is RecordStatus.ACTIVE

    @property
    def course_count(self) -> int:
        return len(self.course_ids)

    def with_course(self, course_id: int) -> "Student":
        """Return a copy with ``course_id`` appended to the course list."""
        return replace(self, course_ids=self.course_ids + (course_id,))

    def to_dict(self) -> Dict[str, Any]:
        """Convert student to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'age': self.age,
            'active': self.active,
            'enrolled_at': self.enrolled_at,
            'course_ids': list(self.course_ids),
        }


@dataclass(frozen=True)
class Course:
    """Course record with capacity accounting."""
    id: int
    name: str
    description: str
    teacher: Identity
    capacity: int
    enrolled_count: int = 0
    status: RecordStatus = RecordStatus.ACTIVE

    @property
    def active(self) -> bool:
        return self.status is RecordStatus.ACTIVE

    @property
    def is_full(self) -> bool:
        return self.enrolled_count >= self.capacity

    def with_enrollment(self) -> "Course":
        """Return a copy with one more enrolled student."""
        return replace(self, enrolled_count=self.enrolled_count + 1)

    def to_dict(self) -> Dict[str, Any]:
        """Convert course to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'teacher': self.teacher,
            'capacity': self.capacity,
            'enrolled_count': self.enrolled_count,
            'active': self.active,
        }


@dataclass(frozen=True)
class Grade:
    """Immutable grade record. Re-assignment creates a new one."""
    id: int
    student_id: int
    course_id: int
    score: int
    remarks: str
    assigned_at: int
    grader: Identity

    def summary(self) -> Tuple[int, str, int]:
        """Score, remarks and assignment time, in that order."""
        return self.score, self.remarks, self.assigned_at

    def to_dict(self) -> Dict[str, Any]:
        """Convert grade to dictionary."""
        return {
            'id': self.id,
            'student_id': self.student_id,
            'course_id': self.course_id,
            'score': self.score,
            'remarks': self.remarks,
            'assigned_at': self.assigned_at,
            'grader': self.grader,
        }


@dataclass(frozen=True)
class Event:
    """Domain event emitted after a successful mutation."""
    event_type: EventType
    stream_id: str
    event_data: Dict[str, Any]
    timestamp: int
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'event_type': self.event_type.value,
            'stream_id': self.stream_id,
            'event_data': dict(self.event_data),
            'timestamp': self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        return cls(
            event_type=EventType(data['event_type']),
            stream_id=data['stream_id'],
            event_data=dict(data['event_data']),
            timestamp=data['timestamp'],
            id=data['id'],
        )
