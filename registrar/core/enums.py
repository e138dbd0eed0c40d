"""
Enumerations and constants for the Registrar ledger.
"""

from enum import Enum


MIN_STUDENT_AGE = 5
MAX_STUDENT_AGE = 100
MIN_SCORE = 0
MAX_SCORE = 100


class RecordStatus(Enum):
    """Status of a ledger record."""
    ACTIVE = "active"
    INACTIVE = "inactive"


class Role(Enum):
    """Roles an identity can hold."""
    ADMIN = "admin"
    TEACHER = "teacher"
    NONE = "none"


class EventType(Enum):
    """Types of events emitted by the ledger."""
    TEACHER_ADDED = "TeacherAdded"
    TEACHER_REMOVED = "TeacherRemoved"
    STUDENT_REGISTERED = "StudentRegistered"
    COURSE_CREATED = "CourseCreated"
    STUDENT_ENROLLED_IN_COURSE = "StudentEnrolledInCourse"
    GRADE_ASSIGNED = "GradeAssigned"


class LockType(Enum):
    """Types of locks available."""
    READ = "read"
    WRITE = "write"
