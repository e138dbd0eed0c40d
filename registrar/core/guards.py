"""
Guard clauses shared by ledger operations.

Each guard either returns silently or raises the matching error kind. They
hold no state and are composed explicitly at the top of each operation.
"""

from typing import Any, Optional

from .entities import Identity
from .exceptions import InvalidArgument, NotEnrolled, Unauthorized


def require_admin(caller: Identity, admin: Identity) -> None:
    if caller != admin:
        raise Unauthorized("Only admin can perform this action", details={'caller': caller})


def require_admin_or_teacher(caller: Identity, admin: Identity, is_teacher: bool) -> None:
    if caller != admin and not is_teacher:
        raise Unauthorized("Only teacher or admin can perform this action", details={'caller': caller})


def require_course_teacher_or_admin(caller: Identity, course_teacher: Identity, admin: Identity) -> None:
    if caller != course_teacher and caller != admin:
        raise Unauthorized("Only course teacher can assign grades", details={'caller': caller})


def require_identity(identity: Optional[Identity]) -> None:
    if not identity:
        raise InvalidArgument("Invalid address")


def require_non_empty(value: Optional[str], message: str) -> None:
    if not value:
        raise InvalidArgument(message)


def is_record_id(value: Any, counter: int) -> bool:
    """True for an int in ``[1, counter]``; bools are not ids."""
    return isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= counter


def require_in_range(value: int, low: int, high: int, message: str) -> None:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise InvalidArgument(message, details={'value': value, 'min': low, 'max': high})


def require_enrolled(enrolled: bool, student_id: int, course_id: int) -> None:
    if not enrolled:
        raise NotEnrolled(
            "Student not enrolled in this course",
            details={'student_id': student_id, 'course_id': course_id},
        )
