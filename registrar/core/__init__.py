"""
Core module containing the record model, guards and error kinds.
"""

from .entities import *
from .interfaces import *
from .exceptions import *
from .enums import *

__all__ = [
    # Entities
    "Identity",
    "Student",
    "Course",
    "Grade",
    "Event",

    # Interfaces
    "EventSink",
    "EventHandler",
    "EventStore",

    # Enums
    "RecordStatus",
    "Role",
    "EventType",
    "LockType",

    # Exceptions
    "RegistrarError",
    "Unauthorized",
    "InvalidArgument",
    "NotFound",
    "AlreadyExists",
    "AlreadyEnrolled",
    "CapacityExceeded",
    "NotEnrolled",
    "NotAssigned",
    "PersistenceError",
    "EventSourcingError",
    "ConfigurationError",
]
