"""
Registrar: an access-controlled ledger of students, courses, enrollments
and grades.
"""

__version__ = "1.0.0"
__author__ = "Registrar Development Team"
__description__ = "Access-controlled academic record ledger"
