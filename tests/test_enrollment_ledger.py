"""Tests for enrollment, its validation order and capacity accounting."""

import pytest

from registrar.core.enums import EventType
from registrar.core.exceptions import (
    AlreadyEnrolled, AlreadyExists, CapacityExceeded, NotFound, Unauthorized,
)

from conftest import ADMIN, T0, TEACHER


class TestEnroll:

    def test_enroll_student(self, staffed, events):
        staffed.enroll_student_in_course(ADMIN, 1, 1, T0 + 10)

        assert staffed.is_student_enrolled_in_course(1, 1)
        assert staffed.get_course(1).enrolled_count == 1
        assert staffed.get_student(1).course_ids == (1,)
        assert staffed.get_student_course_count(1) == 1
        assert staffed.get_course_roster(1) == (1,)

        event = events.get_events("course_1")[-1]
        assert event.event_type is EventType.STUDENT_ENROLLED_IN_COURSE
        assert event.event_data == {'student_id': 1, 'course_id': 1, 'timestamp': T0 + 10}

    def test_duplicate_enrollment(self, enrolled):
        with pytest.raises(AlreadyEnrolled, match="Student already enrolled in this course"):
            enrolled.enroll_student_in_course(ADMIN, 1, 1, T0)
        assert enrolled.get_course(1).enrolled_count == 1
        assert enrolled.get_student(1).course_ids == (1,)

    def test_duplicate_is_an_already_exists_error(self, enrolled):
        with pytest.raises(AlreadyExists):
            enrolled.enroll_student_in_course(ADMIN, 1, 1, T0)

    def test_capacity(self, staffed):
        staffed.register_student(ADMIN, "Fatimah", 16, T0)
        staffed.register_student(ADMIN, "Ali", 14, T0)

        staffed.enroll_student_in_course(ADMIN, 1, 1, T0)
        staffed.enroll_student_in_course(ADMIN, 2, 1, T0)
        with pytest.raises(CapacityExceeded, match="Course is full"):
            staffed.enroll_student_in_course(ADMIN, 3, 1, T0)

        assert staffed.get_course(1).enrolled_count == 2
        assert not staffed.is_student_enrolled_in_course(3, 1)
        assert staffed.get_student(3).course_ids == ()

    def test_student_in_several_courses(self, staffed):
        staffed.create_course(ADMIN, "Science", "Science course", TEACHER, 30, T0)
        staffed.enroll_student_in_course(ADMIN, 1, 2, T0)
        staffed.enroll_student_in_course(ADMIN, 1, 1, T0)

        assert staffed.get_student_course_count(1) == 2
        assert staffed.get_student(1).course_ids == (2, 1)


class TestValidationOrder:

    def test_authorization_first(self, staffed):
        with pytest.raises(Unauthorized):
            staffed.enroll_student_in_course(TEACHER, 99, 99, T0)

    def test_student_before_course(self, staffed):
        with pytest.raises(NotFound, match="Student"):
            staffed.enroll_student_in_course(ADMIN, 99, 99, T0)

    def test_course_after_student(self, staffed):
        with pytest.raises(NotFound, match="Course"):
            staffed.enroll_student_in_course(ADMIN, 1, 99, T0)

    def test_duplicate_before_capacity(self, staffed):
        staffed.register_student(ADMIN, "Fatimah", 16, T0)
        staffed.enroll_student_in_course(ADMIN, 1, 1, T0)
        staffed.enroll_student_in_course(ADMIN, 2, 1, T0)

        # course is now full and student 1 is already in it
        with pytest.raises(AlreadyEnrolled):
            staffed.enroll_student_in_course(ADMIN, 1, 1, T0)


class TestIsEnrolled:

    @pytest.mark.parametrize("student_id,course_id", [
        (1, 1), (0, 0), (99, 1), (1, 99), (-1, -1), ("1", 1), (None, None), ([1], 1),
    ])
    def test_never_fails(self, staffed, student_id, course_id):
        assert staffed.is_student_enrolled_in_course(student_id, course_id) is False

    def test_reflects_relation(self, enrolled):
        assert enrolled.is_student_enrolled_in_course(1, 1) is True
        assert enrolled.is_student_enrolled_in_course(1, 2) is False

    @pytest.mark.parametrize("student_id,course_id", [(True, True), (True, 1), (1, True)])
    def test_bool_ids_are_not_ids(self, enrolled, student_id, course_id):
        assert enrolled.is_student_enrolled_in_course(student_id, course_id) is False

    def test_enroll_with_bool_ids(self, staffed):
        with pytest.raises(NotFound, match="Student"):
            staffed.enroll_student_in_course(ADMIN, True, 1, T0)
        with pytest.raises(NotFound, match="Course"):
            staffed.enroll_student_in_course(ADMIN, 1, True, T0)
        assert staffed.get_course(1).enrolled_count == 0
