"""Tests for course creation and lookup."""

import pytest

from registrar.core.enums import EventType
from registrar.core.exceptions import InvalidArgument, NotFound, Unauthorized

from conftest import ADMIN, STRANGER, T0, TEACHER


@pytest.fixture
def with_teacher(ledger):
    ledger.add_teacher(ADMIN, TEACHER, T0)
    return ledger


class TestCreateCourse:

    def test_create_course(self, with_teacher, events):
        course_id = with_teacher.create_course(ADMIN, "Mathematics", "Advanced Math Course", TEACHER, 30, T0)

        assert course_id == 1
        assert with_teacher.get_total_courses() == 1
        course = with_teacher.get_course(1)
        assert course.name == "Mathematics"
        assert course.description == "Advanced Math Course"
        assert course.teacher == TEACHER
        assert course.capacity == 30
        assert course.enrolled_count == 0
        assert course.active is True

        [event] = events.get_events("course_1")
        assert event.event_type is EventType.COURSE_CREATED
        assert event.event_data == {'course_id': 1, 'name': "Mathematics", 'teacher': TEACHER}

    def test_admin_may_teach(self, ledger):
        assert ledger.create_course(ADMIN, "Math", "", ADMIN, 10, T0) == 1
        assert ledger.get_course(1).teacher == ADMIN

    def test_empty_name_rejected(self, with_teacher):
        with pytest.raises(InvalidArgument, match="Course name cannot be empty"):
            with_teacher.create_course(ADMIN, "", "Description", TEACHER, 30, T0)

    @pytest.mark.parametrize("capacity", [0, -5])
    def test_non_positive_capacity_rejected(self, with_teacher, capacity):
        with pytest.raises(InvalidArgument, match="Capacity must be greater than 0"):
            with_teacher.create_course(ADMIN, "Math", "Description", TEACHER, capacity, T0)

    def test_unregistered_teacher_rejected(self, with_teacher):
        with pytest.raises(InvalidArgument, match="Invalid teacher address"):
            with_teacher.create_course(ADMIN, "Math", "Description", STRANGER, 30, T0)
        assert with_teacher.get_total_courses() == 0

    def test_non_admin_cannot_create(self, with_teacher):
        with pytest.raises(Unauthorized):
            with_teacher.create_course(TEACHER, "Math", "Description", TEACHER, 30, T0)

    def test_removed_teacher_cannot_be_assigned(self, with_teacher):
        with_teacher.remove_teacher(ADMIN, TEACHER, T0)
        with pytest.raises(InvalidArgument):
            with_teacher.create_course(ADMIN, "Math", "", TEACHER, 30, T0)


class TestGetCourse:

    @pytest.mark.parametrize("course_id", [0, 2, -1, None, True])
    def test_unknown_ids(self, with_teacher, course_id):
        with_teacher.create_course(ADMIN, "Math", "", TEACHER, 30, T0)
        with pytest.raises(NotFound):
            with_teacher.get_course(course_id)

    def test_totals(self, with_teacher):
        with_teacher.create_course(ADMIN, "Math", "Math course", TEACHER, 30, T0)
        with_teacher.create_course(ADMIN, "Science", "Science course", TEACHER, 30, T0)
        with_teacher.register_student(ADMIN, "Ahmad", 15, T0)
        with_teacher.register_student(ADMIN, "Fatimah", 16, T0)

        assert with_teacher.get_total_students() == 2
        assert with_teacher.get_total_courses() == 2
        assert with_teacher.get_total_grades() == 0
