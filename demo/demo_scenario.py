#!/usr/bin/env python3
"""
Demo scenario for the Registrar ledger.
"""

import os
import sys
import tempfile
import threading
import time

# Add the project root to the Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from registrar.config import RegistrarSettings
from registrar.core.exceptions import RegistrarError
from registrar.logging_setup import setup_logging
from registrar.main import RegistrarPlatform
from registrar.persistence import SnapshotManager

ADMIN = "admin"
TEACHER = "teacher-1"
OTHER_TEACHER = "teacher-2"


def run_demo():
    """Run a walk-through of the Registrar ledger."""
    print("=" * 60)
    print("REGISTRAR ACADEMIC LEDGER - DEMO")
    print("=" * 60)

    workdir = tempfile.mkdtemp(prefix="registrar_demo_")
    settings = RegistrarSettings(
        admin_identity=ADMIN,
        event_store_type="file",
        event_store_path=os.path.join(workdir, "events"),
        snapshot_path=os.path.join(workdir, "snapshot.json"),
    )
    platform = RegistrarPlatform(settings)

    try:
        print("\n1. Creating sample data...")
        create_sample_data(platform)

        print("\n2. Demonstrating enrollment...")
        demonstrate_enrollment(platform)

        print("\n3. Demonstrating grading...")
        demonstrate_grading(platform)

        print("\n4. Demonstrating concurrency control...")
        demonstrate_concurrency(platform)

        print("\n5. Demonstrating the event log...")
        demonstrate_events(platform)

        print("\n6. Demonstrating snapshots...")
        demonstrate_snapshots(platform, settings.snapshot_path)

        print("\n" + "=" * 60)
        print("DEMO COMPLETED SUCCESSFULLY!")
        print(f"Artifacts in {workdir}")
        print("=" * 60)

    except RegistrarError as e:
        print(f"\nDemo failed with error: {e.error_code}: {e.message}")
        raise


def now() -> int:
    return int(time.time())


def attempt(label, func, *args):
    """Run a ledger call and print how it ended."""
    try:
        result = func(*args)
        print(f"    {label}: ok ({result})")
        return result
    except RegistrarError as e:
        print(f"    {label}: {e.error_code} - {e.message}")
        return None


def create_sample_data(platform):
    ledger = platform.ledger
    ledger.add_teacher(ADMIN, TEACHER, now())
    ledger.add_teacher(ADMIN, OTHER_TEACHER, now())

    for name, age in [("Ahmad", 15), ("Fatimah", 16), ("Ali", 14)]:
        student_id = ledger.register_student(ADMIN, name, age, now())
        print(f"  Registered {name} as student {student_id}")

    math = ledger.create_course(ADMIN, "Mathematics", "Advanced Math Course", TEACHER, 2, now())
    science = ledger.create_course(ADMIN, "Science", "Science course", OTHER_TEACHER, 30, now())
    print(f"  Created courses {math} (capacity 2) and {science} (capacity 30)")

    attempt("Student with empty name", ledger.register_student, ADMIN, "", 15, now())
    attempt("Student aged 3", ledger.register_student, ADMIN, "Zaid", 3, now())
    attempt("Course taught by a non-teacher", ledger.create_course, ADMIN, "Art", "", "stranger", 10, now())


def demonstrate_enrollment(platform):
    ledger = platform.ledger
    attempt("Enroll 1 in 1", ledger.enroll_student_in_course, ADMIN, 1, 1, now())
    attempt("Enroll 1 in 1 again", ledger.enroll_student_in_course, ADMIN, 1, 1, now())
    attempt("Enroll 2 in 1", ledger.enroll_student_in_course, ADMIN, 2, 1, now())
    attempt("Enroll 3 in 1 (full)", ledger.enroll_student_in_course, ADMIN, 3, 1, now())
    attempt("Enroll 1 in 2", ledger.enroll_student_in_course, ADMIN, 1, 2, now())

    course = ledger.get_course(1)
    print(f"  Course 1 enrolled {course.enrolled_count}/{course.capacity}")
    print(f"  Student 1 takes {ledger.get_student_course_count(1)} courses")


def demonstrate_grading(platform):
    ledger = platform.ledger
    attempt("Teacher grades student 1", ledger.assign_grade, TEACHER, 1, 1, 85, "Good work!", now())
    attempt("Other teacher grades student 1", ledger.assign_grade, OTHER_TEACHER, 1, 1, 70, "Hmm", now())
    attempt("Score 101", ledger.assign_grade, TEACHER, 1, 1, 101, "Too high!", now())
    attempt("Grade unenrolled student 3", ledger.assign_grade, TEACHER, 3, 1, 60, "", now())
    attempt("Admin regrades student 1", ledger.assign_grade, ADMIN, 1, 1, 90, "Excellent!", now())

    score, remarks, _ = ledger.get_student_grade_for_course(1, 1)
    print(f"  Current grade for (1, 1): {score} '{remarks}'")
    print(f"  Original grade 1 still reads {ledger.get_grade(1).score}")


def demonstrate_concurrency(platform):
    ledger = platform.ledger
    course_id = ledger.create_course(ADMIN, "Seminar", "Small group", TEACHER, 5, now())
    student_ids = [ledger.register_student(ADMIN, f"Student {i}", 18, now()) for i in range(12)]
    outcomes = {"enrolled": 0, "rejected": 0}
    outcomes_lock = threading.Lock()

    def enroll(student_id):
        try:
            ledger.enroll_student_in_course(ADMIN, student_id, course_id, now())
            key = "enrolled"
        except RegistrarError:
            key = "rejected"
        with outcomes_lock:
            outcomes[key] += 1

    threads = [threading.Thread(target=enroll, args=(sid,)) for sid in student_ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    course = ledger.get_course(course_id)
    print(f"  12 concurrent enrollments into capacity 5: {outcomes}")
    print(f"  Seminar enrolled {course.enrolled_count}/{course.capacity}")


def demonstrate_events(platform):
    events = platform.event_service.get_events("course_1")
    for event in events:
        print(f"    {event.event_type.value}: {event.event_data}")
    print(f"  Event statistics: {platform.event_service.get_processing_statistics()}")


def demonstrate_snapshots(platform, snapshot_path):
    platform.save_snapshot()
    restored = SnapshotManager(snapshot_path).load()
    print(f"  Restored totals: {restored.get_statistics()}")
    print(f"  Restored grade for (1, 1): {restored.get_student_grade_for_course(1, 1)}")


if __name__ == "__main__":
    setup_logging("WARNING")
    run_demo()
