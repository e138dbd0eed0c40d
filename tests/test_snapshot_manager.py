"""Tests for ledger snapshots."""

import json

import pytest

from registrar.core.exceptions import AlreadyEnrolled, PersistenceError
from registrar.persistence import SnapshotManager

from conftest import ADMIN, T0, TEACHER


class TestSnapshotManager:

    def test_save_and_load(self, enrolled, tmp_path):
        enrolled.assign_grade(TEACHER, 1, 1, 85, "Good work!", T0 + 5)
        manager = SnapshotManager(str(tmp_path / "snap" / "ledger.json"))
        assert not manager.exists()

        manager.save(enrolled)
        assert manager.exists()

        restored = manager.load()
        assert restored.export_state() == enrolled.export_state()
        assert restored.get_student_grade_for_course(1, 1) == (85, "Good work!", T0 + 5)
        assert restored.is_teacher(TEACHER)
        with pytest.raises(AlreadyEnrolled):
            restored.enroll_student_in_course(ADMIN, 1, 1, T0)

    def test_save_replaces_previous(self, staffed, tmp_path):
        manager = SnapshotManager(str(tmp_path / "ledger.json"))
        manager.save(staffed)
        staffed.register_student(ADMIN, "Fatimah", 16, T0)
        manager.save(staffed)

        assert manager.load().get_total_students() == 2
        assert not (tmp_path / "ledger.json.tmp").exists()

    def test_missing_file(self, tmp_path):
        with pytest.raises(PersistenceError):
            SnapshotManager(str(tmp_path / "absent.json")).load()

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(PersistenceError):
            SnapshotManager(str(path)).load()

    def test_unsupported_format(self, staffed, tmp_path):
        path = tmp_path / "ledger.json"
        manager = SnapshotManager(str(path))
        manager.save(staffed)

        snapshot = json.loads(path.read_text(encoding="utf-8"))
        snapshot['state']['format_version'] = 99
        path.write_text(json.dumps(snapshot), encoding="utf-8")

        with pytest.raises(PersistenceError, match="Unsupported snapshot format"):
            manager.load()

    def test_missing_section(self, staffed, tmp_path):
        path = tmp_path / "ledger.json"
        manager = SnapshotManager(str(path))
        manager.save(staffed)

        snapshot = json.loads(path.read_text(encoding="utf-8"))
        del snapshot['state']['grades']
        path.write_text(json.dumps(snapshot), encoding="utf-8")

        with pytest.raises(PersistenceError, match="Corrupt snapshot"):
            manager.load()
