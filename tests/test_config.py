"""Tests for settings loading and platform wiring."""

import json

import pytest

from registrar.config import RegistrarSettings, load_settings
from registrar.core.exceptions import ConfigurationError
from registrar.main import RegistrarPlatform
from registrar.services import LedgerService

from conftest import ADMIN, T0, TEACHER


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in ("ADMIN_IDENTITY", "EVENT_STORE_TYPE", "EVENT_STORE_PATH", "SNAPSHOT_PATH",
                "REST_HOST", "REST_PORT", "LOG_LEVEL", "LOG_FORMAT"):
        monkeypatch.delenv(f"REGISTRAR_{key}", raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:

    def test_defaults(self):
        settings = load_settings()
        assert settings.admin_identity == "admin"
        assert settings.event_store_type == "memory"
        assert settings.snapshot_path is None
        assert settings.rest_port == 8000
        assert settings.log_format == "text"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("REGISTRAR_ADMIN_IDENTITY", "registrar-office")
        monkeypatch.setenv("REGISTRAR_LOG_LEVEL", "debug")
        settings = load_settings()
        assert settings.admin_identity == "registrar-office"
        assert settings.log_level == "DEBUG"

    def test_config_file_overrides_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("REGISTRAR_REST_PORT", "9000")
        path = tmp_path / "registrar.json"
        path.write_text(json.dumps({'rest_port': 9100, 'event_store_type': "file"}), encoding="utf-8")

        settings = load_settings(str(path))
        assert settings.rest_port == 9100
        assert settings.event_store_type == "file"

    def test_explicit_overrides_win(self, tmp_path):
        path = tmp_path / "registrar.json"
        path.write_text(json.dumps({'rest_port': 9100}), encoding="utf-8")
        assert load_settings(str(path), rest_port=9200, rest_host=None).rest_port == 9200

    def test_blank_admin(self):
        with pytest.raises(ConfigurationError):
            load_settings(admin_identity="   ")

    def test_unknown_store_type(self):
        with pytest.raises(ConfigurationError):
            load_settings(event_store_type="sqlite")

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read config file"):
            load_settings(str(tmp_path / "missing.json"))


class TestPlatform:

    def test_memory_platform(self):
        platform = RegistrarPlatform(RegistrarSettings(admin_identity=ADMIN))
        assert platform.ledger.admin == ADMIN
        assert platform.save_snapshot() is False

    def test_snapshot_restored_on_start(self, tmp_path):
        settings = RegistrarSettings(
            admin_identity=ADMIN,
            event_store_type="file",
            event_store_path=str(tmp_path / "events"),
            snapshot_path=str(tmp_path / "ledger.json"),
        )
        first = RegistrarPlatform(settings)
        first.ledger.add_teacher(ADMIN, TEACHER, T0)
        first.ledger.register_student(ADMIN, "Ahmad", 15, T0)
        assert first.save_snapshot() is True

        second = RegistrarPlatform(settings)
        assert isinstance(second.ledger, LedgerService)
        assert second.ledger.get_student(1).name == "Ahmad"
        assert second.ledger.is_teacher(TEACHER)
        assert len(second.event_service.get_events("teachers")) == 1

    def test_demo(self):
        platform = RegistrarPlatform(RegistrarSettings(admin_identity=ADMIN))
        platform.run_demo()
        assert platform.ledger.get_student_grade_for_course(1, 1)[0] == 85
        assert platform.ledger.get_course(1).enrolled_count == 2
