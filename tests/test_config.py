from __future__ import annotations

import pytest

from exam_app.config import load_settings


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("EXAM_ADMIN_PASSWORD", " pw ")
    monkeypatch.setenv("EXAM_PORT", "9001")
    monkeypatch.setenv("EXAM_SERVER_URL", "http://exams.local/")
    monkeypatch.setenv("EXAM_DEMO_DATA", "yes")

    settings = load_settings()

    assert settings.admin_password == "pw"
    assert settings.port == 9001
    assert settings.server_url == "http://exams.local"
    assert settings.seed_demo_data is True


def test_blank_password_disables_admin(monkeypatch):
    monkeypatch.setenv("EXAM_ADMIN_PASSWORD", "   ")
    assert load_settings().admin_password is None


def test_invalid_port_is_reported(monkeypatch):
    monkeypatch.setenv("EXAM_PORT", "eighty")
    with pytest.raises(ValueError):
        load_settings()
