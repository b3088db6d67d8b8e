"""Shared fixtures for the exam application tests."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from exam_app.core.exam_manager import ExamManager
from exam_app.server.api_server import create_api_app

ADMIN_PASSWORD = "s3cret"


@pytest.fixture
def manager() -> ExamManager:
    return ExamManager()


@pytest.fixture
def active_exam(manager: ExamManager):
    """Active three-question exam whose answer key is [0, 1, 2]."""
    exam = manager.create_exam("Pointers", 10)
    for index in range(3):
        manager.add_question(exam.id, f"Question {index + 1}", ["a", "b", "c", "d"], index)
    manager.toggle_exam(exam.id)
    return exam


@pytest.fixture
def client(manager: ExamManager) -> TestClient:
    app = create_api_app(manager, admin_password=ADMIN_PASSWORD)
    return TestClient(app)


@pytest.fixture
def admin_client(client: TestClient) -> TestClient:
    response = client.post("/admin/login", data={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return client
