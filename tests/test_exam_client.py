from __future__ import annotations

from urllib.parse import parse_qs

import httpx
import pytest

from exam_app.client.exam_client import ExamClient, ExamFetchError, SubmissionError
from exam_app.core.errors import ExamAppError, ExamUnavailableError


def _client(handler) -> ExamClient:
    return ExamClient("http://exam.test", transport=httpx.MockTransport(handler))


def test_fetch_exam_parses_student_view():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/exams/4"
        return httpx.Response(
            200,
            json={
                "exam": {"id": 4, "title": "Arrays", "duration_minutes": 20, "is_active": True},
                "questions": [{"id": 1, "text": "Q", "html": "<p>Q</p>", "choices": ["a", "b", "c", "d"]}],
            },
        )

    exam = _client(handler).fetch_exam(4)
    assert exam.title == "Arrays"
    assert exam.duration_minutes == 20
    assert exam.questions[0].choices == ["a", "b", "c", "d"]


def test_fetch_unavailable_exam_raises():
    client = _client(lambda request: httpx.Response(404, json={"detail": "nope"}))
    with pytest.raises(ExamUnavailableError):
        client.fetch_exam(9)


def test_submit_posts_form_fields_and_returns_redirect():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["headers"] = request.headers
        captured["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"ok": True, "redirect": "/exams/4/thankyou"})

    redirect = _client(handler).submit(4, "Ada", "R-1", [0, None])

    assert redirect == "/exams/4/thankyou"
    assert captured["headers"]["x-requested-with"] == "XMLHttpRequest"
    assert captured["form"]["answersJson"] == ["[0, null]"]
    assert captured["form"]["roll"] == ["R-1"]
    assert "score" not in captured["form"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"ok": False, "detail": "Submission failed"}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"ok": False}),
    ],
)
def test_submit_failures_raise_submission_error(response):
    client = _client(lambda request: response)
    with pytest.raises(SubmissionError):
        client.submit(4, "Ada", "R-1", [0])


def test_transport_errors_raise_submission_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    with pytest.raises(SubmissionError):
        _client(handler).submit(4, "Ada", "R-1", [0])


def test_server_error_while_fetching_is_an_app_error():
    client = _client(lambda request: httpx.Response(500, text="boom"))
    with pytest.raises(ExamFetchError) as excinfo:
        client.fetch_exam(3)
    assert isinstance(excinfo.value, ExamAppError)


def test_unreachable_server_while_fetching_is_an_app_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ExamFetchError):
        _client(handler).fetch_exam(3)


def test_malformed_exam_body_is_an_app_error():
    client = _client(lambda request: httpx.Response(200, json={"questions": []}))
    with pytest.raises(ExamFetchError):
        client.fetch_exam(3)
