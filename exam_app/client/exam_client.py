"""HTTP client used by the desktop kiosk to talk to the exam server."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time
from typing import Sequence

import httpx

from exam_app.constants.network_constants import AJAX_HEADER, AJAX_HEADER_VALUE, REQUEST_TIMEOUT_SECONDS
from exam_app.core.answers_codec import encode_answers
from exam_app.core.errors import ExamAppError, ExamUnavailableError

logger = logging.getLogger(__name__)


class ExamFetchError(ExamAppError):
    """Raised when the exam cannot be loaded from the server."""


class SubmissionError(ExamAppError):
    """Raised when the submission round-trip fails; the user may retry."""


@dataclass(slots=True)
class StudentQuestion:
    """Question as served to students (no answer key)."""

    id: int
    text: str
    html: str
    choices: list[str]


@dataclass(slots=True)
class StudentExam:
    id: int
    title: str
    duration_minutes: int
    questions: list[StudentQuestion]


class ExamClient:
    """Fetches an exam once at session start and posts the final answers."""

    def __init__(
        self,
        base_url: str,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def close(self) -> None:
        self._client.close()

    def wait_until_ready(self, attempts: int = 50, delay_seconds: float = 0.1) -> bool:
        """Poll the landing page until the server answers; used when it starts in-process."""
        for _ in range(attempts):
            try:
                self._client.get("/")
            except httpx.TransportError:
                time.sleep(delay_seconds)
                continue
            return True
        return False

    def fetch_exam(self, exam_id: int) -> StudentExam:
        try:
            response = self._client.get(f"/api/exams/{exam_id}")
        except httpx.HTTPError as exc:
            raise ExamFetchError(f"Could not reach the exam server: {exc}") from exc
        if response.status_code == 404:
            raise ExamUnavailableError(exam_id)
        try:
            response.raise_for_status()
            data = response.json()
            exam = data["exam"]
            return StudentExam(
                id=exam["id"],
                title=exam["title"],
                duration_minutes=exam["duration_minutes"],
                questions=[
                    StudentQuestion(id=q["id"], text=q["text"], html=q["html"], choices=list(q["choices"]))
                    for q in data["questions"]
                ],
            )
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.warning("Loading exam %s failed: %s", exam_id, exc)
            raise ExamFetchError(f"Could not load exam {exam_id}: {exc}") from exc

    def submit(self, exam_id: int, name: str, roll: str, answers: Sequence[int | None]) -> str:
        """Post the answers and return the redirect target."""
        try:
            response = self._client.post(
                f"/exams/{exam_id}/submit",
                data={"name": name, "roll": roll, "answersJson": encode_answers(list(answers))},
                headers={AJAX_HEADER: AJAX_HEADER_VALUE},
            )
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Submission for exam %s failed: %s", exam_id, exc)
            raise SubmissionError(str(exc)) from exc
        redirect = payload.get("redirect")
        if not redirect:
            raise SubmissionError("Server did not return a redirect target.")
        return redirect
