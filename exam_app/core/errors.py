"""Exceptions raised by the exam core and translated at the HTTP boundary."""

from __future__ import annotations


class ExamAppError(Exception):
    """Base class for exam application errors."""


class NotFoundError(ExamAppError):
    """Raised when an exam, question or result id does not exist."""


class ExamUnavailableError(ExamAppError):
    """Raised when an exam is missing or not active for students."""

    def __init__(self, exam_id: int) -> None:
        super().__init__(f"Exam {exam_id} is not available")
        self.exam_id = exam_id


class AnswerPayloadError(ExamAppError):
    """Raised when a submitted answers payload cannot be decoded."""
