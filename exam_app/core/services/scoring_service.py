"""Service that scores a submission against the stored answer keys."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Sequence

from exam_app.core.errors import ExamUnavailableError
from exam_app.core.models import Question, Result
from exam_app.core.services.exam_repository import ExamRepository

logger = logging.getLogger(__name__)


def confirmation_url(exam_id: int) -> str:
    return f"/exams/{exam_id}/thankyou"


def score_answers(questions: Sequence[Question], answers: Sequence[int | None]) -> int:
    """Count positions where the submitted index equals the stored answer index.

    Positions past the end of ``answers`` and ``None`` entries never match.
    """
    score = 0
    for position, question in enumerate(questions):
        if position >= len(answers):
            break
        selected = answers[position]
        if selected is None or isinstance(selected, bool):
            continue
        if selected == question.answer_index:
            score += 1
    return score


@dataclass(frozen=True, slots=True)
class SubmissionOutcome:
    """Persisted result plus where the student should be sent next."""

    result: Result
    redirect: str


class ScoringService:
    """Recomputes scores server-side and records one result per call."""

    def __init__(self, repository: ExamRepository) -> None:
        self._repository = repository

    def submit(
        self,
        exam_id: int,
        student_name: str,
        student_roll: str,
        answers: Sequence[int | None],
        submitted_at: datetime | None = None,
    ) -> SubmissionOutcome:
        exam = self._repository.get_exam(exam_id)
        if exam is None or not exam.is_active:
            raise ExamUnavailableError(exam_id)

        questions = self._repository.list_questions(exam_id)
        score = score_answers(questions, answers)
        result = self._repository.insert_result(
            exam_id=exam_id,
            student_name=student_name,
            student_roll=student_roll,
            answers=list(answers),
            score=score,
            total=len(questions),
            submitted_at=submitted_at or datetime.utcnow(),
        )
        logger.info(
            "Recorded result %s for exam %s (%s/%s) from %r",
            result.id,
            exam_id,
            score,
            result.total,
            student_roll,
        )
        return SubmissionOutcome(result=result, redirect=confirmation_url(exam_id))
