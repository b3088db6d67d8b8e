"""Service for storing exams, their questions and submitted results."""

from __future__ import annotations

from datetime import datetime
from threading import Lock

from exam_app.constants.exam_constants import CHOICES_PER_QUESTION
from exam_app.core.errors import NotFoundError
from exam_app.core.models import Exam, Question, Result


class ExamRepository:
    """In-memory store for exams, questions and results.

    Every public method takes the internal lock, so concurrent submissions from
    different request threads each get their own atomic insert.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._exams: dict[int, Exam] = {}
        self._questions: dict[int, Question] = {}
        self._results: dict[int, Result] = {}
        self._exam_counter: int = 0
        self._question_counter: int = 0
        self._result_counter: int = 0

    # --- Exams ---

    def create_exam(self, title: str, duration_minutes: int) -> Exam:
        cleaned_title = title.strip()
        if not cleaned_title:
            raise ValueError("Exam title must not be empty.")
        duration = self._normalize_duration(duration_minutes)
        with self._lock:
            self._exam_counter += 1
            exam = Exam(id=self._exam_counter, title=cleaned_title, duration_minutes=duration)
            self._exams[exam.id] = exam
            return exam

    def get_exam(self, exam_id: int) -> Exam | None:
        with self._lock:
            return self._exams.get(exam_id)

    def list_exams(self) -> list[Exam]:
        """Return all exams, newest first."""
        with self._lock:
            return sorted(self._exams.values(), key=lambda e: (e.created_at, e.id), reverse=True)

    def set_exam_active(self, exam_id: int, is_active: bool) -> Exam:
        with self._lock:
            exam = self._require_exam(exam_id)
            exam.is_active = is_active
            return exam

    def toggle_exam_active(self, exam_id: int) -> Exam:
        """Flip the active flag under the lock and return the exam."""
        with self._lock:
            exam = self._require_exam(exam_id)
            exam.is_active = not exam.is_active
            return exam

    def delete_exam(self, exam_id: int) -> None:
        """Delete an exam together with all of its questions."""
        with self._lock:
            self._require_exam(exam_id)
            del self._exams[exam_id]
            orphaned = [qid for qid, q in self._questions.items() if q.exam_id == exam_id]
            for qid in orphaned:
                del self._questions[qid]

    # --- Questions ---

    def add_question(self, exam_id: int, text: str, choices: list[str], answer_index: int) -> Question:
        cleaned_text = text.strip()
        if not cleaned_text:
            raise ValueError("Question text must not be empty.")
        cleaned_choices = self._validate_choices(choices)
        if isinstance(answer_index, bool) or not 0 <= answer_index < CHOICES_PER_QUESTION:
            raise ValueError("Correct choice index must be between 0 and 3.")
        with self._lock:
            self._require_exam(exam_id)
            self._question_counter += 1
            question = Question(
                id=self._question_counter,
                exam_id=exam_id,
                text=cleaned_text,
                choices=cleaned_choices,
                answer_index=answer_index,
            )
            self._questions[question.id] = question
            return question

    def list_questions(self, exam_id: int) -> list[Question]:
        """Return the exam's questions in stored (insertion) order."""
        with self._lock:
            return [q for q in self._questions.values() if q.exam_id == exam_id]

    def delete_question(self, question_id: int) -> Question:
        with self._lock:
            question = self._questions.pop(question_id, None)
            if question is None:
                raise NotFoundError(f"Question {question_id} not found")
            return question

    # --- Results ---

    def insert_result(
        self,
        exam_id: int,
        student_name: str,
        student_roll: str,
        answers: list[int | None],
        score: int,
        total: int,
        submitted_at: datetime,
    ) -> Result:
        with self._lock:
            self._result_counter += 1
            result = Result(
                id=self._result_counter,
                exam_id=exam_id,
                student_name=student_name,
                student_roll=student_roll,
                answers=tuple(answers),
                score=score,
                total=total,
                submitted_at=submitted_at,
            )
            self._results[result.id] = result
            return result

    def get_result(self, result_id: int) -> Result | None:
        with self._lock:
            return self._results.get(result_id)

    def list_results(self) -> list[Result]:
        """Return all results, most recent submission first."""
        with self._lock:
            return sorted(self._results.values(), key=lambda r: (r.submitted_at, r.id), reverse=True)

    def delete_result(self, result_id: int) -> None:
        with self._lock:
            if self._results.pop(result_id, None) is None:
                raise NotFoundError(f"Result {result_id} not found")

    def _require_exam(self, exam_id: int) -> Exam:
        exam = self._exams.get(exam_id)
        if exam is None:
            raise NotFoundError(f"Exam {exam_id} not found")
        return exam

    @staticmethod
    def _validate_choices(choices: list[str]) -> list[str]:
        if len(choices) != CHOICES_PER_QUESTION:
            raise ValueError("Each question must have exactly four choices.")
        cleaned = [choice.strip() for choice in choices]
        if any(not choice for choice in cleaned):
            raise ValueError("Choice text cannot be empty.")
        return cleaned

    @staticmethod
    def _normalize_duration(duration_minutes: int) -> int:
        if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
            raise ValueError("Duration must be provided as an integer number of minutes.")
        if duration_minutes <= 0:
            raise ValueError("Duration must be a positive integer.")
        return duration_minutes
