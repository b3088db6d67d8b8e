"""Business logic shared between the admin API and the student endpoints."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from exam_app.core.answers_codec import decode_answers
from exam_app.core.errors import ExamUnavailableError, NotFoundError
from exam_app.core.models import Exam, Question, Result
from exam_app.core.results_exporter import results_to_csv
from exam_app.core.services.exam_repository import ExamRepository
from exam_app.core.services.scoring_service import ScoringService, SubmissionOutcome

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ExamWithQuestions:
    """Exam snapshot handed to a student at session start."""

    exam: Exam
    questions: list[Question]


@dataclass(slots=True)
class ResultRow:
    """Result joined with its exam's title (None once the exam is deleted)."""

    result: Result
    exam_title: str | None


class ExamManager:
    """Facade over the repository and the scoring service."""

    def __init__(self, repository: ExamRepository | None = None) -> None:
        self._repository = repository or ExamRepository()
        self._scoring = ScoringService(self._repository)

    # --- Exam administration ---

    def create_exam(self, title: str, duration_minutes: int) -> Exam:
        exam = self._repository.create_exam(title, duration_minutes)
        logger.info("Created exam %s (%r, %s min)", exam.id, exam.title, exam.duration_minutes)
        return exam

    def list_exams(self) -> list[Exam]:
        return self._repository.list_exams()

    def get_exam(self, exam_id: int) -> Exam:
        exam = self._repository.get_exam(exam_id)
        if exam is None:
            raise NotFoundError(f"Exam {exam_id} not found")
        return exam

    def toggle_exam(self, exam_id: int) -> Exam:
        updated = self._repository.toggle_exam_active(exam_id)
        logger.info("Exam %s is now %s", exam_id, "active" if updated.is_active else "inactive")
        return updated

    def delete_exam(self, exam_id: int) -> None:
        self._repository.delete_exam(exam_id)
        logger.info("Deleted exam %s and its questions", exam_id)

    def add_question(self, exam_id: int, text: str, choices: list[str], answer_index: int) -> Question:
        return self._repository.add_question(exam_id, text, choices, answer_index)

    def list_questions(self, exam_id: int) -> list[Question]:
        return self._repository.list_questions(exam_id)

    def delete_question(self, question_id: int) -> Question:
        return self._repository.delete_question(question_id)

    # --- Student flow ---

    def open_exam_for_student(self, exam_id: int) -> ExamWithQuestions:
        """Return the exam and its questions, or raise if it may not be taken."""
        exam = self._repository.get_exam(exam_id)
        if exam is None or not exam.is_active:
            raise ExamUnavailableError(exam_id)
        return ExamWithQuestions(exam=exam, questions=self._repository.list_questions(exam_id))

    def submit_answers(
        self,
        exam_id: int,
        student_name: str,
        student_roll: str,
        answers_json: str | None,
    ) -> SubmissionOutcome:
        """Decode the payload first so a malformed submission never touches storage."""
        answers = decode_answers(answers_json)
        return self._scoring.submit(exam_id, student_name, student_roll, answers)

    # --- Results ---

    def list_results(self) -> list[ResultRow]:
        rows = []
        for result in self._repository.list_results():
            exam = self._repository.get_exam(result.exam_id)
            rows.append(ResultRow(result=result, exam_title=exam.title if exam else None))
        return rows

    def get_result_detail(self, result_id: int) -> tuple[ResultRow, list[Question]]:
        result = self._repository.get_result(result_id)
        if result is None:
            raise NotFoundError(f"Result {result_id} not found")
        exam = self._repository.get_exam(result.exam_id)
        row = ResultRow(result=result, exam_title=exam.title if exam else None)
        return row, self._repository.list_questions(result.exam_id)

    def delete_result(self, result_id: int) -> None:
        self._repository.delete_result(result_id)
        logger.info("Deleted result %s", result_id)

    def export_results_csv(self) -> str:
        return results_to_csv(self._repository.list_results())

    # --- Demo data ---

    def seed_demo_exam(self) -> Exam:
        """Create a small active exam for local runs."""
        exam = self.create_exam("C Basics", 5)
        self.add_question(
            exam.id,
            "What does this print?\n\n```c\nint x = 5;\nprintf(\"%d\", x++ + 1);\n```",
            ["5", "6", "7", "Undefined"],
            1,
        )
        self.add_question(
            exam.id,
            "Which header declares `malloc`?",
            ["stdio.h", "string.h", "stdlib.h", "malloc.c"],
            2,
        )
        self.add_question(
            exam.id,
            "What is `sizeof(char)`?",
            ["1", "2", "4", "Depends on the platform"],
            0,
        )
        return self._repository.set_exam_active(exam.id, True)
