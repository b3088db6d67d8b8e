from __future__ import annotations

from datetime import datetime

import pytest

from exam_app.core.errors import ExamUnavailableError
from exam_app.core.services.exam_repository import ExamRepository
from exam_app.core.services.scoring_service import ScoringService, score_answers


@pytest.fixture
def repository() -> ExamRepository:
    return ExamRepository()


@pytest.fixture
def exam(repository: ExamRepository):
    exam = repository.create_exam("Scoring", 5)
    for index in range(3):
        repository.add_question(exam.id, f"Q{index}", ["a", "b", "c", "d"], index)
    return repository.set_exam_active(exam.id, True)


@pytest.mark.parametrize(
    "answers, expected",
    [
        ([0, 1, 2], 3),
        ([0, None, 2], 2),
        ([], 0),
        ([0], 1),
        ([1, 2, 3], 0),
        ([0, 1, 2, 3, 0], 3),
    ],
)
def test_score_scenarios(repository, exam, answers, expected):
    questions = repository.list_questions(exam.id)
    assert score_answers(questions, answers) == expected


def test_booleans_never_match(repository, exam):
    questions = repository.list_questions(exam.id)
    assert score_answers(questions, [False, True, None]) == 0


def test_submit_persists_one_result_per_call(repository, exam):
    service = ScoringService(repository)
    submitted_at = datetime(2024, 5, 1, 9, 30)

    first = service.submit(exam.id, "Ada", "R-1", [0, None, 2], submitted_at=submitted_at)
    second = service.submit(exam.id, "Ada", "R-1", [0, None, 2])

    assert first.redirect == f"/exams/{exam.id}/thankyou"
    assert first.result.score == 2
    assert first.result.total == 3
    assert first.result.answers == (0, None, 2)
    assert first.result.submitted_at == submitted_at
    assert second.result.id != first.result.id
    assert len(repository.list_results()) == 2


def test_submit_to_inactive_or_missing_exam_is_rejected(repository, exam):
    service = ScoringService(repository)
    repository.set_exam_active(exam.id, False)

    with pytest.raises(ExamUnavailableError):
        service.submit(exam.id, "Ada", "R-1", [0, 1, 2])
    with pytest.raises(ExamUnavailableError):
        service.submit(999, "Ada", "R-1", [0])
    assert repository.list_results() == []


def test_exam_without_questions_scores_zero_of_zero(repository):
    exam = repository.create_exam("Empty", 5)
    repository.set_exam_active(exam.id, True)
    outcome = ScoringService(repository).submit(exam.id, "Ada", "R-1", [])
    assert (outcome.result.score, outcome.result.total) == (0, 0)


@pytest.mark.parametrize(
    "answer_key",
    [
        [],
        [2],
        [3, 0],
        [1, 1, 1, 1],
        [0, 3, 2, 1, 0, 2, 3],
    ],
)
def test_correct_answers_score_total_and_wrong_answers_score_zero(repository, answer_key):
    exam = repository.create_exam("Key", 5)
    for index, answer in enumerate(answer_key):
        repository.add_question(exam.id, f"Q{index}", ["a", "b", "c", "d"], answer)
    questions = repository.list_questions(exam.id)
    wrong = [(answer + 1) % 4 for answer in answer_key]

    assert score_answers(questions, list(answer_key)) == len(answer_key)
    assert score_answers(questions, wrong) == 0
    assert score_answers(questions, [None] * len(answer_key)) == 0
