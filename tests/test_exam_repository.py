from __future__ import annotations

from datetime import datetime, timedelta

import pytest

from exam_app.core.errors import NotFoundError
from exam_app.core.services.exam_repository import ExamRepository


def test_new_exams_start_inactive_and_list_newest_first():
    repository = ExamRepository()
    first = repository.create_exam("First", 10)
    second = repository.create_exam("  Second  ", 20)

    assert not first.is_active
    assert second.title == "Second"
    assert [exam.id for exam in repository.list_exams()] == [second.id, first.id]


@pytest.mark.parametrize("title, duration", [("", 10), ("   ", 10), ("Exam", 0), ("Exam", -5), ("Exam", True)])
def test_create_exam_validation(title, duration):
    with pytest.raises(ValueError):
        ExamRepository().create_exam(title, duration)


def test_questions_keep_insertion_order():
    repository = ExamRepository()
    exam = repository.create_exam("Order", 5)
    other = repository.create_exam("Other", 5)
    repository.add_question(exam.id, "one", ["a", "b", "c", "d"], 0)
    repository.add_question(other.id, "elsewhere", ["a", "b", "c", "d"], 1)
    repository.add_question(exam.id, "two", ["a", "b", "c", "d"], 3)

    assert [q.text for q in repository.list_questions(exam.id)] == ["one", "two"]


@pytest.mark.parametrize(
    "text, choices, answer_index",
    [
        ("", ["a", "b", "c", "d"], 0),
        ("q", ["a", "b", "c"], 0),
        ("q", ["a", "b", "c", " "], 0),
        ("q", ["a", "b", "c", "d"], 4),
        ("q", ["a", "b", "c", "d"], -1),
    ],
)
def test_add_question_validation(text, choices, answer_index):
    repository = ExamRepository()
    exam = repository.create_exam("Validation", 5)
    with pytest.raises(ValueError):
        repository.add_question(exam.id, text, choices, answer_index)


def test_add_question_to_missing_exam():
    with pytest.raises(NotFoundError):
        ExamRepository().add_question(42, "q", ["a", "b", "c", "d"], 0)


def test_deleting_exam_cascades_to_questions():
    repository = ExamRepository()
    exam = repository.create_exam("Cascade", 5)
    repository.add_question(exam.id, "q1", ["a", "b", "c", "d"], 0)
    repository.add_question(exam.id, "q2", ["a", "b", "c", "d"], 1)

    repository.delete_exam(exam.id)

    assert repository.get_exam(exam.id) is None
    assert repository.list_questions(exam.id) == []
    with pytest.raises(NotFoundError):
        repository.delete_exam(exam.id)


def test_results_are_listed_newest_first_and_deletable():
    repository = ExamRepository()
    now = datetime(2024, 1, 1, 12, 0)
    older = repository.insert_result(1, "A", "1", [0], 1, 1, now)
    newer = repository.insert_result(1, "B", "2", [None], 0, 1, now + timedelta(minutes=5))

    assert [r.id for r in repository.list_results()] == [newer.id, older.id]

    repository.delete_result(older.id)
    assert repository.get_result(older.id) is None
    with pytest.raises(NotFoundError):
        repository.delete_result(older.id)
