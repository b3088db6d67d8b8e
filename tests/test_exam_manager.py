from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from exam_app.core.errors import AnswerPayloadError, ExamUnavailableError, NotFoundError


def test_open_exam_requires_active_exam(manager):
    exam = manager.create_exam("Draft", 5)
    with pytest.raises(ExamUnavailableError):
        manager.open_exam_for_student(exam.id)
    manager.toggle_exam(exam.id)
    assert manager.open_exam_for_student(exam.id).exam.id == exam.id


def test_malformed_payload_is_rejected_before_scoring(manager, active_exam):
    with pytest.raises(AnswerPayloadError):
        manager.submit_answers(active_exam.id, "Ada", "R-1", "[\"0\"]")
    assert manager.list_results() == []


def test_result_rows_survive_exam_deletion(manager, active_exam):
    outcome = manager.submit_answers(active_exam.id, "Ada", "R-1", "[0, 1, 2]")
    manager.delete_exam(active_exam.id)

    row, questions = manager.get_result_detail(outcome.result.id)
    assert row.exam_title is None
    assert questions == []
    assert row.result.score == 3


def test_missing_records_raise_not_found(manager):
    with pytest.raises(NotFoundError):
        manager.toggle_exam(5)
    with pytest.raises(NotFoundError):
        manager.get_result_detail(5)
    with pytest.raises(NotFoundError):
        manager.delete_question(5)


def test_seed_demo_exam_is_ready_to_take(manager):
    exam = manager.seed_demo_exam()
    snapshot = manager.open_exam_for_student(exam.id)
    assert exam.is_active
    assert len(snapshot.questions) == 3
    assert "```c" in snapshot.questions[0].text


def test_concurrent_submissions_keep_each_student_result(manager, active_exam):
    # Even students answer the key [0, 1, 2], odd students pick "d" everywhere.
    submissions = 400

    def submit(student: int):
        answers = "[0, 1, 2]" if student % 2 == 0 else "[3, 3, 3]"
        return student, manager.submit_answers(active_exam.id, f"Student {student}", f"R-{student}", answers)

    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(submit, range(submissions)))

    ids = [outcome.result.id for _, outcome in outcomes]
    assert len(set(ids)) == submissions
    for student, outcome in outcomes:
        assert outcome.result.student_name == f"Student {student}"
        assert outcome.result.student_roll == f"R-{student}"
        assert outcome.result.score == (3 if student % 2 == 0 else 0)
        assert outcome.result.total == 3

    stored = {row.result.id: row.result for row in manager.list_results()}
    assert len(stored) == submissions
    for student, outcome in outcomes:
        assert stored[outcome.result.id].student_name == f"Student {student}"
        assert stored[outcome.result.id].score == outcome.result.score


def test_concurrent_toggles_never_lose_a_flip(manager):
    exam = manager.create_exam("Toggled", 5)

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: manager.toggle_exam(exam.id), range(101)))

    assert manager.get_exam(exam.id).is_active is True
