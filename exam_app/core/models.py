"""Domain models for the exam application."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class Exam:
    """Timed assessment; only active exams can be taken by students."""

    id: int
    title: str
    duration_minutes: int
    is_active: bool = False
    created_at: datetime = field(default_factory=datetime.utcnow)


@dataclass(slots=True)
class Question:
    """Multiple-choice question with exactly four choices."""

    id: int
    exam_id: int
    text: str
    choices: list[str]
    answer_index: int


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of one submission. Never modified after creation."""

    id: int
    exam_id: int
    student_name: str
    student_roll: str
    answers: tuple[int | None, ...]
    score: int
    total: int
    submitted_at: datetime
