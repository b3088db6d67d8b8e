"""State machine for a single student's exam attempt.

Every transition is a plain function that takes the current ``Session`` and
returns the next ``Session`` together with the side effects the host must
carry out (start a ticker, send the submission, navigate, ...). Hosts such as
the Qt kiosk own an ``ExamSessionController`` which keeps the current session
and forwards the effects, so the rules themselves can be tested without a UI.

Lifecycle::

    NOT_STARTED -> IN_PROGRESS -> SUBMITTING -> TERMINATED

``submitted`` is set in the same transition that enters SUBMITTING. Every
timer and integrity transition checks the state first, so once a submission
has been triggered nothing else can trigger another one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum, auto
import logging
from typing import Callable, Union

from exam_app.constants.exam_constants import (
    CHOICES_PER_QUESTION,
    REASON_MANUAL_SUBMIT,
    REASON_TIME_UP,
    REASON_TOO_MANY_WARNINGS,
    SUBMISSION_FAILED_MESSAGE,
    TICK_INTERVAL_MS,
    WARNING_LIMIT,
    WARNING_TEMPLATE,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle phase of an exam attempt."""

    NOT_STARTED = auto()
    IN_PROGRESS = auto()
    SUBMITTING = auto()
    TERMINATED = auto()


@dataclass(frozen=True, slots=True)
class Session:
    """Client-held state of one attempt. Never persisted."""

    exam_id: int
    duration_minutes: int
    question_count: int
    answers: tuple[int | None, ...]
    state: SessionState = SessionState.NOT_STARTED
    student_name: str = ""
    student_roll: str = ""
    started_at: datetime | None = None
    remaining_seconds: int = 0
    warning_count: int = 0
    submitted: bool = False
    submit_reason: str | None = None
    submission_in_flight: bool = False
    last_error: str | None = None


# --- Side effects ---


@dataclass(frozen=True, slots=True)
class RequestFullscreen:
    """Ask the host to enter fullscreen. Best effort; refusal is not an error."""


@dataclass(frozen=True, slots=True)
class StartTicker:
    interval_ms: int


@dataclass(frozen=True, slots=True)
class StopTicker:
    pass


@dataclass(frozen=True, slots=True)
class ShowTime:
    display: str


@dataclass(frozen=True, slots=True)
class ShowWarning:
    count: int
    limit: int
    message: str


@dataclass(frozen=True, slots=True)
class SendSubmission:
    """Single network call carrying the final answers. No score is ever sent."""

    exam_id: int
    student_name: str
    student_roll: str
    answers: tuple[int | None, ...]
    reason: str


@dataclass(frozen=True, slots=True)
class NavigateTo:
    url: str


@dataclass(frozen=True, slots=True)
class ShowError:
    message: str


Effect = Union[
    RequestFullscreen,
    StartTicker,
    StopTicker,
    ShowTime,
    ShowWarning,
    SendSubmission,
    NavigateTo,
    ShowError,
]
Transition = tuple[Session, list[Effect]]


# --- Helpers ---


def format_remaining(seconds: int) -> str:
    """Render seconds as ``M:SS`` with unpadded minutes; negatives show ``0:00``."""
    seconds = max(0, seconds)
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def collect_answers(question_count: int, read_choice: Callable[[int], int | None]) -> list[int | None]:
    """Read the selected choice for every question in order.

    Unanswered or out-of-range selections become ``None``; the result always has
    exactly ``question_count`` entries.
    """
    answers: list[int | None] = []
    for index in range(max(0, question_count)):
        choice = read_choice(index)
        if isinstance(choice, bool) or not isinstance(choice, int):
            choice = None
        elif not 0 <= choice < CHOICES_PER_QUESTION:
            choice = None
        answers.append(choice)
    return answers


def new_session(exam_id: int, duration_minutes: int, question_count: int) -> Session:
    if duration_minutes <= 0:
        raise ValueError("Exam duration must be positive.")
    if question_count < 0:
        raise ValueError("Question count cannot be negative.")
    return Session(
        exam_id=exam_id,
        duration_minutes=duration_minutes,
        question_count=question_count,
        answers=(None,) * question_count,
    )


def _accepts_activity(session: Session) -> bool:
    return session.state is SessionState.IN_PROGRESS and not session.submitted


# --- Transitions ---


def start_session(
    session: Session,
    student_name: str,
    student_roll: str,
    now: datetime | None = None,
) -> Transition:
    if session.state is not SessionState.NOT_STARTED:
        return session, []
    remaining = session.duration_minutes * 60
    started = replace(
        session,
        state=SessionState.IN_PROGRESS,
        student_name=student_name.strip(),
        student_roll=student_roll.strip(),
        started_at=now or datetime.utcnow(),
        remaining_seconds=remaining,
    )
    return started, [
        RequestFullscreen(),
        ShowTime(format_remaining(remaining)),
        StartTicker(TICK_INTERVAL_MS),
    ]


def select_answer(session: Session, question_index: int, choice_index: int | None) -> Transition:
    """Record (or clear, with ``None``) the choice for one question."""
    if not _accepts_activity(session):
        return session, []
    if not 0 <= question_index < session.question_count:
        raise IndexError(f"Question index {question_index} out of range")
    if choice_index is not None and not 0 <= choice_index < CHOICES_PER_QUESTION:
        raise ValueError("Choice index must be between 0 and 3.")
    answers = list(session.answers)
    answers[question_index] = choice_index
    return replace(session, answers=tuple(answers)), []


def tick(session: Session) -> Transition:
    if not _accepts_activity(session):
        return session, []
    remaining = session.remaining_seconds - 1
    updated = replace(session, remaining_seconds=remaining)
    effects: list[Effect] = [ShowTime(format_remaining(remaining))]
    if remaining <= 0:
        updated, submit_effects = _begin_submission(updated, REASON_TIME_UP)
        effects.extend(submit_effects)
    return updated, effects


def visibility_changed(session: Session, hidden: bool) -> Transition:
    if not hidden:
        return session, []
    return _register_warning(session)


def fullscreen_changed(session: Session, is_fullscreen: bool) -> Transition:
    if is_fullscreen:
        return session, []
    return _register_warning(session)


def manual_submit(session: Session) -> Transition:
    """Submit on explicit user request; after a failed attempt this retries."""
    if session.state is SessionState.SUBMITTING:
        return retry_submission(session)
    if not _accepts_activity(session):
        return session, []
    return _begin_submission(session, REASON_MANUAL_SUBMIT)


def submission_succeeded(session: Session, redirect: str) -> Transition:
    if session.state is not SessionState.SUBMITTING or not session.submission_in_flight:
        return session, []
    finished = replace(
        session,
        state=SessionState.TERMINATED,
        submission_in_flight=False,
        last_error=None,
    )
    return finished, [NavigateTo(redirect)]


def submission_failed(session: Session, message: str = SUBMISSION_FAILED_MESSAGE) -> Transition:
    """Surface a failed round-trip. The session stays SUBMITTING and is not retried."""
    if session.state is not SessionState.SUBMITTING or not session.submission_in_flight:
        return session, []
    failed = replace(session, submission_in_flight=False, last_error=message)
    return failed, [ShowError(message)]


def retry_submission(session: Session) -> Transition:
    if session.state is not SessionState.SUBMITTING or session.submission_in_flight:
        return session, []
    retrying = replace(session, submission_in_flight=True, last_error=None)
    return retrying, [_submission_effect(retrying)]


def _register_warning(session: Session) -> Transition:
    if not _accepts_activity(session):
        return session, []
    count = session.warning_count + 1
    warned = replace(session, warning_count=count)
    effects: list[Effect] = [
        ShowWarning(
            count=count,
            limit=WARNING_LIMIT,
            message=WARNING_TEMPLATE.format(count=count, limit=WARNING_LIMIT),
        )
    ]
    if count >= WARNING_LIMIT:
        warned, submit_effects = _begin_submission(warned, REASON_TOO_MANY_WARNINGS)
        effects.extend(submit_effects)
    return warned, effects


def _begin_submission(session: Session, reason: str) -> Transition:
    answers = collect_answers(
        session.question_count,
        lambda index: session.answers[index] if index < len(session.answers) else None,
    )
    submitting = replace(
        session,
        state=SessionState.SUBMITTING,
        answers=tuple(answers),
        submitted=True,
        submit_reason=reason,
        submission_in_flight=True,
    )
    return submitting, [StopTicker(), _submission_effect(submitting)]


def _submission_effect(session: Session) -> SendSubmission:
    return SendSubmission(
        exam_id=session.exam_id,
        student_name=session.student_name,
        student_roll=session.student_roll,
        answers=session.answers,
        reason=session.submit_reason or REASON_MANUAL_SUBMIT,
    )


class ExamSessionController:
    """Owns the current session and hands each transition's effects to the host.

    The new session is stored before any effect runs, so a host that completes
    the submission synchronously inside its effect handler still sees the
    SUBMITTING state.
    """

    def __init__(self, session: Session, on_effect: Callable[[Effect], None]) -> None:
        self._session = session
        self._on_effect = on_effect

    @property
    def session(self) -> Session:
        return self._session

    def start(self, student_name: str, student_roll: str) -> None:
        self._apply(start_session(self._session, student_name, student_roll))

    def select_answer(self, question_index: int, choice_index: int | None) -> None:
        self._apply(select_answer(self._session, question_index, choice_index))

    def tick(self) -> None:
        self._apply(tick(self._session))

    def on_visibility_changed(self, hidden: bool) -> None:
        self._apply(visibility_changed(self._session, hidden))

    def on_fullscreen_changed(self, is_fullscreen: bool) -> None:
        self._apply(fullscreen_changed(self._session, is_fullscreen))

    def submit(self) -> None:
        self._apply(manual_submit(self._session))

    def submission_succeeded(self, redirect: str) -> None:
        self._apply(submission_succeeded(self._session, redirect))

    def submission_failed(self, message: str = SUBMISSION_FAILED_MESSAGE) -> None:
        self._apply(submission_failed(self._session, message))

    def _apply(self, transition: Transition) -> None:
        previous = self._session
        self._session, effects = transition
        if previous.state is not self._session.state:
            logger.info(
                "Exam %s session %s -> %s (reason: %s)",
                self._session.exam_id,
                previous.state.name,
                self._session.state.name,
                self._session.submit_reason,
            )
        for effect in effects:
            if isinstance(effect, ShowWarning):
                logger.info("Integrity warning %s/%s on exam %s", effect.count, effect.limit, self._session.exam_id)
            self._on_effect(effect)
