"""FastAPI server exposing the student and admin endpoints."""

from __future__ import annotations

import logging
import secrets
from threading import Lock, Thread
import time
from typing import Callable

from fastapi import Depends, FastAPI, Form, HTTPException, Request, Response
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from pydantic import BaseModel
import uvicorn

from exam_app.constants.about import APP_NAME, APP_VERSION
from exam_app.constants.exam_constants import CSV_EXPORT_FILENAME
from exam_app.constants.network_constants import (
    ADMIN_COOKIE,
    ADMIN_SESSION_TTL_SECONDS,
    AJAX_HEADER,
    AJAX_HEADER_VALUE,
    DEFAULT_HOST,
    DEFAULT_PORT,
    LANDING_URL,
)
from exam_app.core.errors import AnswerPayloadError, ExamUnavailableError, NotFoundError
from exam_app.core.exam_manager import ExamManager, ResultRow
from exam_app.core.markdown_code_renderer import renderer
from exam_app.core.models import Exam, Question
from exam_app.server.student_page import EXAM_PAGE_HTML, THANK_YOU_PAGE_HTML, render_landing_page

logger = logging.getLogger(__name__)


class ExamPayload(BaseModel):
    """Payload schema for creating an exam."""

    title: str
    duration_minutes: int


class QuestionPayload(BaseModel):
    """Payload schema for adding a question; ``answer_index`` is 0-based."""

    text: str
    choices: list[str]
    answer_index: int


class AdminSessions:
    """Opaque admin tokens issued after a successful password login.

    Tokens expire after ``ttl_seconds``; expired ones are dropped whenever a
    new token is issued.
    """

    def __init__(
        self,
        password: str | None,
        ttl_seconds: float = ADMIN_SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._password = password
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._tokens: dict[str, float] = {}
        self._lock = Lock()

    def login(self, password: str) -> str | None:
        if not self._password or not secrets.compare_digest(password.encode(), self._password.encode()):
            return None
        token = secrets.token_urlsafe(32)
        now = self._clock()
        with self._lock:
            self._prune(now)
            self._tokens[token] = now + self._ttl_seconds
        return token

    def logout(self, token: str | None) -> None:
        if token:
            with self._lock:
                self._tokens.pop(token, None)

    def is_valid(self, token: str | None) -> bool:
        if not token:
            return False
        now = self._clock()
        with self._lock:
            expires_at = self._tokens.get(token)
            if expires_at is None:
                return False
            if expires_at <= now:
                del self._tokens[token]
                return False
            return True

    def active_count(self) -> int:
        with self._lock:
            self._prune(self._clock())
            return len(self._tokens)

    def _prune(self, now: float) -> None:
        expired = [token for token, expires_at in self._tokens.items() if expires_at <= now]
        for token in expired:
            del self._tokens[token]


def _exam_to_dict(exam: Exam) -> dict[str, object]:
    return {
        "id": exam.id,
        "title": exam.title,
        "duration_minutes": exam.duration_minutes,
        "is_active": exam.is_active,
        "created_at": exam.created_at.isoformat(),
    }


def _question_for_student(question: Question) -> dict[str, object]:
    # The answer key never leaves the server on the student path.
    return {
        "id": question.id,
        "text": question.text,
        "html": renderer.render_fragment(question.text),
        "choices": list(question.choices),
    }


def _question_for_admin(question: Question) -> dict[str, object]:
    return {
        "id": question.id,
        "exam_id": question.exam_id,
        "text": question.text,
        "choices": list(question.choices),
        "answer_index": question.answer_index,
    }


def _result_row_to_dict(row: ResultRow) -> dict[str, object]:
    result = row.result
    return {
        "id": result.id,
        "exam_id": result.exam_id,
        "exam_title": row.exam_title,
        "name": result.student_name,
        "roll": result.student_roll,
        "answers": list(result.answers),
        "score": result.score,
        "total": result.total,
        "submitted_at": result.submitted_at.isoformat(),
    }


def _get_exam_manager_dependency(exam_manager: ExamManager):
    def dependency() -> ExamManager:
        return exam_manager

    return dependency


def create_api_app(exam_manager: ExamManager, admin_password: str | None = None) -> FastAPI:
    """Create a FastAPI application wired to the provided exam manager."""
    app = FastAPI(title=f"{APP_NAME} API", version=APP_VERSION)
    manager_dep = _get_exam_manager_dependency(exam_manager)
    admin_sessions = AdminSessions(admin_password)

    def require_admin(request: Request) -> None:
        if not admin_sessions.is_valid(request.cookies.get(ADMIN_COOKIE)):
            raise HTTPException(status_code=401, detail="Admin login required")

    # --- Student pages ---

    @app.get("/", response_class=HTMLResponse)
    def serve_landing_page(manager: ExamManager = Depends(manager_dep)) -> str:
        return render_landing_page(manager.list_exams())

    @app.get("/api/exams")
    def list_open_exams(manager: ExamManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [_exam_to_dict(exam) for exam in manager.list_exams() if exam.is_active]

    @app.get("/api/exams/{exam_id}")
    def get_exam_for_student(exam_id: int, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            snapshot = manager.open_exam_for_student(exam_id)
        except ExamUnavailableError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "exam": _exam_to_dict(snapshot.exam),
            "questions": [_question_for_student(q) for q in snapshot.questions],
        }

    @app.get("/exams/{exam_id}", response_class=HTMLResponse)
    def serve_exam_page(exam_id: int, manager: ExamManager = Depends(manager_dep)) -> Response:
        try:
            manager.open_exam_for_student(exam_id)
        except ExamUnavailableError:
            return RedirectResponse(LANDING_URL, status_code=303)
        return HTMLResponse(EXAM_PAGE_HTML)

    @app.post("/exams/{exam_id}/submit")
    def submit_exam(
        exam_id: int,
        request: Request,
        name: str = Form(""),
        roll: str = Form(""),
        answers_json: str | None = Form(None, alias="answersJson"),
        manager: ExamManager = Depends(manager_dep),
    ) -> Response:
        wants_json = request.headers.get(AJAX_HEADER) == AJAX_HEADER_VALUE
        try:
            outcome = manager.submit_answers(exam_id, name, roll, answers_json)
        except AnswerPayloadError as exc:
            logger.warning("Rejected submission for exam %s: %s", exam_id, exc)
            return JSONResponse({"ok": False, "detail": str(exc)}, status_code=400)
        except ExamUnavailableError:
            if wants_json:
                return JSONResponse({"ok": False, "redirect": LANDING_URL})
            return RedirectResponse(LANDING_URL, status_code=303)
        except Exception:
            logger.exception("Submission for exam %s failed", exam_id)
            return JSONResponse({"ok": False, "detail": "Submission failed"}, status_code=500)

        if wants_json:
            return JSONResponse({"ok": True, "redirect": outcome.redirect})
        return RedirectResponse(outcome.redirect, status_code=303)

    @app.get("/exams/{exam_id}/thankyou", response_class=HTMLResponse)
    def serve_thank_you_page(exam_id: int) -> str:
        return THANK_YOU_PAGE_HTML

    # --- Admin authentication ---

    @app.post("/admin/login")
    def admin_login(response: Response, password: str = Form("")) -> dict[str, object]:
        token = admin_sessions.login(password)
        if token is None:
            raise HTTPException(status_code=401, detail="Invalid password")
        response.set_cookie(key=ADMIN_COOKIE, value=token, samesite="lax", httponly=True)
        logger.info("Admin logged in (%s active sessions)", admin_sessions.active_count())
        return {"ok": True}

    @app.post("/admin/logout")
    def admin_logout(request: Request, response: Response) -> dict[str, object]:
        admin_sessions.logout(request.cookies.get(ADMIN_COOKIE))
        response.delete_cookie(ADMIN_COOKIE)
        return {"ok": True}

    # --- Admin: exams and questions ---

    @app.get("/admin/exams", dependencies=[Depends(require_admin)])
    def admin_list_exams(manager: ExamManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [_exam_to_dict(exam) for exam in manager.list_exams()]

    @app.post("/admin/exams", status_code=201, dependencies=[Depends(require_admin)])
    def admin_create_exam(payload: ExamPayload, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            exam = manager.create_exam(payload.title, payload.duration_minutes)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _exam_to_dict(exam)

    @app.post("/admin/exams/{exam_id}/toggle", dependencies=[Depends(require_admin)])
    def admin_toggle_exam(exam_id: int, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            return _exam_to_dict(manager.toggle_exam(exam_id))
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc

    @app.delete("/admin/exams/{exam_id}", dependencies=[Depends(require_admin)])
    def admin_delete_exam(exam_id: int, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            manager.delete_exam(exam_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"ok": True}

    @app.get("/admin/exams/{exam_id}/questions", dependencies=[Depends(require_admin)])
    def admin_list_questions(exam_id: int, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            exam = manager.get_exam(exam_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "exam": _exam_to_dict(exam),
            "questions": [_question_for_admin(q) for q in manager.list_questions(exam_id)],
        }

    @app.post("/admin/exams/{exam_id}/questions", status_code=201, dependencies=[Depends(require_admin)])
    def admin_add_question(
        exam_id: int,
        payload: QuestionPayload,
        manager: ExamManager = Depends(manager_dep),
    ) -> dict[str, object]:
        try:
            question = manager.add_question(exam_id, payload.text, payload.choices, payload.answer_index)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return _question_for_admin(question)

    @app.delete("/admin/questions/{question_id}", dependencies=[Depends(require_admin)])
    def admin_delete_question(question_id: int, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            manager.delete_question(question_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {"ok": True}

    # --- Admin: results ---

    @app.get("/admin/results", dependencies=[Depends(require_admin)])
    def admin_list_results(manager: ExamManager = Depends(manager_dep)) -> list[dict[str, object]]:
        return [_result_row_to_dict(row) for row in manager.list_results()]

    # Registered before /admin/results/{result_id} so "export" is not read as an id.
    @app.get("/admin/results/export", dependencies=[Depends(require_admin)])
    def admin_export_results(manager: ExamManager = Depends(manager_dep)) -> Response:
        try:
            document = manager.export_results_csv()
        except Exception:
            logger.exception("CSV export failed")
            return PlainTextResponse("Server error while exporting CSV.", status_code=500)
        return Response(
            content=document,
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{CSV_EXPORT_FILENAME}"'},
        )

    @app.get("/admin/results/{result_id}", dependencies=[Depends(require_admin)])
    def admin_result_detail(result_id: int, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            row, questions = manager.get_result_detail(result_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        return {
            "result": _result_row_to_dict(row),
            "questions": [_question_for_admin(q) for q in questions],
        }

    @app.delete("/admin/results/{result_id}", dependencies=[Depends(require_admin)])
    def admin_delete_result(result_id: int, manager: ExamManager = Depends(manager_dep)) -> dict[str, object]:
        try:
            manager.delete_result(result_id)
        except NotFoundError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Deleting result %s failed", result_id)
            raise HTTPException(status_code=500, detail="Failed to delete result") from exc
        return {"ok": True}

    return app


def start_api_server(
    exam_manager: ExamManager,
    admin_password: str | None = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(exam_manager, admin_password=admin_password)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="ExamApiServer", daemon=True)
    thread.start()
    return thread


def run_api_server(
    exam_manager: ExamManager,
    admin_password: str | None = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> None:
    """Serve in the foreground until interrupted."""
    app = create_api_app(exam_manager, admin_password=admin_password)
    uvicorn.run(app, host=host, port=port, log_level="info")
