"""Fullscreen Qt window that runs one exam attempt against the exam server."""

from __future__ import annotations

import logging

from PySide6.QtCore import QEvent, QObject, QRunnable, Qt, QThreadPool, QTimer, Signal
from PySide6.QtGui import QGuiApplication
from PySide6.QtWebEngineWidgets import QWebEngineView
from PySide6.QtWidgets import (
    QButtonGroup,
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QPushButton,
    QRadioButton,
    QScrollArea,
    QStackedWidget,
    QVBoxLayout,
    QWidget,
)

from exam_app.constants.exam_constants import WARNING_LIMIT
from exam_app.constants.network_constants import LANDING_URL
from exam_app.constants.theme_constants import HIGHLIGHT_THEMES
from exam_app.constants.ui_constants import (
    EXAM_UNAVAILABLE_MESSAGE,
    NAME_PLACEHOLDER,
    RETRY_BUTTON,
    ROLL_PLACEHOLDER,
    START_BUTTON,
    SUBMIT_BUTTON,
    SUBMITTED_MESSAGE,
    THEME_LABEL,
    TIMER_LABEL_TEMPLATE,
    WARNINGS_LABEL_TEMPLATE,
    WINDOW_TITLE,
)
from exam_app.client.exam_client import ExamClient, StudentExam, SubmissionError
from exam_app.core.markdown_code_renderer import renderer
from exam_app.core.services.exam_session import (
    Effect,
    ExamSessionController,
    NavigateTo,
    RequestFullscreen,
    SendSubmission,
    ShowError,
    ShowTime,
    ShowWarning,
    StartTicker,
    StopTicker,
    format_remaining,
    new_session,
)
from exam_app.styling.color_palette import Theme
from exam_app.styling.styles import Styles
from exam_app.ui.dialog_helpers import show_error, show_info, show_warning
from exam_app.ui.theme_preferences import ThemePreferences

logger = logging.getLogger(__name__)

_QUESTION_VIEW_HEIGHT = 220


class _SubmissionSignals(QObject):
    succeeded = Signal(str)
    failed = Signal(str)


class _SubmissionTask(QRunnable):
    """Runs the blocking submit call off the UI thread."""

    def __init__(self, client: ExamClient, effect: SendSubmission) -> None:
        super().__init__()
        self.signals = _SubmissionSignals()
        self._client = client
        self._effect = effect

    def run(self) -> None:
        try:
            redirect = self._client.submit(
                self._effect.exam_id,
                self._effect.student_name,
                self._effect.student_roll,
                self._effect.answers,
            )
        except SubmissionError as exc:
            self.signals.failed.emit(str(exc))
            return
        self.signals.succeeded.emit(redirect)


class ExamKioskWindow(QMainWindow):
    """Start form, question list and status bar for a single attempt."""

    def __init__(
        self,
        client: ExamClient,
        exam: StudentExam,
        preferences: ThemePreferences | None = None,
    ) -> None:
        super().__init__()
        self.setWindowTitle(f"{WINDOW_TITLE} - {exam.title}")

        self._client = client
        self._exam = exam
        self._preferences = preferences or ThemePreferences()
        self._highlight_theme = self._preferences.load()
        self._was_fullscreen = False
        self._pending_task: _SubmissionTask | None = None

        self._controller = ExamSessionController(
            new_session(exam.id, exam.duration_minutes, len(exam.questions)),
            self._handle_effect,
        )
        self._ticker = QTimer(self)
        self._ticker.timeout.connect(self._controller.tick)  # type: ignore[arg-type]

        self._question_views: list[QWebEngineView] = []
        self._button_groups: list[QButtonGroup] = []

        self._build_ui()
        self._apply_styles()

        app = QGuiApplication.instance()
        if app is not None:
            app.applicationStateChanged.connect(self._on_application_state_changed)  # type: ignore[attr-defined]

    # --- UI construction ---

    def _build_ui(self) -> None:
        self.stack = QStackedWidget(self)
        self.setCentralWidget(self.stack)

        self.start_page = self._build_start_page()
        self.exam_page = self._build_exam_page()
        self.done_label = QLabel("")
        self.done_label.setAlignment(Qt.AlignCenter)
        self.done_label.setWordWrap(True)

        self.stack.addWidget(self.start_page)
        self.stack.addWidget(self.exam_page)
        self.stack.addWidget(self.done_label)

    def _build_start_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        title = QLabel(self._exam.title)
        title.setStyleSheet("font-size: 20pt; font-weight: bold;")
        layout.addWidget(title)
        layout.addWidget(
            QLabel(f"{len(self._exam.questions)} questions, {self._exam.duration_minutes} minutes")
        )

        self.name_input = QLineEdit()
        self.name_input.setPlaceholderText(NAME_PLACEHOLDER)
        self.roll_input = QLineEdit()
        self.roll_input.setPlaceholderText(ROLL_PLACEHOLDER)
        layout.addWidget(self.name_input)
        layout.addWidget(self.roll_input)

        self.start_button = QPushButton(START_BUTTON)
        self.start_button.clicked.connect(self._handle_start_clicked)  # type: ignore[arg-type]
        layout.addWidget(self.start_button)
        layout.addStretch()
        return page

    def _build_exam_page(self) -> QWidget:
        page = QWidget(self)
        layout = QVBoxLayout()
        page.setLayout(layout)

        status_row = QHBoxLayout()
        self.timer_label = QLabel(TIMER_LABEL_TEMPLATE.format(display=format_remaining(0)))
        self.warnings_label = QLabel(WARNINGS_LABEL_TEMPLATE.format(count=0, limit=WARNING_LIMIT))
        status_row.addWidget(self.timer_label)
        status_row.addWidget(self.warnings_label)
        status_row.addStretch()
        status_row.addWidget(QLabel(THEME_LABEL))
        self.theme_combo = QComboBox()
        self.theme_combo.addItems(list(HIGHLIGHT_THEMES))
        self.theme_combo.setCurrentText(self._highlight_theme)
        self.theme_combo.currentTextChanged.connect(self._handle_theme_changed)  # type: ignore[arg-type]
        status_row.addWidget(self.theme_combo)
        layout.addLayout(status_row)

        scroll = QScrollArea(page)
        scroll.setWidgetResizable(True)
        container = QWidget()
        questions_layout = QVBoxLayout()
        container.setLayout(questions_layout)
        for index, question in enumerate(self._exam.questions):
            questions_layout.addWidget(self._build_question_box(index, question.text, question.choices))
        questions_layout.addStretch()
        scroll.setWidget(container)
        layout.addWidget(scroll)

        self.submit_button = QPushButton(SUBMIT_BUTTON)
        self.submit_button.clicked.connect(self._controller.submit)  # type: ignore[arg-type]
        layout.addWidget(self.submit_button)
        return page

    def _build_question_box(self, index: int, text: str, choices: list[str]) -> QGroupBox:
        box = QGroupBox()
        box_layout = QVBoxLayout()
        box.setLayout(box_layout)

        view = QWebEngineView(box)
        view.setFixedHeight(_QUESTION_VIEW_HEIGHT)
        view.setHtml(renderer.render_question_document(index + 1, text, self._highlight_theme))
        box_layout.addWidget(view)
        self._question_views.append(view)

        group = QButtonGroup(box)
        for choice_index, choice in enumerate(choices):
            radio = QRadioButton(choice)
            group.addButton(radio, choice_index)
            box_layout.addWidget(radio)
        group.idToggled.connect(  # type: ignore[attr-defined]
            lambda choice_index, checked, q=index: self._handle_choice_toggled(q, choice_index, checked)
        )
        self._button_groups.append(group)
        return box

    def _apply_styles(self) -> None:
        theme = Theme.for_highlight_theme(self._highlight_theme)
        self.setStyleSheet(Styles.get_kiosk_window_style(theme))
        self.timer_label.setStyleSheet(Styles.get_timer_label_style(theme))
        self.warnings_label.setStyleSheet(Styles.get_warning_label_style(theme))

    # --- User actions ---

    def _handle_start_clicked(self) -> None:
        name = self.name_input.text().strip()
        roll = self.roll_input.text().strip()
        if not name or not roll:
            show_warning(self, WINDOW_TITLE, "Please enter your name and roll number.")
            return
        self.stack.setCurrentWidget(self.exam_page)
        self._controller.start(name, roll)

    def _handle_choice_toggled(self, question_index: int, choice_index: int, checked: bool) -> None:
        if checked:
            self._controller.select_answer(question_index, choice_index)

    def _handle_theme_changed(self, theme: str) -> None:
        self._highlight_theme = self._preferences.save(theme)
        for index, (view, question) in enumerate(zip(self._question_views, self._exam.questions)):
            view.setHtml(renderer.render_question_document(index + 1, question.text, self._highlight_theme))
        self._apply_styles()

    # --- Integrity signals ---

    def _on_application_state_changed(self, state: Qt.ApplicationState) -> None:
        if state != Qt.ApplicationActive:
            self._controller.on_visibility_changed(hidden=True)

    def changeEvent(self, event: QEvent) -> None:  # noqa: N802 - Qt override
        if event.type() == QEvent.WindowStateChange:
            is_fullscreen = bool(self.windowState() & Qt.WindowFullScreen)
            if self._was_fullscreen and not is_fullscreen:
                self._controller.on_fullscreen_changed(is_fullscreen=False)
            self._was_fullscreen = is_fullscreen
        super().changeEvent(event)

    # --- Effects ---

    def _handle_effect(self, effect: Effect) -> None:
        if isinstance(effect, RequestFullscreen):
            self.showFullScreen()
        elif isinstance(effect, StartTicker):
            self._ticker.start(effect.interval_ms)
        elif isinstance(effect, StopTicker):
            self._ticker.stop()
            self.submit_button.setEnabled(False)
        elif isinstance(effect, ShowTime):
            self.timer_label.setText(TIMER_LABEL_TEMPLATE.format(display=effect.display))
        elif isinstance(effect, ShowWarning):
            self.warnings_label.setText(WARNINGS_LABEL_TEMPLATE.format(count=effect.count, limit=effect.limit))
            if effect.count < effect.limit:
                show_warning(self, WINDOW_TITLE, effect.message)
        elif isinstance(effect, SendSubmission):
            self._start_submission(effect)
        elif isinstance(effect, NavigateTo):
            self._show_finished(effect.url)
        elif isinstance(effect, ShowError):
            show_error(self, WINDOW_TITLE, effect.message)
            self.submit_button.setText(RETRY_BUTTON)
            self.submit_button.setEnabled(True)

    def _start_submission(self, effect: SendSubmission) -> None:
        logger.info("Submitting exam %s (%s)", effect.exam_id, effect.reason)
        self.submit_button.setEnabled(False)
        task = _SubmissionTask(self._client, effect)
        task.signals.succeeded.connect(self._controller.submission_succeeded)
        task.signals.failed.connect(self._handle_submission_failed)
        self._pending_task = task
        QThreadPool.globalInstance().start(task)

    def _handle_submission_failed(self, detail: str) -> None:
        logger.warning("Submission failed: %s", detail)
        self._controller.submission_failed()

    def _show_finished(self, url: str) -> None:
        self._pending_task = None
        if url == LANDING_URL:
            self.done_label.setText(EXAM_UNAVAILABLE_MESSAGE)
            show_info(self, WINDOW_TITLE, EXAM_UNAVAILABLE_MESSAGE)
        else:
            self.done_label.setText(SUBMITTED_MESSAGE)
        self.stack.setCurrentWidget(self.done_label)
        self.showNormal()

    def closeEvent(self, event) -> None:  # noqa: N802 - Qt override
        self._ticker.stop()
        self._client.close()
        super().closeEvent(event)
