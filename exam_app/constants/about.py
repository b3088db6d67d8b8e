"""Static metadata describing MCQ Exam."""

APP_NAME = "MCQ Exam"
APP_VERSION = "0.1"
APP_ABOUT_TEXT = (
    "MCQ Exam runs timed multiple-choice exams. Administrators create exams and "
    "questions over the HTTP API, students take them in a fullscreen browser page "
    "or the desktop kiosk, and every submission is scored on the server."
)
