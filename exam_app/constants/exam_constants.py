"""Exam-session constants shared across the server, kiosk and student page."""

CHOICES_PER_QUESTION: int = 4
WARNING_LIMIT: int = 3
TICK_INTERVAL_MS: int = 1000

REASON_TIME_UP: str = "time up"
REASON_TOO_MANY_WARNINGS: str = "too many warnings"
REASON_MANUAL_SUBMIT: str = "manual submit"

WARNING_TEMPLATE: str = "Warning {count}/{limit}: Stay in fullscreen"
SUBMISSION_FAILED_MESSAGE: str = "Submission failed! Please try again."

CSV_EXPORT_FILENAME: str = "exam_results.csv"
CSV_EXPORT_FIELDS: tuple[str, ...] = ("Name", "Roll No", "Score", "Time")
