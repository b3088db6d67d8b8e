"""Qt UI constants used by the exam kiosk."""

WINDOW_TITLE: str = "MCQ Exam Kiosk"
START_BUTTON: str = "Start Exam"
SUBMIT_BUTTON: str = "Submit Exam"
RETRY_BUTTON: str = "Retry Submission"
NAME_PLACEHOLDER: str = "Your name"
ROLL_PLACEHOLDER: str = "Roll number"
TIMER_LABEL_TEMPLATE: str = "Time left: {display}"
WARNINGS_LABEL_TEMPLATE: str = "Warnings: {count}/{limit}"
THEME_LABEL: str = "Code theme:"
EXAM_UNAVAILABLE_MESSAGE: str = "This exam is not available right now."
SUBMITTED_MESSAGE: str = "Your answers have been submitted. You may close this window."
SETTINGS_ORGANIZATION: str = "MCQExam"
SETTINGS_APPLICATION: str = "ExamKiosk"
