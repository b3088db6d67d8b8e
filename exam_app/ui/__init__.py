"""Qt UI components for the exam kiosk."""

from .dialog_helpers import show_error, show_info, show_warning
from .exam_kiosk_window import ExamKioskWindow
from .theme_preferences import ThemePreferences

__all__ = [
    "ExamKioskWindow",
    "ThemePreferences",
    "show_error",
    "show_info",
    "show_warning",
]
