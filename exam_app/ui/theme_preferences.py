"""Persisted code-highlighting theme for the kiosk."""

from __future__ import annotations

from PySide6.QtCore import QSettings

from exam_app.constants.theme_constants import THEME_STORAGE_KEY
from exam_app.constants.ui_constants import SETTINGS_APPLICATION, SETTINGS_ORGANIZATION
from exam_app.core.markdown_code_renderer import normalize_theme


class ThemePreferences:
    """Reads and writes the chosen theme through ``QSettings``."""

    def __init__(self, settings: QSettings | None = None) -> None:
        self._settings = settings or QSettings(SETTINGS_ORGANIZATION, SETTINGS_APPLICATION)

    def load(self) -> str:
        stored = self._settings.value(THEME_STORAGE_KEY, None)
        return normalize_theme(stored if isinstance(stored, str) else None)

    def save(self, theme: str) -> str:
        normalized = normalize_theme(theme)
        self._settings.setValue(THEME_STORAGE_KEY, normalized)
        return normalized
