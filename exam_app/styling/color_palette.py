"""Color palette for the exam kiosk supporting light and dark themes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto

from exam_app.constants.theme_constants import DARK_HIGHLIGHT_THEMES


class Theme(Enum):
    """Window theme options."""
    LIGHT = auto()
    DARK = auto()

    @classmethod
    def for_highlight_theme(cls, highlight_theme: str) -> "Theme":
        """Match the window chrome to the chosen code-highlighting theme."""
        return cls.DARK if highlight_theme in DARK_HIGHLIGHT_THEMES else cls.LIGHT


@dataclass(frozen=True)
class ThemeColors:
    """Color definitions for a specific theme."""
    light: str
    dark: str

    def get(self, theme: Theme) -> str:
        return self.light if theme == Theme.LIGHT else self.dark


class ColorPalette:
    """Centralized color definitions for the kiosk."""

    TEXT_PRIMARY = ThemeColors(light="#000000", dark="#F5F7FF")
    BACKGROUND_PRIMARY = ThemeColors(light="#FFFFFF", dark="#0B1120")
    BACKGROUND_CARD = ThemeColors(light="#F5F5F5", dark="#111A30")
    BORDER_PRIMARY = ThemeColors(light="#D1D1D1", dark="#334155")
    ACCENT_PRIMARY = ThemeColors(light="#1F9AA5", dark="#1F9AA5")
    ACCENT_HOVER = ThemeColors(light="#16808A", dark="#16808A")
    TIMER = ThemeColors(light="#B45309", dark="#FACC15")
    WARNING = ThemeColors(light="#D13438", dark="#F87171")
