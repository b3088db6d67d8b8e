"""Styling module for the exam kiosk."""

from .color_palette import ColorPalette, Theme

__all__ = ["ColorPalette", "Theme"]
