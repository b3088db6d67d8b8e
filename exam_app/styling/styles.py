"""Qt stylesheets for the exam kiosk."""

from .color_palette import ColorPalette, Theme


class Styles:
    """Helper class to generate Qt stylesheets based on the current theme."""

    @staticmethod
    def get_kiosk_window_style(theme: Theme = Theme.DARK) -> str:
        return f"""
            QMainWindow, QWidget {{
                background-color: {ColorPalette.BACKGROUND_PRIMARY.get(theme)};
                color: {ColorPalette.TEXT_PRIMARY.get(theme)};
                font-family: 'Segoe UI', 'Roboto', sans-serif;
                font-size: 14px;
            }}
            QGroupBox {{
                background-color: {ColorPalette.BACKGROUND_CARD.get(theme)};
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 6px;
                margin-top: 6px;
                padding-top: 10px;
            }}
            QLineEdit, QComboBox {{
                border: 1px solid {ColorPalette.BORDER_PRIMARY.get(theme)};
                border-radius: 4px;
                padding: 4px;
            }}
            QPushButton {{
                background-color: {ColorPalette.ACCENT_PRIMARY.get(theme)};
                color: #FFFFFF;
                border: none;
                border-radius: 6px;
                padding: 8px 16px;
            }}
            QPushButton:hover {{
                background-color: {ColorPalette.ACCENT_HOVER.get(theme)};
            }}
            QPushButton:disabled {{
                background-color: {ColorPalette.BORDER_PRIMARY.get(theme)};
            }}
        """

    @staticmethod
    def get_timer_label_style(theme: Theme = Theme.DARK) -> str:
        return f"font-size: 16pt; font-weight: bold; color: {ColorPalette.TIMER.get(theme)};"

    @staticmethod
    def get_warning_label_style(theme: Theme = Theme.DARK) -> str:
        return f"font-size: 16pt; font-weight: bold; color: {ColorPalette.WARNING.get(theme)};"
