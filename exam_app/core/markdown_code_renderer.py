"""Markdown rendering for question text, shared by the student page and the kiosk.

Question text is authored in Markdown; fenced code blocks keep their language
class (``language-c``) so highlight.js can colour them in the browser and in
the kiosk's web view. Raw HTML in question text is escaped, never passed
through.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from html import escape

from markdown_it import MarkdownIt

from exam_app.constants.theme_constants import (
    DEFAULT_HIGHLIGHT_THEME,
    HIGHLIGHT_SCRIPT_URL,
    HIGHLIGHT_STYLESHEET_URL,
    HIGHLIGHT_THEMES,
)


def normalize_theme(theme: str | None) -> str:
    """Return ``theme`` when it is offered, otherwise the default theme."""
    if theme and theme in HIGHLIGHT_THEMES:
        return theme
    return DEFAULT_HIGHLIGHT_THEME


def theme_stylesheet_url(theme: str | None) -> str:
    return HIGHLIGHT_STYLESHEET_URL.format(theme=normalize_theme(theme))


@dataclass(slots=True)
class MarkdownCodeRenderer:
    """Converts markdown question text into HTML fragments or full documents."""

    enable_html: bool = False
    _markdown: MarkdownIt = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._markdown = (
            MarkdownIt("commonmark", {"html": self.enable_html})
            .enable("table")
            .enable("strikethrough")
        )

    def render_fragment(self, markdown_text: str) -> str:
        sanitized = markdown_text.strip()
        if not sanitized:
            return "<p><em>No content provided.</em></p>"
        return self._markdown.render(sanitized)

    def render_question_document(
        self,
        question_number: int,
        markdown_text: str,
        theme: str | None = None,
    ) -> str:
        """Render one question as a standalone page with highlight.js loaded."""

        fragment = self.render_fragment(markdown_text)
        return f"""<!doctype html>
<html lang=\"en\">
  <head>
    <meta charset=\"utf-8\" />
    <title>Question {question_number}</title>
    <link rel=\"stylesheet\" href=\"{escape(theme_stylesheet_url(theme))}\" />
    <style>
      body {{ font-family: 'Segoe UI', system-ui, sans-serif; margin: 0; padding: 0.5rem; }}
      pre {{ padding: 0.75rem; border-radius: 0.5rem; overflow-x: auto; }}
    </style>
    <script src=\"{HIGHLIGHT_SCRIPT_URL}\"></script>
  </head>
  <body>
    <p><b>Q{question_number}.</b></p>
    {fragment}
    <script>hljs.highlightAll();</script>
  </body>
</html>"""


renderer = MarkdownCodeRenderer()
# Shared instance; MarkdownIt renders are read-only so reuse across request
# threads is fine.
