from __future__ import annotations

from exam_app.constants.theme_constants import DEFAULT_HIGHLIGHT_THEME
from exam_app.core.markdown_code_renderer import MarkdownCodeRenderer, normalize_theme, theme_stylesheet_url


def test_fenced_code_keeps_language_class():
    html = MarkdownCodeRenderer().render_fragment("Output?\n\n```c\nint x = 1;\n```")
    assert '<code class="language-c">' in html


def test_raw_html_is_escaped():
    html = MarkdownCodeRenderer().render_fragment("<script>alert(1)</script>")
    assert "<script>" not in html


def test_empty_text_renders_placeholder():
    assert "No content" in MarkdownCodeRenderer().render_fragment("   ")


def test_unknown_theme_falls_back_to_default():
    assert normalize_theme("monokai") == "monokai"
    assert normalize_theme("../evil") == DEFAULT_HIGHLIGHT_THEME
    assert normalize_theme(None) == DEFAULT_HIGHLIGHT_THEME
    assert theme_stylesheet_url("nope").endswith(f"/{DEFAULT_HIGHLIGHT_THEME}.min.css")


def test_question_document_loads_selected_theme():
    document = MarkdownCodeRenderer().render_question_document(2, "text", theme="vs2015")
    assert "<b>Q2.</b>" in document
    assert "vs2015.min.css" in document
