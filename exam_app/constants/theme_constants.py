"""Code-highlighting themes offered to students."""

HIGHLIGHT_THEMES: tuple[str, ...] = (
    "github",
    "github-dark",
    "atom-one-light",
    "atom-one-dark",
    "monokai",
    "vs2015",
)
DEFAULT_HIGHLIGHT_THEME: str = "github"
HIGHLIGHT_STYLESHEET_URL: str = (
    "https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/styles/{theme}.min.css"
)
HIGHLIGHT_SCRIPT_URL: str = (
    "https://cdnjs.cloudflare.com/ajax/libs/highlight.js/11.9.0/highlight.min.js"
)
THEME_STORAGE_KEY: str = "hljs-theme"
DARK_HIGHLIGHT_THEMES: frozenset[str] = frozenset({"github-dark", "atom-one-dark", "monokai", "vs2015"})
