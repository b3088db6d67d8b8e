"""Network configuration constants for the exam application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_SERVER_URL: str = "http://127.0.0.1:8000"
REQUEST_TIMEOUT_SECONDS: float = 10.0
AJAX_HEADER: str = "X-Requested-With"
AJAX_HEADER_VALUE: str = "XMLHttpRequest"
ADMIN_COOKIE: str = "examapp_admin"
LANDING_URL: str = "/"
ADMIN_SESSION_TTL_SECONDS: float = 8 * 60 * 60
