"""Deployment settings read from the environment (and an optional .env file)."""

from __future__ import annotations

from dataclasses import dataclass
import os

from dotenv import load_dotenv

from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT, DEFAULT_SERVER_URL


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime configuration for the server and the kiosk."""

    admin_password: str | None
    host: str
    port: int
    server_url: str
    seed_demo_data: bool


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Load settings, letting a local .env file fill in unset variables."""
    load_dotenv()
    password = (os.getenv("EXAM_ADMIN_PASSWORD") or "").strip() or None
    port_text = os.getenv("EXAM_PORT") or str(DEFAULT_PORT)
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ValueError(f"EXAM_PORT must be an integer, got {port_text!r}") from exc
    return Settings(
        admin_password=password,
        host=os.getenv("EXAM_HOST") or DEFAULT_HOST,
        port=port,
        server_url=(os.getenv("EXAM_SERVER_URL") or DEFAULT_SERVER_URL).rstrip("/"),
        seed_demo_data=_env_flag("EXAM_DEMO_DATA"),
    )
