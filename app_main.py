"""Application entry point for MCQ Exam."""

from __future__ import annotations

import argparse
import sys

from exam_app.config import Settings, load_settings
from exam_app.constants.about import APP_ABOUT_TEXT, APP_NAME
from exam_app.core.errors import ExamAppError
from exam_app.core.exam_manager import ExamManager
from exam_app.server.api_server import run_api_server, start_api_server
from exam_app.utils.logging_config import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=APP_NAME, description=APP_ABOUT_TEXT)
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("serve", help="Run the exam server in the foreground.")

    kiosk = subparsers.add_parser("kiosk", help="Take an exam in the fullscreen desktop kiosk.")
    kiosk.add_argument("exam_id", type=int)
    kiosk.add_argument("--server-url", default=None, help="Exam server base URL.")

    subparsers.add_parser("demo", help="Start a local server with a sample exam and open it in the kiosk.")
    return parser


def _run_kiosk(server_url: str, exam_id: int) -> int:
    # Qt is only needed for the kiosk commands.
    from PySide6.QtWidgets import QApplication

    from exam_app.client.exam_client import ExamClient
    from exam_app.ui import ExamKioskWindow, show_error

    app = QApplication(sys.argv)
    client = ExamClient(server_url)
    if not client.wait_until_ready():
        client.close()
        show_error(None, APP_NAME, f"Exam server at {server_url} is not reachable.")
        return 1
    try:
        exam = client.fetch_exam(exam_id)
    except ExamAppError as exc:
        client.close()
        show_error(None, APP_NAME, str(exc))
        return 1
    window = ExamKioskWindow(client=client, exam=exam)
    window.show()
    return app.exec()


def main(argv: list[str] | None = None) -> None:
    """Initialize logging and dispatch to the requested command."""
    args = _build_parser().parse_args(argv)
    logger = configure_logging()
    settings: Settings = load_settings()

    if args.command == "serve":
        manager = ExamManager()
        if settings.seed_demo_data:
            exam = manager.seed_demo_exam()
            logger.info("Seeded demo exam %s", exam.id)
        if settings.admin_password is None:
            logger.warning("EXAM_ADMIN_PASSWORD is not set; admin login is disabled.")
        logger.info("Serving exams on http://%s:%s/", settings.host, settings.port)
        run_api_server(manager, settings.admin_password, host=settings.host, port=settings.port)
    elif args.command == "kiosk":
        sys.exit(_run_kiosk(args.server_url or settings.server_url, args.exam_id))
    elif args.command == "demo":
        manager = ExamManager()
        exam = manager.seed_demo_exam()
        start_api_server(manager, settings.admin_password, host="127.0.0.1", port=settings.port)
        logger.info("Demo exam %s available at http://127.0.0.1:%s/exams/%s", exam.id, settings.port, exam.id)
        sys.exit(_run_kiosk(f"http://127.0.0.1:{settings.port}", exam.id))


if __name__ == "__main__":
    main()
