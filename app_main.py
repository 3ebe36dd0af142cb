"""Application entry point for the ExamLive server."""

from __future__ import annotations

import argparse
from pathlib import Path

from exam_app.config import Settings
from exam_app.core.exam_importer import ExamImportError, load_exam_from_file
from exam_app.core.exam_manager import ExamManager
from exam_app.server.api_server import run_api_server
from exam_app.utils.logging_config import configure_logging


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the ExamLive exam server.")
    parser.add_argument("--host", help="Interface to bind (overrides EXAM_APP_HOST)")
    parser.add_argument("--port", type=int, help="Port to listen on (overrides EXAM_APP_PORT)")
    parser.add_argument("--exam-file", type=Path, help="Text exam to publish at startup")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Load settings, publish the startup exam if any, and serve the API."""
    args = _parse_args(argv)
    settings = Settings()
    overrides = {key: value for key, value in (
        ("host", args.host),
        ("port", args.port),
        ("exam_file", args.exam_file),
    ) if value is not None}
    if overrides:
        settings = settings.model_copy(update=overrides)

    logger = configure_logging(settings.log_level)
    logger.info("Starting ExamLive server…")

    admin_password = settings.admin_password.get_secret_value()
    exam_manager = ExamManager(admin_password=admin_password)
    if settings.exam_file is not None:
        try:
            imported = load_exam_from_file(settings.exam_file)
        except (OSError, ExamImportError) as exc:
            raise SystemExit(f"Could not load exam file {settings.exam_file}: {exc}") from exc
        exam = exam_manager.create_exam(imported.definition, password=admin_password)
        logger.info("Published %s as exam %s", imported.source_path, exam.id)

    logger.info("API available at http://%s:%d/api/exam", settings.host, settings.port)
    run_api_server(exam_manager, settings)


if __name__ == "__main__":
    main()
