"""Typer app configuration and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from ..config import load_settings

# Named loggers that get their own log file
FILE_LOGGERS = (
    "pipeline",
    "job_store",
    "instagram_api",
    "tiktok_api",
    "linkedin_api",
    "publish",
)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

app = typer.Typer(
    name="kodapost",
    help="Carousel generation jobs and multi-platform publishing",
    add_completion=False,
)


def setup_logging(log_dir: Path | None = None) -> None:
    """Configure logging for CLI.

    - Suppresses console output from libraries
    - Routes each named logger to logs/<name>.log
    """
    if log_dir is None:
        log_dir = load_settings().log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.handlers = []
    root_logger.setLevel(logging.CRITICAL)

    for logger_name in ["httpx", "httpcore", "asyncio"]:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.WARNING)
        logger.propagate = False

    formatter = logging.Formatter(LOG_FORMAT)
    for logger_name in FILE_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(logging.DEBUG)
        logger.propagate = False
        for handler in logger.handlers:
            handler.close()
        logger.handlers = []

        file_handler = logging.FileHandler(log_dir / f"{logger_name}.log", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


@app.callback()
def _configure() -> None:
    setup_logging()


def register_commands() -> None:
    """Register all commands."""
    from .commands import job, platforms, publish, sweep_jobs

    app.command(name="platforms")(platforms)
    app.command(name="publish")(publish)
    app.command(name="job")(job)
    app.command(name="sweep-jobs")(sweep_jobs)


register_commands()


def main() -> None:
    """CLI entry point."""
    app()
