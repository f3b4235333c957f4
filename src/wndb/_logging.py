"""structlog setup for applications embedding wndb (the library never calls this itself)."""

from __future__ import annotations

import logging
import sys

import structlog

from ._config import settings


def _stderr_logger(*args: object) -> structlog.PrintLogger:
    # Looked up per call so a replaced sys.stderr is honoured.
    return structlog.PrintLogger(sys.stderr)


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Emit JSON logs (fmt="json") or colored console logs (anything else)."""
    level = (level or settings.LOG_LEVEL).upper()
    fmt = fmt or settings.LOG_FORMAT

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if fmt == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level)
        ),
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )

    # Route stdlib logging (e.g. asyncio) through the same stream.
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
