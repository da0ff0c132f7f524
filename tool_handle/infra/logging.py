"""Structured logging configuration using structlog.

Call setup_logging() once at application startup before any log calls.
The library itself only calls structlog.get_logger(); configuration belongs
to the embedding application.
"""

from __future__ import annotations

import logging

import structlog

from tool_handle.config.settings import LoggingSettings

_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR"}


def setup_logging(*, json_output: bool = True, log_level: str = "INFO") -> None:
    """Configure structlog for the application.

    Args:
        json_output: If True, render logs as JSON. If False, use dev-friendly console output.
        log_level: Minimum log level to emit (DEBUG, INFO, WARNING, ERROR).
    """
    level_name = log_level.upper()
    if level_name not in _LEVELS:
        raise ValueError(f"log_level must be one of {sorted(_LEVELS)} (got '{log_level}')")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelNamesMapping()[level_name]
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_logging_from_settings(settings: LoggingSettings | None = None) -> None:
    """Configure logging from TOOL_HANDLE_LOG_* settings."""
    settings = settings or LoggingSettings()
    setup_logging(json_output=settings.json_output, log_level=settings.level)
