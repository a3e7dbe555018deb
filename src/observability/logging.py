"""Structured logging configuration for secure fetch clients."""

import logging
import sys
from typing import TYPE_CHECKING, TextIO

import structlog


if TYPE_CHECKING:
    from src.settings.app import ClientSettings


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        msg = f"Unknown log level: {level}"
        raise ValueError(msg)
    return resolved


def configure_logging(
    level: int | str = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for an application embedding the client.

    Every client event (``request_started``, ``security_violation``,
    ``status_error`` and so on) is rendered as one JSON line, or as a
    colored console line when json_format is False.

    Args:
        level: Minimum level, as an int or a name such as "WARNING".
        output: Output stream (default: stderr).
        json_format: Whether to render JSON (default: True).

    Raises:
        ValueError: If a level name is not recognized.
    """
    numeric_level = _resolve_level(level)

    renderer: structlog.types.Processor
    if json_format:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=True,
    )

    # httpx logs through the standard library
    logging.basicConfig(format="%(message)s", stream=output, level=numeric_level)


def configure_from_settings(settings: "ClientSettings", output: TextIO = sys.stderr) -> None:
    """Configure logging from SECURE_FETCH_LOG_LEVEL and SECURE_FETCH_LOG_JSON.

    Args:
        settings: Loaded client settings.
        output: Output stream (default: stderr).
    """
    configure_logging(
        level=settings.log_level,
        output=output,
        json_format=settings.log_json,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger instance.

    Args:
        name: Optional logger name.

    Returns:
        Bound logger instance.
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
