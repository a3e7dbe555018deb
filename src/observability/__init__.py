"""Structured logging for secure fetch clients."""

from src.observability.logging import configure_from_settings, configure_logging, get_logger


__all__ = [
    "configure_from_settings",
    "configure_logging",
    "get_logger",
]
