"""Logging setup for kapeta_codegen.

Modules obtain loggers through :func:`get_logger`; the CLI calls
:func:`configure_logging` once to attach a rich console handler.
"""

from __future__ import annotations

import logging
from pathlib import Path

from rich.logging import RichHandler

_LOGGER_NAME = "kapeta_codegen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the kapeta_codegen hierarchy.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        Logger instance.
    """
    if not name or name == _LOGGER_NAME:
        return logging.getLogger(_LOGGER_NAME)
    if name.startswith(f"{_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the package logger with rich console output and an optional file sink.

    Args:
        verbose: Log at DEBUG instead of WARNING.
        log_file: Optional path that receives a plain-text copy of the log.

    Returns:
        The configured package logger.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Replace handlers from an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = RichHandler(show_path=False, rich_tracebacks=verbose)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)
        logger.setLevel(logging.DEBUG)

    return logger


__all__ = ["configure_logging", "get_logger"]
