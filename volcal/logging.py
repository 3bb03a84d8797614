"""Logging helpers for the volcal package."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

ROOT_LOGGER_NAME = "volcal"
_NULL_HANDLER = logging.NullHandler()


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Return a logger that stays silent until the application configures one.

    Args:
        name: Fully qualified logger name, e.g. ``"volcal.calibration"``.

    Returns:
        A :class:`logging.Logger` carrying a null handler.
    """

    logger = logging.getLogger(name)
    if not any(isinstance(handler, logging.NullHandler) for handler in logger.handlers):
        logger.addHandler(_NULL_HANDLER)
    return logger


def configure_logging(
    level: int = logging.INFO,
    *,
    handlers: Optional[Iterable[logging.Handler]] = None,
    format_string: str | None = None,
) -> logging.Logger:
    """Attach handlers to the volcal root logger.

    Args:
        level: Logging level applied to the ``volcal`` logger.
        handlers: Optional iterable of handlers to attach. When omitted a
            single stream handler writing to ``stderr`` is installed.
        format_string: Optional format applied to the attached handlers.

    Returns:
        The configured root package logger.
    """

    logger = get_logger(ROOT_LOGGER_NAME)
    logger.setLevel(level)

    if handlers is None:
        handlers = [logging.StreamHandler()]
    for handler in handlers:
        if format_string:
            handler.setFormatter(logging.Formatter(format_string))
        logger.addHandler(handler)
    return logger


__all__ = ["ROOT_LOGGER_NAME", "configure_logging", "get_logger"]
