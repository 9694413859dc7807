"""Logging for the ``rewards_program`` package.

``configure_logging`` is called by the CLI root callback and by
:func:`rewards_program.server.run_server`; whichever runs first wins. Library
modules only ever call ``get_logger`` and never attach handlers themselves.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_PKG_LOGGER_NAME = "rewards_program"
_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    """Resolve ``level`` (or ``REWARDS_LOG_LEVEL``) to a logging constant.

    Unknown names fall back to ``INFO`` rather than failing startup.
    """

    if isinstance(level, int):
        return level
    name = (level or os.getenv("REWARDS_LOG_LEVEL") or "").strip().upper()
    numeric = logging.getLevelName(name) if name else None
    return numeric if isinstance(numeric, int) else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] = sys.stderr,
    also: tuple[str, ...] = (),
) -> None:
    """Attach one ``StreamHandler`` to the package logger, once per process.

    ``also`` names third-party loggers (the server passes ``"werkzeug"`` so
    request lines share the format) that get the same handler and level.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    resolved = _parse_level(level)
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_FORMAT))

    for name in (_PKG_LOGGER_NAME, *also):
        logger = logging.getLogger(name)
        for h in list(logger.handlers):
            if isinstance(h, logging.NullHandler):
                logger.removeHandler(h)
        logger.setLevel(resolved)
        logger.addHandler(handler)
        logger.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]
