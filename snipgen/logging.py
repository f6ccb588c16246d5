"""Logging setup for the snipgen CLI.

Snippets are written to stdout, so every log record goes to stderr (and an
optional file). Diagnostics are logged at WARNING by the orchestrator, which
keeps them visible under ``--quiet``.
"""

from __future__ import annotations

import logging
from pathlib import Path

_ROOT = "snipgen"
_CONSOLE_FORMAT = "[snipgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``snipgen.<name>``, or the package logger when ``name`` is empty."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def _level(verbose: bool, quiet: bool) -> int:
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send snipgen records to stderr and, when given, to ``log_file``.

    ``verbose`` wins over ``quiet``. The file sink always records DEBUG so a
    log captured for a bug report holds the per-file scan details.
    """
    console_level = _level(verbose, quiet)
    logger = logging.getLogger(_ROOT)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is None:
        logger.setLevel(console_level)
        return logger

    sink = logging.FileHandler(log_file, encoding="utf-8")
    sink.setLevel(logging.DEBUG)
    sink.setFormatter(logging.Formatter(_FILE_FORMAT))
    logger.addHandler(sink)
    logger.setLevel(logging.DEBUG)
    return logger


__all__ = ["configure_logging", "get_logger"]
