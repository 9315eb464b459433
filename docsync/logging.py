"""Logging for docsync passes.

Console records go to stderr, leaving stdout to reports. Core modules log
per-file decisions at debug, pass boundaries at info, and skipped directories
or unreadable files at warning.
"""

from __future__ import annotations

import logging
from pathlib import Path

ROOT_LOGGER = "docsync"
CONSOLE_FORMAT = "[docsync] %(levelname)s %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s]: %(message)s"

_OWNED = "_docsync_handler"


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Install console and optional file handlers on the ``docsync`` logger.

    The console shows info and above, or debug with ``verbose``. A log file
    always records debug detail, tagged with the loader thread that emitted it.
    Calling again replaces the handlers a previous call installed and leaves
    any others alone.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in [h for h in logger.handlers if getattr(h, _OWNED, False)]:
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    _install(logger, console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(FILE_FORMAT))
        _install(logger, sink)

    return logger


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    setattr(handler, _OWNED, True)
    logger.addHandler(handler)


__all__ = ["ROOT_LOGGER", "configure_logging", "get_logger"]
