"""Logging setup shared by the CLI and the pipeline stages.

Two streams share the ``onboardgen`` logger tree. Progress notifications
(``onboardgen.progress``) always reach the console with a status prefix.
Stage loggers (``onboardgen.analyzer``, ``onboardgen.llm.client``, ...) stay
at warnings on the console unless verbose output is requested. The optional
log file receives every record.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping

ROOT_LOGGER = "onboardgen"
PROGRESS_LOGGER = f"{ROOT_LOGGER}.progress"

# Attribute set on progress records through ``extra``.
PROGRESS_ATTR = "progress_kind"

PROGRESS_PREFIXES: Mapping[str, str] = {
    "start": "...",
    "succeed": "[ok]",
    "warn": "[warn]",
    "fail": "[fail]",
}

_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the onboardgen hierarchy."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)


class ConsoleFormatter(logging.Formatter):
    """Prefix progress records by notification kind and stage records by level."""

    def format(self, record: logging.LogRecord) -> str:
        kind = getattr(record, PROGRESS_ATTR, None)
        message = record.getMessage()
        if kind is not None:
            prefix = PROGRESS_PREFIXES.get(kind, "")
            return f"{prefix} {message}" if prefix else message
        stage = record.name[len(ROOT_LOGGER) + 1:] or ROOT_LOGGER
        text = f"[{stage}] {record.levelname.lower()}: {message}"
        if record.exc_info:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class ConsoleFilter(logging.Filter):
    """Let progress through at info; hold stage loggers to warnings unless verbose."""

    def __init__(self, verbose: bool) -> None:
        super().__init__()
        self.verbose = verbose

    def filter(self, record: logging.LogRecord) -> bool:
        if self.verbose:
            return True
        if record.name == PROGRESS_LOGGER:
            return record.levelno >= logging.INFO
        return record.levelno >= logging.WARNING


def configure_logging(*, verbose: bool = False, log_file: Path | None = None) -> logging.Logger:
    """Install console (and optional file) handlers on the onboardgen logger.

    Calling it again replaces the handlers installed by the previous call.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(logging.DEBUG if verbose or log_file is not None else logging.INFO)
    logger.propagate = False
    for handler in list(logger.handlers):
        if getattr(handler, "_onboardgen", False):
            logger.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler()
    console.setFormatter(ConsoleFormatter())
    console.addFilter(ConsoleFilter(verbose))
    _install(logger, console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT))
        _install(logger, sink)

    return logger


def _install(logger: logging.Logger, handler: logging.Handler) -> None:
    handler._onboardgen = True  # type: ignore[attr-defined]
    logger.addHandler(handler)


__all__ = [
    "ConsoleFilter",
    "ConsoleFormatter",
    "PROGRESS_ATTR",
    "PROGRESS_LOGGER",
    "PROGRESS_PREFIXES",
    "ROOT_LOGGER",
    "configure_logging",
    "get_logger",
]
