"""Progress notifications emitted while the pipeline runs."""

from __future__ import annotations

import logging
from typing import Protocol

from .logging import PROGRESS_ATTR, get_logger


class Notifier(Protocol):
    """Minimal progress interface consumed by the pipeline."""

    def start(self, message: str) -> None: ...

    def succeed(self, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def fail(self, message: str) -> None: ...


class LogNotifier:
    """Routes progress notifications to the onboardgen logger."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or get_logger("progress")

    def start(self, message: str) -> None:
        self._emit(logging.INFO, "start", message)

    def succeed(self, message: str) -> None:
        self._emit(logging.INFO, "succeed", message)

    def warn(self, message: str) -> None:
        self._emit(logging.WARNING, "warn", message)

    def fail(self, message: str) -> None:
        self._emit(logging.ERROR, "fail", message)

    def _emit(self, level: int, kind: str, message: str) -> None:
        self.logger.log(level, "%s", message, extra={PROGRESS_ATTR: kind})


__all__ = ["LogNotifier", "Notifier"]
