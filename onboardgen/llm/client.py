"""Retrying client around the generation model."""

from __future__ import annotations

import random
import time
from typing import Callable

from ..errors import FatalGenerationError, RetriesExhaustedError, TransientServiceError
from ..logging import get_logger
from ..models import RetryState
from ..notify import LogNotifier, Notifier
from .model import TRANSIENT, GenerationModel

MAX_ATTEMPTS = 5


def backoff_seconds(attempt: int, *, jitter: Callable[[], float] = random.random) -> float:
    """Delay before the next call after `attempt` retries (1-indexed).

    The result lies in ``[2**attempt, 2**attempt + 1)`` seconds.
    """
    delay_ms = (2 ** attempt) * 1000 + jitter() * 1000
    return delay_ms / 1000


class GenerationClient:
    """Calls the model, retrying transient overload failures with exponential backoff."""

    def __init__(
        self,
        model: GenerationModel,
        *,
        notifier: Notifier | None = None,
        max_attempts: int = MAX_ATTEMPTS,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[], float] = random.random,
    ) -> None:
        self.model = model
        self.notifier = notifier or LogNotifier()
        self.max_attempts = max_attempts
        self._sleep = sleep
        self._jitter = jitter
        self.logger = get_logger("llm.client")

    def generate(self, prompt: str) -> str:
        """Return raw response text for `prompt`.

        Raises FatalGenerationError for non-transient failures and
        RetriesExhaustedError once the attempt budget is spent.
        """
        state = RetryState(max_attempts=self.max_attempts)
        while True:
            result = self.model.generate(prompt)
            if result.ok:
                return result.text or ""

            message = result.error or "unknown generation error"
            if result.kind != TRANSIENT:
                raise FatalGenerationError(message)

            state.attempt += 1
            self.logger.debug("Transient failure %d/%d: %s", state.attempt, state.max_attempts, message)
            if state.exhausted:
                raise RetriesExhaustedError(state.attempt, last_error=message) from TransientServiceError(message)

            delay = backoff_seconds(state.attempt, jitter=self._jitter)
            state.delays.append(delay)
            self.notifier.warn(
                f"Model is overloaded. Retrying in {round(delay)}s... "
                f"(Attempt {state.attempt}/{state.max_attempts})"
            )
            self._sleep(delay)
            self.notifier.start("Retrying to generate documentation...")


__all__ = ["MAX_ATTEMPTS", "GenerationClient", "backoff_seconds"]
