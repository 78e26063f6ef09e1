"""Error taxonomy for the documentation generation pipeline."""

from __future__ import annotations


class OnboardGenError(RuntimeError):
    """Base class for failures that abort an onboardgen run."""


class ConfigurationError(OnboardGenError):
    """Raised when required settings (such as the API key) are missing or invalid."""


class TransientServiceError(OnboardGenError):
    """The generation service reported a temporary overload."""


class RetriesExhaustedError(OnboardGenError):
    """Transient failures persisted past the attempt budget."""

    def __init__(self, attempts: int, last_error: str | None = None) -> None:
        super().__init__(
            "The model is overloaded and all retry attempts have failed. Please try again later."
        )
        self.attempts = attempts
        self.last_error = last_error


class FatalGenerationError(OnboardGenError):
    """The generation service failed in a way retrying cannot fix."""


class FileSystemError(OnboardGenError):
    """Output could not be written to disk."""


class StructuralParseWarning(UserWarning):
    """The service response contained no recognisable document blocks."""


__all__ = [
    "ConfigurationError",
    "FatalGenerationError",
    "FileSystemError",
    "OnboardGenError",
    "RetriesExhaustedError",
    "StructuralParseWarning",
    "TransientServiceError",
]
