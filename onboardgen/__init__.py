"""Onboarding documentation generator driven by a hosted text-generation model."""

from .errors import (
    ConfigurationError,
    FatalGenerationError,
    FileSystemError,
    OnboardGenError,
    RetriesExhaustedError,
    StructuralParseWarning,
    TransientServiceError,
)
from .orchestrator import Orchestrator

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "FatalGenerationError",
    "FileSystemError",
    "OnboardGenError",
    "Orchestrator",
    "RetriesExhaustedError",
    "StructuralParseWarning",
    "TransientServiceError",
    "__version__",
]
