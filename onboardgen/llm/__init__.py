"""Generation service adapters."""

from .client import GenerationClient, backoff_seconds
from .model import GeminiModel, GenerationAttempt

__all__ = ["GeminiModel", "GenerationAttempt", "GenerationClient", "backoff_seconds"]
