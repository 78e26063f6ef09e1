"""Prompt construction for the documentation generator."""

from .builder import PromptBuilder
from .constants import DOCUMENT_NAMES

__all__ = ["DOCUMENT_NAMES", "PromptBuilder"]
