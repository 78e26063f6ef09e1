"""Post-processing of generation service responses."""

from .markers import ResponseParser

__all__ = ["ResponseParser"]
