"""Shared constants for documentation prompts, response markers and analysis."""

from __future__ import annotations

from typing import Mapping

DOCUMENT_NAMES: tuple[str, ...] = (
    "README.md",
    "SETUP.md",
    "ARCHITECTURE.md",
    "CONTRIBUTING.md",
)

# Writing instructions per document; names not listed get GENERIC_GUIDANCE.
DOCUMENT_GUIDANCE: Mapping[str, str] = {
    "README.md": (
        "Write a detailed project README. Explain the project's purpose and features "
        "by referencing specific components found in the code."
    ),
    "SETUP.md": (
        "A detailed, step-by-step setup guide. Mention any environment variables the code expects."
    ),
    "ARCHITECTURE.md": (
        "This is the most important part. Analyze the provided code to describe the "
        "architecture: entry points, top-level components, routing, and data fetching "
        "patterns, including any API endpoints you can infer."
    ),
    "CONTRIBUTING.md": (
        "A standard contributing guide, plus a short section on the project's coding "
        "style as inferred from the provided code."
    ),
}
GENERIC_GUIDANCE = "Write this document for a developer joining the project, grounded in the provided code."

# Project-relative files sampled into the prompt when no key_files are configured.
DEFAULT_KEY_FILES: tuple[str, ...] = (
    "vite.config.js",
    "src/main.jsx",
    "src/App.jsx",
    "src/components/Header.jsx",
    "src/components/Cart.jsx",
)

START_MARKER_FMT = "[START_{name}]"
END_MARKER_FMT = "[END_{name}]"

NOT_AVAILABLE = "N/A"


__all__ = [
    "DEFAULT_KEY_FILES",
    "DOCUMENT_GUIDANCE",
    "DOCUMENT_NAMES",
    "END_MARKER_FMT",
    "GENERIC_GUIDANCE",
    "NOT_AVAILABLE",
    "START_MARKER_FMT",
]
