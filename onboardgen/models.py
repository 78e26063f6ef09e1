"""Core data models shared across onboardgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Tuple

from .errors import StructuralParseWarning


@dataclass(frozen=True)
class FileSample:
    """Truncated contents of one key project file."""

    path: str
    content: str


@dataclass(frozen=True)
class ProjectContext:
    """Immutable snapshot of a project used to build the generation prompt."""

    project_name: str
    technology: str = "Unknown"
    dependencies: Optional[Tuple[str, ...]] = None
    scripts: Optional[Mapping[str, str]] = None
    file_tree: str = ""
    file_contents: Tuple[FileSample, ...] = ()


@dataclass
class RetryState:
    """Attempt bookkeeping for one generation call sequence."""

    max_attempts: int
    attempt: int = 0
    delays: List[float] = field(default_factory=list)

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


# Document name -> trimmed content, in the order blocks appeared in the response.
ParsedDocumentSet = Dict[str, str]


@dataclass
class GenerationOutcome:
    """Result of a full generate run."""

    docs_dir: Path
    written: List[Path]
    warnings: List[StructuralParseWarning] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.written)


__all__ = [
    "FileSample",
    "GenerationOutcome",
    "ParsedDocumentSet",
    "ProjectContext",
    "RetryState",
]
