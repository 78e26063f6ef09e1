"""Persists parsed documents under the project's docs directory."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping

from .errors import FileSystemError
from .logging import get_logger

DOCS_DIRNAME = "docs"


class DocWriter:
    """Writes one file per parsed document, overwriting existing copies."""

    def __init__(self) -> None:
        self.logger = get_logger("writer")

    def write(self, target_dir: Path, documents: Mapping[str, str]) -> List[Path]:
        """Write `documents` to ``target_dir/docs`` and return the written paths."""
        docs_dir = Path(target_dir) / DOCS_DIRNAME
        try:
            docs_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(f"Unable to create output directory {docs_dir}: {exc}") from exc

        written: List[Path] = []
        for name, content in documents.items():
            path = docs_dir / name
            try:
                path.write_text(content, encoding="utf-8")
            except OSError as exc:
                raise FileSystemError(f"Unable to write {path}: {exc}") from exc
            self.logger.debug("Wrote %s (%d chars)", path, len(content))
            written.append(path)
        return written


__all__ = ["DOCS_DIRNAME", "DocWriter"]
