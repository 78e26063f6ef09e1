"""Project analysis: bounded tree rendering, manifest facts and key-file sampling."""

from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import FrozenSet, Iterable, List, Sequence

from .errors import FileSystemError
from .logging import get_logger
from .manifests import read_manifest
from .models import FileSample, ProjectContext
from .prompting.constants import DEFAULT_KEY_FILES

IGNORED_NAMES: FrozenSet[str] = frozenset(
    {
        ".git",
        ".vscode",
        ".idea",
        ".venv",
        "__pycache__",
        "node_modules",
        "dist",
        "build",
        "package-lock.json",
        "yarn.lock",
        "pnpm-lock.yaml",
    }
)

MAX_SAMPLE_CHARS = 2000
DEFAULT_MAX_DEPTH = 3

_BRANCH = "├── "
_LAST_BRANCH = "└── "
_PIPE = "│   "
_SPACE = "    "


class ProjectAnalyzer:
    """Builds a ProjectContext for a target directory."""

    def __init__(
        self,
        *,
        key_files: Sequence[str] | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        extra_ignores: Iterable[str] = (),
    ) -> None:
        self.key_files = _dedupe(key_files if key_files is not None else DEFAULT_KEY_FILES)
        self.max_depth = max_depth
        self.ignored = IGNORED_NAMES | frozenset(extra_ignores)
        self.logger = get_logger("analyzer")

    def analyze(self, directory: str | os.PathLike[str]) -> ProjectContext:
        """Return the context snapshot for the project at `directory`."""
        root = Path(directory).expanduser().resolve()
        if not root.exists():
            raise FileSystemError(f"Project path not found: {directory}")
        if not root.is_dir():
            raise FileSystemError(f"Project path is not a directory: {directory}")

        file_tree = self.render_tree(root)

        project_name = root.name
        technology = "Unknown"
        dependencies = None
        scripts = None
        manifest = read_manifest(root)
        if manifest is not None:
            technology = manifest.technology
            project_name = manifest.name or project_name
            dependencies = tuple(manifest.dependencies)
            if manifest.scripts is not None:
                scripts = MappingProxyType(dict(manifest.scripts))
            self.logger.debug(
                "Detected %s manifest with %d dependencies", technology, len(dependencies)
            )

        samples = self.sample_files(root)
        self.logger.debug("Sampled %d of %d key files", len(samples), len(self.key_files))

        return ProjectContext(
            project_name=project_name,
            technology=technology,
            dependencies=dependencies,
            scripts=scripts,
            file_tree=file_tree,
            file_contents=tuple(samples),
        )

    def render_tree(self, root: Path) -> str:
        """Render the directory tree below `root` with box-drawing prefixes."""
        lines: List[str] = []
        self._walk(root, "", 0, lines)
        return "".join(lines)

    def _walk(self, directory: Path, prefix: str, depth: int, lines: List[str]) -> None:
        if depth > self.max_depth:
            return
        try:
            with os.scandir(directory) as iterator:
                entries = sorted(
                    (entry for entry in iterator if entry.name not in self.ignored),
                    key=lambda entry: entry.name,
                )
        except OSError as exc:
            self.logger.debug("Skipping unreadable directory %s: %s", directory, exc)
            return

        for index, entry in enumerate(entries):
            is_last = index == len(entries) - 1
            lines.append(f"{prefix}{_LAST_BRANCH if is_last else _BRANCH}{entry.name}\n")
            try:
                is_dir = entry.is_dir()
            except OSError:
                is_dir = False
            if is_dir:
                child_prefix = prefix + (_SPACE if is_last else _PIPE)
                self._walk(Path(entry.path), child_prefix, depth + 1, lines)

    def sample_files(self, root: Path) -> List[FileSample]:
        """Read each key file that exists, truncating its content."""
        samples: List[FileSample] = []
        for relative in self.key_files:
            path = root / relative
            try:
                content = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                self.logger.debug("Key file %s not sampled: %s", relative, exc)
                continue
            samples.append(FileSample(path=relative, content=content[:MAX_SAMPLE_CHARS]))
        return samples


def _dedupe(paths: Iterable[str]) -> tuple[str, ...]:
    seen: List[str] = []
    for path in paths:
        if path not in seen:
            seen.append(path)
    return tuple(seen)


__all__ = ["DEFAULT_KEY_FILES", "IGNORED_NAMES", "MAX_SAMPLE_CHARS", "ProjectAnalyzer"]
