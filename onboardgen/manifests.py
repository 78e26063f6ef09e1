"""Readers for project manifest files (package.json, pyproject.toml, requirements.txt)."""

from __future__ import annotations

import json
import re
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .logging import get_logger

logger = get_logger("manifests")


@dataclass
class ManifestInfo:
    """Facts extracted from a root-level manifest."""

    technology: str
    name: Optional[str]
    dependencies: List[str]
    scripts: Optional[Dict[str, str]]


def read_manifest(root: Path) -> ManifestInfo | None:
    """Return manifest facts for the first recognised manifest at `root`."""
    package_json = root / "package.json"
    if package_json.is_file():
        return load_package_json(package_json)
    pyproject = root / "pyproject.toml"
    requirements = root / "requirements.txt"
    if pyproject.is_file() or requirements.is_file():
        return load_python_manifest(root)
    return None


def load_package_json(path: Path) -> ManifestInfo:
    """Parse a Node.js package.json.

    Only runtime dependency names are kept; versions are dropped.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.debug("Unable to parse %s: %s", path, exc)
        data = {}
    if not isinstance(data, dict):
        data = {}

    name = data.get("name") if isinstance(data.get("name"), str) else None
    deps = data.get("dependencies")
    dependencies = list(deps.keys()) if isinstance(deps, dict) else []
    raw_scripts = data.get("scripts")
    scripts: Optional[Dict[str, str]] = None
    if isinstance(raw_scripts, dict):
        scripts = {str(key): str(value) for key, value in raw_scripts.items()}
    return ManifestInfo(
        technology="Node.js/JavaScript",
        name=name or None,
        dependencies=dependencies,
        scripts=scripts,
    )


def load_python_manifest(root: Path) -> ManifestInfo:
    """Collect Python project facts from pyproject.toml and requirements.txt."""
    name: Optional[str] = None
    dependencies: List[str] = []
    scripts: Optional[Dict[str, str]] = None

    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        name, deps, scripts = _parse_pyproject(pyproject)
        dependencies.extend(deps)

    requirements = root / "requirements.txt"
    if requirements.is_file():
        for dep in _parse_requirements(requirements):
            if dep not in dependencies:
                dependencies.append(dep)

    return ManifestInfo(technology="Python", name=name, dependencies=dependencies, scripts=scripts)


def _parse_requirements(path: Path) -> List[str]:
    packages: List[str] = []
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        logger.debug("Unable to read %s: %s", path, exc)
        return packages
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith(("#", "-")):
            continue
        name = _requirement_name(stripped)
        if name:
            packages.append(name)
    return packages


def _parse_pyproject(path: Path) -> tuple[Optional[str], List[str], Optional[Dict[str, str]]]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.debug("Unable to parse %s: %s", path, exc)
        return None, [], None

    name: Optional[str] = None
    raw_deps: List[object] = []
    scripts: Optional[Dict[str, str]] = None

    project = data.get("project")
    if isinstance(project, dict):
        if isinstance(project.get("name"), str):
            name = project["name"]
        raw_deps.extend(project.get("dependencies", []) or [])
        project_scripts = project.get("scripts")
        if isinstance(project_scripts, dict):
            scripts = {str(key): str(value) for key, value in project_scripts.items()}

    tool = data.get("tool")
    poetry = tool.get("poetry", {}) if isinstance(tool, dict) else {}
    if isinstance(poetry, dict):
        if name is None and isinstance(poetry.get("name"), str):
            name = poetry["name"]
        poetry_deps = poetry.get("dependencies", {}) or {}
        if isinstance(poetry_deps, dict):
            raw_deps.extend(poetry_deps.keys())
        poetry_scripts = poetry.get("scripts")
        if scripts is None and isinstance(poetry_scripts, dict):
            scripts = {str(key): str(value) for key, value in poetry_scripts.items()}

    dependencies: List[str] = []
    for dep in raw_deps:
        if not isinstance(dep, str):
            continue
        dep_name = _requirement_name(dep)
        if dep_name and dep_name.lower() != "python" and dep_name not in dependencies:
            dependencies.append(dep_name)
    return name, dependencies, scripts


def _requirement_name(spec: str) -> str:
    return re.split(r"[\s<>=!~;\[@]", spec, maxsplit=1)[0].strip()


__all__ = ["ManifestInfo", "load_package_json", "load_python_manifest", "read_manifest"]
