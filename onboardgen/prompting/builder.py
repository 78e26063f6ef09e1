"""Renders a ProjectContext into the documentation generation prompt."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..models import ProjectContext
from .constants import (
    DOCUMENT_GUIDANCE,
    DOCUMENT_NAMES,
    END_MARKER_FMT,
    GENERIC_GUIDANCE,
    NOT_AVAILABLE,
    START_MARKER_FMT,
)


class PromptBuilder:
    """Builds one deterministic instruction block per project context."""

    TEMPLATE_NAME = "prompt.j2"

    def __init__(
        self,
        templates_dir: Path | None = None,
        *,
        documents: Sequence[str] = DOCUMENT_NAMES,
    ) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.documents = tuple(documents)
        self._env = self._create_env(self.templates_dir)

    def build(self, context: ProjectContext) -> str:
        """Return the prompt text for `context`; identical input yields identical output."""
        template = self._env.get_template(self.TEMPLATE_NAME)
        return template.render(
            project_name=context.project_name or NOT_AVAILABLE,
            technology=context.technology,
            dependencies=self._format_dependencies(context.dependencies),
            scripts=self._format_scripts(context.scripts),
            file_tree=context.file_tree.rstrip("\n"),
            files=context.file_contents,
            not_available=NOT_AVAILABLE,
            documents=self.documents,
            document_list=", ".join(f"`{name}`" for name in self.documents),
        ).strip() + "\n"

    @staticmethod
    def _format_dependencies(dependencies: Sequence[str] | None) -> str:
        if dependencies is None:
            return NOT_AVAILABLE
        return ", ".join(dependencies)

    @staticmethod
    def _format_scripts(scripts: Mapping[str, str] | None) -> str:
        if scripts is None:
            return NOT_AVAILABLE
        return json.dumps(dict(scripts), indent=2)

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        env.globals["start_marker"] = lambda name: START_MARKER_FMT.format(name=name)
        env.globals["end_marker"] = lambda name: END_MARKER_FMT.format(name=name)
        env.globals["guidance"] = lambda name: DOCUMENT_GUIDANCE.get(name, GENERIC_GUIDANCE)
        return env


__all__ = ["PromptBuilder"]
