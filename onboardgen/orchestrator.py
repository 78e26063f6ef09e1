"""Pipeline orchestration for the generate flow."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Mapping, Optional

from .analyzer import ProjectAnalyzer
from .config import OnboardGenConfig, load_config, load_environment
from .errors import OnboardGenError, StructuralParseWarning
from .llm.client import GenerationClient
from .llm.model import GeminiModel, GenerationModel
from .logging import get_logger
from .models import GenerationOutcome
from .notify import LogNotifier, Notifier
from .postproc.markers import ResponseParser
from .prompting.builder import PromptBuilder
from .prompting.constants import DOCUMENT_NAMES
from .writer import DOCS_DIRNAME, DocWriter

ModelFactory = Callable[[OnboardGenConfig], GenerationModel]


def _default_model_factory(config: OnboardGenConfig) -> GenerationModel:
    return GeminiModel.from_config(config.api_key, config.llm)


class Orchestrator:
    """Runs Analyzer -> PromptBuilder -> GenerationClient -> ResponseParser -> DocWriter."""

    def __init__(
        self,
        *,
        notifier: Notifier | None = None,
        analyzer: ProjectAnalyzer | None = None,
        prompt_builder: PromptBuilder | None = None,
        model_factory: ModelFactory | None = None,
        client_factory: Callable[[GenerationModel, Notifier], GenerationClient] | None = None,
        parser: ResponseParser | None = None,
        writer: DocWriter | None = None,
    ) -> None:
        self.notifier = notifier or LogNotifier()
        self._analyzer = analyzer
        self.prompt_builder = prompt_builder or PromptBuilder()
        self._model_factory = model_factory or _default_model_factory
        self._client_factory = client_factory or (
            lambda model, notifier: GenerationClient(model, notifier=notifier)
        )
        self.parser = parser or ResponseParser(allowed=DOCUMENT_NAMES)
        self.writer = writer or DocWriter()
        self.logger = get_logger("orchestrator")

    def run_generate(
        self,
        path: str,
        *,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        env: Mapping[str, str] | None = None,
    ) -> GenerationOutcome:
        """Generate onboarding docs for the project at `path`."""
        target = Path(path).expanduser().resolve()
        if env is None:
            load_environment(target)
        # Credentials are checked before any analysis work.
        config = load_config(target, env=env, model=model, base_url=base_url)
        self.logger.debug("Using model %s at %s", config.llm.model, config.llm.base_url)
        generation_model = self._model_factory(config)

        try:
            self.notifier.start("1. Analyzing project structure and reading key files...")
            context = self._resolve_analyzer(config).analyze(target)
            self.notifier.succeed("Project analysis complete.")

            prompt = self.prompt_builder.build(context)
            self.logger.debug("Prompt length: %d chars", len(prompt))

            self.notifier.start("2. Generating documentation... (this may take a moment)")
            client = self._client_factory(generation_model, self.notifier)
            response = client.generate(prompt)
            self.notifier.succeed("Documentation generated successfully.")

            self.notifier.start("3. Saving documentation files...")
            documents = self.parser.parse(response)
            written = self.writer.write(target, documents)
        except (OnboardGenError, OSError) as exc:
            self.notifier.fail("An unrecoverable error occurred.")
            self.logger.debug("Generate run failed: %s", exc, exc_info=True)
            raise

        outcome = GenerationOutcome(docs_dir=target / DOCS_DIRNAME, written=written)
        if not written:
            warning = StructuralParseWarning(
                "Could not find any valid document blocks in the AI response."
            )
            outcome.warnings.append(warning)
            self.notifier.warn(f"Warning: {warning}")
        else:
            self.notifier.succeed(f"Files saved ({len(written)} of {len(DOCUMENT_NAMES)}).")
        return outcome

    def _resolve_analyzer(self, config: OnboardGenConfig) -> ProjectAnalyzer:
        if self._analyzer is not None:
            return self._analyzer
        return ProjectAnalyzer(
            key_files=config.analysis.key_files,
            max_depth=config.analysis.max_depth,
            extra_ignores=config.analysis.ignore,
        )


__all__ = ["Orchestrator"]
