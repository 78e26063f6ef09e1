"""End-to-end tests for onboardgen.orchestrator."""

from __future__ import annotations

from http.client import IncompleteRead
from pathlib import Path

import pytest

from onboardgen.errors import (
    ConfigurationError,
    FatalGenerationError,
    FileSystemError,
    RetriesExhaustedError,
    StructuralParseWarning,
)
from onboardgen.llm.client import GenerationClient
from onboardgen.llm.model import GeminiModel, GenerationAttempt
from onboardgen.orchestrator import Orchestrator
from onboardgen.prompting.constants import DOCUMENT_NAMES
from tests._fixtures.recording import ScriptedModel, overloaded

ENV = {"GEMINI_API_KEY": "test-key"}


def _orchestrator(model: ScriptedModel, notifier, sleeps: list[float]) -> Orchestrator:
    return Orchestrator(
        notifier=notifier,
        model_factory=lambda config: model,
        client_factory=lambda m, n: GenerationClient(
            m, notifier=n, sleep=sleeps.append, jitter=lambda: 0.0
        ),
    )


def _full_response() -> str:
    return "\n\n".join(
        f"[START_{name}]\n# {name}\n[END_{name}]" for name in DOCUMENT_NAMES
    )


def test_generate_writes_all_documents(project_builder, notifier) -> None:
    project_builder.write_package_json(
        {"name": "shop", "dependencies": {"dep1": "1.0.0"}, "scripts": {"start": "run"}}
    )
    project_builder.write({"src/main.jsx": "ReactDOM.render(<App />)"})
    model = ScriptedModel([GenerationAttempt.success(_full_response())])
    sleeps: list[float] = []

    outcome = _orchestrator(model, notifier, sleeps).run_generate(
        str(project_builder.path()), env=ENV
    )

    docs = project_builder.path() / "docs"
    assert outcome.count == 4
    assert outcome.warnings == []
    assert sorted(path.name for path in docs.iterdir()) == sorted(DOCUMENT_NAMES)
    assert (docs / "SETUP.md").read_text(encoding="utf-8") == "# SETUP.md"
    prompt = model.prompts[0]
    assert "**Project Name:** shop" in prompt
    assert "**Key Dependencies:** dep1" in prompt
    assert "ReactDOM.render(<App />)" in prompt
    assert sleeps == []


def test_scenario_single_readme_block(project_builder, notifier) -> None:
    model = ScriptedModel([GenerationAttempt.success("[START_README.md]Hello[END_README.md]")])

    outcome = _orchestrator(model, notifier, []).run_generate(str(project_builder.path()), env=ENV)

    docs = project_builder.path() / "docs"
    assert outcome.written == [docs / "README.md"]
    assert [p.name for p in docs.iterdir()] == ["README.md"]
    assert (docs / "README.md").read_text(encoding="utf-8") == "Hello"
    assert outcome.warnings == []
    assert not any("Warning" in message for message in notifier.of_kind("warn"))


def test_scenario_two_overloads_then_success(project_builder, notifier) -> None:
    model = ScriptedModel(
        [overloaded(), overloaded(), GenerationAttempt.success(_full_response())]
    )
    sleeps: list[float] = []

    outcome = _orchestrator(model, notifier, sleeps).run_generate(
        str(project_builder.path()), env=ENV
    )

    assert outcome.count == 4
    assert len(sleeps) == 2
    assert len(model.prompts) == 3
    assert len(set(model.prompts)) == 1


def test_scenario_retries_exhausted(project_builder, notifier) -> None:
    model = ScriptedModel([overloaded() for _ in range(5)])
    sleeps: list[float] = []

    with pytest.raises(RetriesExhaustedError):
        _orchestrator(model, notifier, sleeps).run_generate(str(project_builder.path()), env=ENV)

    assert len(model.prompts) == 5
    assert len(sleeps) == 4
    assert notifier.of_kind("fail") == ["An unrecoverable error occurred."]
    assert not (project_builder.path() / "docs").exists()


def test_fatal_generation_error_propagates(project_builder, notifier) -> None:
    model = ScriptedModel([GenerationAttempt.failure("status 401: unauthorized", status=401)])
    sleeps: list[float] = []

    with pytest.raises(FatalGenerationError):
        _orchestrator(model, notifier, sleeps).run_generate(str(project_builder.path()), env=ENV)

    assert sleeps == []


def test_unstructured_response_warns_without_writing(project_builder, notifier) -> None:
    model = ScriptedModel([GenerationAttempt.success("I cannot help with that.")])

    outcome = _orchestrator(model, notifier, []).run_generate(str(project_builder.path()), env=ENV)

    assert outcome.count == 0
    assert len(outcome.warnings) == 1
    assert isinstance(outcome.warnings[0], StructuralParseWarning)
    assert any("valid document blocks" in message for message in notifier.of_kind("warn"))
    assert list((project_builder.path() / "docs").iterdir()) == []


def test_missing_credential_fails_before_analysis(project_builder, notifier) -> None:
    model = ScriptedModel([])
    orchestrator = _orchestrator(model, notifier, [])

    with pytest.raises(ConfigurationError):
        orchestrator.run_generate(str(project_builder.path()), env={})

    assert notifier.events == []
    assert model.prompts == []


def test_config_file_drives_analysis(project_builder, notifier) -> None:
    project_builder.write(
        {
            ".onboardgen.yml": """
            analysis:
              key_files: [app/server.py]
              ignore: [fixtures]
            """,
            "app/server.py": "def serve(): ...",
            "fixtures/data.json": "{}",
        }
    )
    model = ScriptedModel([GenerationAttempt.success("")])

    _orchestrator(model, notifier, []).run_generate(str(project_builder.path()), env=ENV)

    prompt = model.prompts[0]
    assert "--- File: app/server.py ---" in prompt
    assert "fixtures" not in prompt


def test_default_model_factory_uses_config(project_builder, monkeypatch) -> None:
    captured = {}

    def fake_generate(self, prompt):
        captured["model"] = self.model
        captured["api_key"] = self.api_key
        return GenerationAttempt.success("[START_README.md]hi[END_README.md]")

    monkeypatch.setattr(GeminiModel, "generate", fake_generate)

    outcome = Orchestrator().run_generate(
        str(project_builder.path()), env={**ENV, "ONBOARDGEN_MODEL": "gemini-test"}
    )

    assert outcome.count == 1
    assert captured == {"model": "gemini-test", "api_key": "test-key"}


def test_missing_project_directory(tmp_path: Path, notifier) -> None:
    model = ScriptedModel([])

    with pytest.raises(FileSystemError) as excinfo:
        _orchestrator(model, notifier, []).run_generate(str(tmp_path / "missing"), env=ENV)

    assert "not found" in str(excinfo.value)
    assert notifier.of_kind("fail") == ["An unrecoverable error occurred."]


def test_truncated_http_response_fails_cleanly(project_builder, notifier, monkeypatch) -> None:
    class TruncatedResponse:
        def read(self):
            raise IncompleteRead(b"partial", 10)

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    monkeypatch.setattr(
        "onboardgen.llm.model.urlopen", lambda request, timeout=None: TruncatedResponse()
    )

    with pytest.raises(FatalGenerationError, match="IncompleteRead"):
        Orchestrator(notifier=notifier).run_generate(str(project_builder.path()), env=ENV)

    assert notifier.of_kind("fail") == ["An unrecoverable error occurred."]


def test_project_config_cannot_redirect_api_key(project_builder, notifier, monkeypatch) -> None:
    project_builder.write_package_json({"name": "demo"})
    project_builder.write({".onboardgen.yml": "llm:\n  base_url: https://attacker.example/v1\n"})
    requests = []

    class Response:
        def read(self):
            return b'{"candidates": [{"content": {"parts": [{"text": "[START_README.md]hi[END_README.md]"}]}}]}'

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

    def fake_urlopen(request, timeout=None):
        requests.append(request)
        return Response()

    monkeypatch.setattr("onboardgen.llm.model.urlopen", fake_urlopen)

    outcome = Orchestrator(notifier=notifier).run_generate(str(project_builder.path()), env=ENV)

    assert outcome.count == 1
    assert len(requests) == 1
    assert requests[0].full_url.startswith("https://generativelanguage.googleapis.com/v1beta/")
    assert "attacker.example" not in requests[0].full_url
