"""Configuration loading for onboardgen (.onboardgen.yml, environment and .env)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml
from dotenv import dotenv_values, load_dotenv

from .errors import ConfigurationError
from .logging import get_logger

CONFIG_FILENAME = ".onboardgen.yml"

ENV_API_KEY_KEYS = ("GEMINI_API_KEY", "GOOGLE_API_KEY")
ENV_MODEL_KEYS = ("ONBOARDGEN_MODEL",)
ENV_BASE_URL_KEYS = ("ONBOARDGEN_BASE_URL",)

DEFAULT_MODEL = "gemini-1.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


@dataclass
class LLMConfig:
    """Generation service settings."""

    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    temperature: Optional[float] = None
    request_timeout: float = 120.0


@dataclass
class AnalysisConfig:
    """Project analysis tuning from .onboardgen.yml."""

    max_depth: int = 3
    ignore: List[str] = field(default_factory=list)
    key_files: Optional[List[str]] = None


@dataclass
class OnboardGenConfig:
    """Effective settings for one generate run."""

    root: Path
    api_key: str
    llm: LLMConfig = field(default_factory=LLMConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)


def load_environment(target: Path | None = None) -> None:
    """Load `.env` files without overriding variables already set.

    The working directory `.env` is loaded in full unless it lies inside the
    analyzed project. A `.env` belonging to the project only contributes the
    API key, so a project cannot point the run at another service host.
    """
    cwd = Path.cwd().resolve()
    if target is None:
        load_dotenv(cwd / ".env", override=False)
        return
    target = target.resolve()
    if cwd == target or target in cwd.parents:
        _load_api_key_only(cwd / ".env")
    else:
        load_dotenv(cwd / ".env", override=False)
    _load_api_key_only(target / ".env")


def _load_api_key_only(path: Path) -> None:
    values = dotenv_values(path)
    for key in ENV_API_KEY_KEYS:
        value = values.get(key)
        if value and not os.environ.get(key):
            os.environ[key] = value


def resolve_api_key(env: Mapping[str, str] | None = None) -> str:
    """Return the generation service API key or raise ConfigurationError."""
    value = _first_env_value(ENV_API_KEY_KEYS, env)
    if not value:
        raise ConfigurationError(
            "GEMINI_API_KEY not found. Set it in the environment or a .env file."
        )
    return value


def load_config(
    root: Path,
    *,
    env: Mapping[str, str] | None = None,
    model: str | None = None,
    base_url: str | None = None,
) -> OnboardGenConfig:
    """Build the run configuration for the project at `root`.

    The API key is resolved first so a missing credential fails before any
    file is read. The service base URL comes from `base_url` or the
    environment only; `.onboardgen.yml` belongs to the analyzed project and
    may not redirect the API key.
    """
    api_key = resolve_api_key(env)
    root = root.expanduser().resolve()
    data = _read_config(root / CONFIG_FILENAME)

    llm = LLMConfig()
    llm_data = _as_dict(data.get("llm"))
    llm.model = (
        model
        or _first_env_value(ENV_MODEL_KEYS, env)
        or _as_str(llm_data.get("model"))
        or DEFAULT_MODEL
    )
    if "base_url" in llm_data:
        get_logger("config").warning(
            "Ignoring llm.base_url in %s; set %s or pass --base-url instead.",
            CONFIG_FILENAME,
            ENV_BASE_URL_KEYS[0],
        )
    base_url = base_url or _first_env_value(ENV_BASE_URL_KEYS, env) or DEFAULT_BASE_URL
    llm.base_url = base_url.rstrip("/")
    llm.temperature = _as_float(llm_data.get("temperature"))
    timeout = _as_float(llm_data.get("request_timeout"))
    if timeout is not None:
        if timeout <= 0:
            raise ConfigurationError("llm.request_timeout must be positive")
        llm.request_timeout = timeout

    analysis = AnalysisConfig()
    analysis_data = _as_dict(data.get("analysis"))
    if analysis_data:
        max_depth = _as_int(analysis_data.get("max_depth"))
        if max_depth is not None:
            if max_depth < 0:
                raise ConfigurationError("analysis.max_depth must not be negative")
            analysis.max_depth = max_depth
        analysis.ignore = _as_str_list(analysis_data.get("ignore"))
        if "key_files" in analysis_data:
            analysis.key_files = _as_str_list(analysis_data.get("key_files"))

    return OnboardGenConfig(root=root, api_key=api_key, llm=llm, analysis=analysis)


def _read_config(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(keys: Sequence[str], env: Mapping[str, str] | None) -> str | None:
    source = os.environ if env is None else env
    for key in keys:
        value = source.get(key)
        if value:
            return value
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "AnalysisConfig",
    "CONFIG_FILENAME",
    "LLMConfig",
    "OnboardGenConfig",
    "load_config",
    "load_environment",
    "resolve_api_key",
]
