"""HTTP adapter for the Gemini text generation API."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.client import HTTPException
from typing import Optional, Protocol
from urllib.error import HTTPError, URLError
from urllib.parse import quote
from urllib.request import Request, urlopen

from ..config import DEFAULT_BASE_URL, DEFAULT_MODEL, LLMConfig

TRANSIENT = "transient"
FATAL = "fatal"

_OVERLOAD_STATUS = 503
_OVERLOAD_MARKERS = ("503", "overloaded")


@dataclass(frozen=True)
class GenerationAttempt:
    """Outcome of a single call: either response text or a classified error."""

    text: Optional[str] = None
    error: Optional[str] = None
    kind: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, text: str) -> "GenerationAttempt":
        return cls(text=text)

    @classmethod
    def failure(cls, message: str, *, status: int | None = None) -> "GenerationAttempt":
        kind = TRANSIENT if is_overload_signal(message, status) else FATAL
        return cls(error=message, kind=kind)


class GenerationModel(Protocol):
    """Anything able to turn a prompt into a GenerationAttempt."""

    def generate(self, prompt: str) -> GenerationAttempt: ...


def is_overload_signal(message: str, status: int | None = None) -> bool:
    """Return True when a failure indicates temporary capacity exhaustion."""
    if status == _OVERLOAD_STATUS:
        return True
    lowered = message.lower()
    return any(marker in lowered for marker in _OVERLOAD_MARKERS)


class GeminiModel:
    """Model handle constructed once per run and shared with the client."""

    def __init__(
        self,
        api_key: str,
        *,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        temperature: Optional[float] = None,
        request_timeout: float = 120.0,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.request_timeout = request_timeout

    @classmethod
    def from_config(cls, api_key: str, config: LLMConfig) -> "GeminiModel":
        return cls(
            api_key,
            model=config.model,
            base_url=config.base_url,
            temperature=config.temperature,
            request_timeout=config.request_timeout,
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{quote(self.model, safe='')}:generateContent"

    def generate(self, prompt: str) -> GenerationAttempt:
        """Send `prompt` and return the response text or a classified failure."""
        payload: dict[str, object] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if self.temperature is not None:
            payload["generationConfig"] = {"temperature": self.temperature}

        request = Request(
            self.endpoint,
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "x-goog-api-key": self.api_key,
            },
            method="POST",
        )

        try:
            with urlopen(request, timeout=self.request_timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            message = self._error_message(detail) or str(exc.reason)
            return GenerationAttempt.failure(
                f"Gemini request failed with status {exc.code}: {message}",
                status=exc.code,
            )
        except URLError as exc:
            return GenerationAttempt.failure(f"Gemini request failed: {exc.reason}")
        except TimeoutError as exc:
            return GenerationAttempt.failure(f"Gemini request timed out: {exc}")
        except (OSError, HTTPException) as exc:
            return GenerationAttempt(
                error=f"Gemini connection failed: {exc.__class__.__name__}: {exc}", kind=FATAL
            )

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return GenerationAttempt(error="Gemini returned invalid JSON", kind=FATAL)

        text = self._extract_text(response_payload)
        if not text:
            return GenerationAttempt(error="Gemini returned an empty response", kind=FATAL)
        return GenerationAttempt.success(text)

    @staticmethod
    def _error_message(detail: str) -> str:
        detail = detail.strip()
        if not detail:
            return ""
        try:
            payload = json.loads(detail)
        except json.JSONDecodeError:
            return detail
        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
        return detail

    @staticmethod
    def _extract_text(payload: object) -> str:
        if not isinstance(payload, dict):
            return ""
        candidates = payload.get("candidates")
        if not isinstance(candidates, list) or not candidates:
            return ""
        first = candidates[0]
        content = first.get("content") if isinstance(first, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            return ""
        texts = [part["text"] for part in parts if isinstance(part, dict) and isinstance(part.get("text"), str)]
        return "".join(texts)


__all__ = ["FATAL", "TRANSIENT", "GeminiModel", "GenerationAttempt", "GenerationModel", "is_overload_signal"]
