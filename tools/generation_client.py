"""Generation client abstractions and a Gemini implementation."""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from collections import deque
from typing import Any, Deque, Dict, Iterable, List, Optional

import google.generativeai as genai

STRUCTURED_JSON = "structured-json"
_CODE_FENCE_START = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_CODE_FENCE_END = re.compile(r"\s*```$")

Message = Dict[str, str]


class GenerationError(RuntimeError):
    """Raised when the generator fails or returns output that cannot be used."""


def parse_json_response(text: str) -> Any:
    """Strip an optional Markdown code fence and parse the JSON body."""

    cleaned = _CODE_FENCE_END.sub("", _CODE_FENCE_START.sub("", text.strip())).strip()
    try:
        return json.loads(cleaned)
    except ValueError as exc:
        raise GenerationError(f"Generator returned malformed JSON: {exc}") from exc


class GenerationClient(ABC):
    """Text-completion boundary used by the style report agent."""

    @abstractmethod
    def complete(
        self,
        messages: List[Message],
        *,
        response_format: str = STRUCTURED_JSON,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Return the parsed completion for ``messages``.

        With ``response_format="structured-json"`` the return value is the
        decoded JSON document, otherwise the raw text.
        """


class GeminiGenerationClient(GenerationClient):
    """Gemini-backed client using ``google.generativeai`` JSON mode.

    System messages become the model's system instruction; when a
    ``response_schema`` is supplied it is appended to that instruction so the
    model sees the exact shape it has to produce.
    """

    def __init__(
        self,
        model: str,
        api_key: str | None = None,
        timeout_seconds: float | None = None,
    ) -> None:
        self.model = model
        self.timeout_seconds = timeout_seconds
        if api_key:
            genai.configure(api_key=api_key)

    @staticmethod
    def _split_messages(messages: Iterable[Message]) -> tuple[List[str], List[Dict[str, Any]]]:
        system_parts: List[str] = []
        contents: List[Dict[str, Any]] = []
        for message in messages:
            role = message.get("role", "user")
            content = message.get("content", "")
            if role == "system":
                system_parts.append(content)
            else:
                contents.append({"role": "model" if role == "assistant" else "user", "parts": [content]})
        return system_parts, contents

    def complete(
        self,
        messages: List[Message],
        *,
        response_format: str = STRUCTURED_JSON,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Any:
        system_parts, contents = self._split_messages(messages)
        if not contents:
            raise GenerationError("At least one user message is required")
        if response_schema is not None:
            system_parts.append(
                "The JSON object must follow this schema:\n" + json.dumps(response_schema, indent=2)
            )

        config_kwargs: Dict[str, Any] = {"max_output_tokens": max_tokens, "temperature": temperature}
        if response_format == STRUCTURED_JSON:
            config_kwargs["response_mime_type"] = "application/json"

        model = genai.GenerativeModel(
            model_name=self.model,
            system_instruction="\n\n".join(system_parts) or None,
            generation_config=genai.GenerationConfig(**config_kwargs),
        )
        request_options = {"timeout": self.timeout_seconds} if self.timeout_seconds else None

        try:
            response = model.generate_content(contents, request_options=request_options)
            text = (response.text or "").strip()
        except Exception as exc:  # noqa: BLE001
            raise GenerationError(f"Gemini request failed: {exc}") from exc

        if not text:
            raise GenerationError("Empty generation response")
        if response_format == STRUCTURED_JSON:
            return parse_json_response(text)
        return text


class MockGenerationClient(GenerationClient):
    """Scripted client for offline runs and tests.

    Each queued response is returned once in order. A queued exception is
    raised instead of returned, and a callable is invoked with the messages.
    When the queue is empty ``default`` is used, or ``GenerationError`` is
    raised if no default was given.
    """

    _NO_DEFAULT = object()

    def __init__(self, responses: Iterable[Any] | None = None, default: Any = _NO_DEFAULT) -> None:
        self.responses: Deque[Any] = deque(responses or [])
        self.default = default
        self.calls: List[Dict[str, Any]] = []

    def complete(
        self,
        messages: List[Message],
        *,
        response_format: str = STRUCTURED_JSON,
        max_tokens: int = 2000,
        temperature: float = 0.3,
        response_schema: Optional[Dict[str, Any]] = None,
    ) -> Any:
        self.calls.append(
            {
                "messages": list(messages),
                "response_format": response_format,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "response_schema": response_schema,
            }
        )
        if self.responses:
            scripted = self.responses.popleft()
        elif self.default is not self._NO_DEFAULT:
            scripted = self.default
        else:
            raise GenerationError("No scripted response available")

        if isinstance(scripted, BaseException):
            raise scripted
        if callable(scripted):
            scripted = scripted(messages)
        if isinstance(scripted, str) and response_format == STRUCTURED_JSON:
            return parse_json_response(scripted)
        return scripted


__all__ = [
    "STRUCTURED_JSON",
    "GenerationClient",
    "GenerationError",
    "GeminiGenerationClient",
    "MockGenerationClient",
    "parse_json_response",
]
