"""Generation client tests; Gemini is replaced with a fake model object."""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from tools import generation_client
from tools.generation_client import (
    GeminiGenerationClient,
    GenerationError,
    MockGenerationClient,
    parse_json_response,
)

MESSAGES = [
    {"role": "system", "content": "You are a stylist."},
    {"role": "user", "content": "Describe my style."},
]


class _FakeResponse:
    def __init__(self, text):
        self.text = text


class _FakeModel:
    instances = []

    def __init__(self, model_name, system_instruction=None, generation_config=None):
        self.model_name = model_name
        self.system_instruction = system_instruction
        self.generation_config = generation_config
        self.requests = []
        _FakeModel.instances.append(self)

    def generate_content(self, contents, request_options=None):
        self.requests.append((contents, request_options))
        return _FakeResponse(self.reply)


@pytest.fixture
def fake_model(monkeypatch):
    _FakeModel.instances = []
    _FakeModel.reply = '{"ok": true}'
    monkeypatch.setattr(generation_client.genai, "GenerativeModel", _FakeModel)
    return _FakeModel


def test_parse_json_response_strips_code_fences() -> None:
    assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}
    assert parse_json_response('  {"b": [1, 2]}  ') == {"b": [1, 2]}


def test_parse_json_response_raises_generation_error() -> None:
    with pytest.raises(GenerationError):
        parse_json_response("not json at all")


def test_gemini_client_builds_request(fake_model) -> None:
    client = GeminiGenerationClient(model="models/gemini-test", timeout_seconds=12)

    result = client.complete(MESSAGES, max_tokens=2500, temperature=0.3, response_schema={"type": "object"})

    assert result == {"ok": True}
    [model] = fake_model.instances
    assert model.model_name == "models/gemini-test"
    assert model.system_instruction.startswith("You are a stylist.")
    assert '"type": "object"' in model.system_instruction
    contents, request_options = model.requests[0]
    assert contents == [{"role": "user", "parts": ["Describe my style."]}]
    assert request_options == {"timeout": 12}


def test_gemini_client_empty_response_raises(fake_model) -> None:
    fake_model.reply = "   "
    client = GeminiGenerationClient(model="models/gemini-test")

    with pytest.raises(GenerationError):
        client.complete(MESSAGES)


def test_gemini_client_wraps_sdk_errors(monkeypatch) -> None:
    class _BrokenModel(_FakeModel):
        def generate_content(self, contents, request_options=None):
            raise RuntimeError("quota exceeded")

    monkeypatch.setattr(generation_client.genai, "GenerativeModel", _BrokenModel)
    client = GeminiGenerationClient(model="models/gemini-test")

    with pytest.raises(GenerationError, match="quota exceeded"):
        client.complete(MESSAGES)


def test_gemini_client_requires_user_message(fake_model) -> None:
    client = GeminiGenerationClient(model="models/gemini-test")

    with pytest.raises(GenerationError):
        client.complete([{"role": "system", "content": "only system"}])


def test_mock_client_replays_scripted_responses() -> None:
    client = MockGenerationClient(
        ['{"first": 1}', ValueError("second fails"), lambda messages: {"count": len(messages)}],
        default={"fallback": True},
    )

    assert client.complete(MESSAGES) == {"first": 1}
    with pytest.raises(ValueError):
        client.complete(MESSAGES)
    assert client.complete(MESSAGES) == {"count": 2}
    assert client.complete(MESSAGES) == {"fallback": True}
    assert len(client.calls) == 4


def test_mock_client_without_script_fails() -> None:
    with pytest.raises(GenerationError):
        MockGenerationClient().complete(MESSAGES, max_tokens=10)
