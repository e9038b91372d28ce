"""Tests for backend abstraction, registry and the deterministic stand-in."""

import json
from unittest.mock import MagicMock, patch

import pytest
from conftest import ScriptedBackend

from internship_evaluate.grading.backends import BackendRegistry
from internship_evaluate.grading.backends import anthropic_backend as _anthropic_mod
from internship_evaluate.grading.backends import litellm_backend as _litellm_mod
from internship_evaluate.grading.backends import openai_backend as _openai_mod
from internship_evaluate.grading.backends.deterministic_backend import DeterministicBackend
from internship_evaluate.grading.engine import GradingEngine


def test_register_and_create():
    BackendRegistry.register("_test_scripted")(ScriptedBackend)
    try:
        backend = BackendRegistry.create("_test_scripted", responses=["hello"])
        assert backend.name == "scripted"
        assert backend.complete([]) == "hello"
    finally:
        del BackendRegistry._backends["_test_scripted"]


def test_builtin_backends_registered():
    available = BackendRegistry.available()
    for name in ("anthropic", "deterministic", "litellm", "openai"):
        assert name in available


def test_create_unknown_raises():
    with pytest.raises(KeyError, match="Unknown backend"):
        BackendRegistry.create("nonexistent_backend_xyz")


def test_deterministic_backend_is_stable_and_in_range():
    backend = DeterministicBackend()
    messages = [{"role": "user", "content": "Grade project A"}]

    first = json.loads(backend.complete(messages))
    second = json.loads(backend.complete(messages))

    assert first == second
    assert 60 <= first["overall_score"] <= 99
    for key in ("functionality", "code_quality", "best_practices"):
        assert 7 <= first[key] <= 9
    assert first["feedback"]


def test_deterministic_backend_has_no_vision():
    assert DeterministicBackend.supports_vision is False


def test_engine_from_config_selects_deterministic_by_default():
    engine = GradingEngine.from_config({})
    assert engine.backend_name == "deterministic"
    assert engine.supports_vision is False


@patch.object(_litellm_mod, "litellm")
def test_litellm_backend_forwards_messages(mock_litellm):
    mock_litellm.completion.return_value = MagicMock(choices=[MagicMock(message=MagicMock(content="answer"))])
    engine = GradingEngine.from_config({"backend": {"type": "litellm", "model": "gemini/gemini-2.5-flash"}})

    messages = [{"role": "user", "content": "Review this."}]
    assert engine.complete(messages) == "answer"

    kwargs = mock_litellm.completion.call_args.kwargs
    assert kwargs["model"] == "gemini/gemini-2.5-flash"
    assert kwargs["messages"] == messages


def test_anthropic_converts_image_parts():
    part = {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}}
    converted = _anthropic_mod._convert_part(part)
    assert converted == {"type": "image", "source": {"type": "base64", "media_type": "image/png", "data": "AAAA"}}
    assert _anthropic_mod._convert_part({"type": "text", "text": "x"}) == {"type": "text", "text": "x"}


@patch.object(_openai_mod, "_HAS_OPENAI", True)
@patch.object(_openai_mod, "openai", create=True)
def test_openai_backend_forwards_image_parts_and_timeout(mock_openai):
    client = mock_openai.OpenAI.return_value
    client.chat.completions.create.return_value = MagicMock(choices=[MagicMock(message=MagicMock(content='{"a": 1}'))])
    backend = BackendRegistry.create("openai", model="gpt-4o", timeout=15.0)
    image = {"type": "image_url", "image_url": {"url": "data:image/png;base64,AAAA"}}
    messages = [{"role": "user", "content": [{"type": "text", "text": "Review this screen."}, image]}]

    assert backend.complete(messages, temperature=0.2, max_tokens=512) == '{"a": 1}'

    assert mock_openai.OpenAI.call_args.kwargs == {"timeout": 15.0}
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["messages"][0]["content"][1] == image
    assert kwargs["max_tokens"] == 512
    assert kwargs["response_format"] == {"type": "json_object"}
    assert backend.supports_vision


@patch.object(_openai_mod, "_HAS_OPENAI", True)
@patch.object(_openai_mod, "openai", create=True)
def test_openai_backend_text_only_endpoint(mock_openai):
    client = mock_openai.OpenAI.return_value
    client.chat.completions.create.return_value = MagicMock(choices=[])
    backend = _openai_mod.OpenAIBackend(base_url="http://localhost:8000/v1", vision=False, json_mode=False)

    assert backend.complete([{"role": "user", "content": "Grade."}]) == ""
    assert not backend.supports_vision
    assert mock_openai.OpenAI.call_args.kwargs["base_url"] == "http://localhost:8000/v1"
    assert "response_format" not in client.chat.completions.create.call_args.kwargs


@patch.object(_openai_mod, "_HAS_OPENAI", False)
def test_openai_backend_requires_sdk():
    with pytest.raises(ImportError, match="openai"):
        _openai_mod.OpenAIBackend()
