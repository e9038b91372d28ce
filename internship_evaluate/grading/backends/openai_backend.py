"""OpenAI / OpenAI-compatible grading backend."""

from __future__ import annotations

import logging
from typing import Any

from internship_evaluate.grading.backends.base import Backend, BackendRegistry, Message

logger = logging.getLogger(__name__)

try:
    import openai

    _HAS_OPENAI = True
except ImportError:  # pragma: no cover
    _HAS_OPENAI = False

JSON_RESPONSE_FORMAT = {"type": "json_object"}


@BackendRegistry.register("openai")
class OpenAIBackend(Backend):
    """Grade through the OpenAI Chat Completions API.

    Image parts (``{"type": "image_url"}``) are forwarded unchanged, so the
    configured model must accept vision input unless ``vision=False``.

    Parameters
    ----------
    model : str
        Default model identifier.
    api_key : str | None
        API key; the SDK falls back to ``OPENAI_API_KEY``.
    base_url : str | None
        Base URL of an OpenAI-compatible endpoint.
    max_tokens : int
        Default completion budget.
    timeout : float
        Request timeout in seconds.
    vision : bool
        Whether the model reads images.  Text-only endpoints set ``False`` so
        design submissions fall back to code review.
    json_mode : bool
        Ask the API for a JSON object answer.
    """

    name = "openai"

    def __init__(
        self,
        model: str = "gpt-4o",
        api_key: str | None = None,
        base_url: str | None = None,
        max_tokens: int = 2048,
        timeout: float = 60.0,
        vision: bool = True,
        json_mode: bool = True,
    ) -> None:
        if not _HAS_OPENAI:
            msg = "The 'openai' package is required: pip install internship-evaluate[openai]"
            raise ImportError(msg)
        self._model = model
        self._max_tokens = max_tokens
        self._json_mode = json_mode
        self.supports_vision = vision

        client_kwargs: dict[str, Any] = {"timeout": timeout}
        if api_key:
            client_kwargs["api_key"] = api_key
        if base_url:
            client_kwargs["base_url"] = base_url
        self._client = openai.OpenAI(**client_kwargs)

    def complete(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2048,
    ) -> str:
        """Return the grading answer text, ``""`` when the API sends no choice."""
        request: dict[str, Any] = {
            "model": model or self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens or self._max_tokens,
        }
        if self._json_mode:
            request["response_format"] = JSON_RESPONSE_FORMAT

        logger.debug(
            "OpenAI request model=%s messages=%d images=%d",
            request["model"],
            len(messages),
            _count_images(messages),
        )
        response = self._client.chat.completions.create(**request)
        if not response.choices:
            logger.warning("OpenAI returned no choices for model=%s", request["model"])
            return ""
        return response.choices[0].message.content or ""


def _count_images(messages: list[Message]) -> int:
    count = 0
    for message in messages:
        content = message.get("content")
        if isinstance(content, list):
            count += sum(1 for part in content if part.get("type") == "image_url")
    return count
