"""Anthropic (Claude) backend."""

from __future__ import annotations

import logging
from typing import Any

from internship_evaluate.grading.backends.base import Backend, BackendRegistry, Message

logger = logging.getLogger(__name__)

try:
    import anthropic

    _HAS_ANTHROPIC = True
except ImportError:  # pragma: no cover
    _HAS_ANTHROPIC = False


def _convert_part(part: dict[str, Any]) -> dict[str, Any]:
    """Translate an OpenAI-style content part into the Messages API shape."""
    if part.get("type") != "image_url":
        return part
    url = part["image_url"]["url"]
    header, _, data = url.partition(",")
    media_type = header.removeprefix("data:").removesuffix(";base64")
    return {"type": "image", "source": {"type": "base64", "media_type": media_type, "data": data}}


@BackendRegistry.register("anthropic")
class AnthropicBackend(Backend):
    """Backend powered by the Anthropic Messages API.

    Parameters
    ----------
    model : str
        Default model identifier.
    api_key : str | None
        Anthropic API key.  Falls back to ``ANTHROPIC_API_KEY`` env var.
    max_tokens : int
        Default max tokens for completions.
    timeout : float
        Request timeout in seconds.
    """

    name = "anthropic"

    def __init__(
        self,
        model: str = "claude-sonnet-4-5-20250929",
        api_key: str | None = None,
        max_tokens: int = 2048,
        timeout: float = 60.0,
    ) -> None:
        if not _HAS_ANTHROPIC:
            msg = "The 'anthropic' package is required: pip install anthropic"
            raise ImportError(msg)
        self._model = model
        self._max_tokens = max_tokens
        self._client = anthropic.Anthropic(api_key=api_key, timeout=timeout)

    def complete(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2048,
    ) -> str:
        """Call the Anthropic Messages API.

        System messages are lifted into the ``system`` parameter and
        ``image_url`` data URLs are converted to base64 image blocks.

        Returns
        -------
        str
        """
        system_parts = [m["content"] for m in messages if m["role"] == "system"]
        chat_messages = []
        for m in messages:
            if m["role"] == "system":
                continue
            content = m["content"]
            if not isinstance(content, str):
                content = [_convert_part(p) for p in content]
            chat_messages.append({"role": m["role"], "content": content})

        kwargs: dict[str, Any] = {
            "model": model or self._model,
            "max_tokens": max_tokens or self._max_tokens,
            "temperature": temperature,
            "messages": chat_messages,
        }
        if system_parts:
            kwargs["system"] = "\n\n".join(system_parts)

        logger.debug("Anthropic request model=%s messages=%d", kwargs["model"], len(chat_messages))
        response = self._client.messages.create(**kwargs)
        return "".join(block.text for block in response.content if getattr(block, "type", "") == "text")
