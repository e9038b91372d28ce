"""LiteLLM catch-all backend supporting 100+ model providers."""

from __future__ import annotations

import logging
from typing import Any

import litellm

from internship_evaluate.grading.backends.base import Backend, BackendRegistry, Message

logger = logging.getLogger(__name__)


@BackendRegistry.register("litellm")
class LiteLLMBackend(Backend):
    """Backend powered by LiteLLM's unified completion interface.

    Image parts use the OpenAI ``image_url`` format, which LiteLLM translates
    for vision-capable providers.

    Parameters
    ----------
    model : str
        Model identifier in LiteLLM format (e.g. ``"gemini/gemini-2.5-flash"``).
    max_tokens : int
        Default max tokens for completions.
    timeout : float
        Request timeout in seconds.
    """

    name = "litellm"

    def __init__(
        self,
        model: str = "gemini/gemini-2.5-flash",
        max_tokens: int = 2048,
        timeout: float = 60.0,
    ) -> None:
        self._model = model
        self._max_tokens = max_tokens
        self._timeout = timeout

    def complete(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2048,
    ) -> str:
        """Call LiteLLM's unified completion endpoint.

        Parameters
        ----------
        messages : list[dict]
            Chat messages with ``role`` and ``content`` keys.
        model : str | None
            Override the default model.
        temperature : float
            Sampling temperature.
        max_tokens : int
            Maximum tokens in the response.

        Returns
        -------
        str
        """
        kwargs: dict[str, Any] = {
            "model": model or self._model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens or self._max_tokens,
            "timeout": self._timeout,
        }

        logger.debug("LiteLLM request model=%s messages=%d", kwargs["model"], len(messages))
        response = litellm.completion(**kwargs)
        return response.choices[0].message.content or ""
