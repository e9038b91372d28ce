"""GradingEngine: binds a backend to its default completion settings."""

from __future__ import annotations

import logging
from typing import Any

from internship_evaluate.config import EvaluatorConfig, load_config
from internship_evaluate.grading.backends import BackendRegistry
from internship_evaluate.grading.backends.base import Backend

logger = logging.getLogger(__name__)


class GradingEngine:
    """Execute completions against a configured backend.

    Parameters
    ----------
    backend : Backend
        Generative backend for completions.
    default_model : str | None
        Default model override for the backend.
    default_temperature : float
        Default temperature for completions.
    default_max_tokens : int
        Default max tokens for completions.
    """

    def __init__(
        self,
        backend: Backend,
        *,
        default_model: str | None = None,
        default_temperature: float = 0.0,
        default_max_tokens: int = 2048,
    ) -> None:
        self._backend = backend
        self._default_model = default_model
        self._default_temperature = default_temperature
        self._default_max_tokens = default_max_tokens

    @classmethod
    def from_config(cls, config: EvaluatorConfig | dict | str | None = None) -> GradingEngine:
        """Construct a GradingEngine from a config object or raw source.

        This is the single place where the live backend or the deterministic
        stand-in is chosen.

        Parameters
        ----------
        config : EvaluatorConfig | dict | str | None
            An ``EvaluatorConfig``, a dict, a YAML file path, or ``None``
            for defaults.

        Returns
        -------
        GradingEngine
        """
        config = load_config(config)

        backend = BackendRegistry.create(
            config.backend.type,
            model=config.backend.model,
            **config.backend.extra,
        )
        logger.info("Using %s backend model=%s", backend.name, config.backend.model)

        return cls(
            backend=backend,
            default_model=config.backend.model,
            default_temperature=config.backend.temperature,
            default_max_tokens=config.backend.max_tokens,
        )

    @property
    def backend_name(self) -> str:
        return self._backend.name

    @property
    def supports_vision(self) -> bool:
        return self._backend.supports_vision

    def complete(self, messages: list[dict[str, Any]]) -> str:
        """Send *messages* to the backend using the engine defaults."""
        return self._backend.complete(
            messages,
            model=self._default_model,
            temperature=self._default_temperature,
            max_tokens=self._default_max_tokens,
        )
