"""Abstract grading strategy and registry."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from internship_evaluate.config import GradingConfig
from internship_evaluate.grading.engine import GradingEngine
from internship_evaluate.grading.models import PromptSpec
from internship_evaluate.grading.prompts import load_prompt
from internship_evaluate.models import (
    AnalysisType,
    EvaluationResult,
    ProjectStructure,
    RepositorySnapshot,
    TaskContext,
)

logger = logging.getLogger(__name__)


class GradingStrategy(ABC):
    """Base class for domain-specific grading algorithms.

    Each strategy owns a prompt template and turns a snapshot plus task
    context into an :class:`EvaluationResult`.

    Attributes
    ----------
    name : str
        Registry key (e.g. ``"code"``).
    prompt_name : str
        Default registered prompt used when configuration does not override it.
    analysis_type : AnalysisType
        Value stamped on produced results.

    Parameters
    ----------
    engine : GradingEngine
        Completion engine.
    config : GradingConfig | None
        Grading settings.
    prompt : PromptSpec | None
        Explicit prompt; otherwise resolved from ``config.prompts`` or
        ``prompt_name``.
    """

    name: str = ""
    prompt_name: str = ""
    analysis_type: AnalysisType = AnalysisType.CODE

    def __init__(
        self,
        engine: GradingEngine,
        config: GradingConfig | None = None,
        prompt: PromptSpec | None = None,
    ) -> None:
        self._engine = engine
        self._config = config or GradingConfig()
        self._prompt = prompt or load_prompt(self._config.prompts.get(self.name) or self.prompt_name)

    @property
    def prompt(self) -> PromptSpec:
        return self._prompt

    @abstractmethod
    def grade(
        self,
        snapshot: RepositorySnapshot,
        task: TaskContext,
        structure: ProjectStructure | None = None,
    ) -> EvaluationResult:
        """Grade *snapshot* against *task*.

        Parameters
        ----------
        snapshot : RepositorySnapshot
            Extracted repository content.
        task : TaskContext
            Task being graded.
        structure : ProjectStructure | None
            Pre-computed structure; derived from *snapshot* when omitted.

        Returns
        -------
        EvaluationResult
        """


class GradingStrategyRegistry:
    """Discover and instantiate registered grading strategies."""

    _strategies: dict[str, type[GradingStrategy]] = {}

    @classmethod
    def register(cls, name: str):
        """Class decorator that registers a strategy under *name*.

        Parameters
        ----------
        name : str
            Lookup key.

        Returns
        -------
        Callable
            The original class, unmodified.
        """

        def decorator(klass: type[GradingStrategy]) -> type[GradingStrategy]:
            cls._strategies[name] = klass
            return klass

        return decorator

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> GradingStrategy:
        """Instantiate a registered strategy.

        Raises
        ------
        KeyError
            If *name* is not registered.
        """
        if name not in cls._strategies:
            available = ", ".join(sorted(cls._strategies)) or "(none)"
            msg = f"Unknown grading strategy {name!r}. Available: {available}"
            raise KeyError(msg)
        return cls._strategies[name](**kwargs)

    @classmethod
    def available(cls) -> list[str]:
        """Return sorted list of registered strategy names."""
        return sorted(cls._strategies)
