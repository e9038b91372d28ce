"""Deterministic stand-in used when no live model is configured."""

from __future__ import annotations

import hashlib
import json
import logging
import random

from internship_evaluate.grading.backends.base import Backend, BackendRegistry, Message

logger = logging.getLogger(__name__)

CANNED_FEEDBACK = (
    "Automated evaluation completed. The project demonstrates good understanding "
    "with room for improvement."
)
CANNED_STRENGTHS = ["Working functionality", "Good project structure", "Clear implementation"]
CANNED_IMPROVEMENTS = ["Add more documentation", "Improve error handling", "Better code organization"]


def _stable_seed(s: str) -> int:
    """Return a deterministic 32-bit seed from a string, stable across processes."""
    return int(hashlib.md5(s.encode()).hexdigest(), 16) % 2**32


def _prompt_text(messages: list[Message]) -> str:
    parts: list[str] = []
    for message in messages:
        content = message.get("content", "")
        if isinstance(content, str):
            parts.append(content)
        else:
            parts.extend(p.get("text", "") for p in content if p.get("type") == "text")
    return "\n".join(parts)


@BackendRegistry.register("deterministic")
class DeterministicBackend(Backend):
    """Produce plausible code-review scores without calling a model.

    Sub-scores fall in 7-9 and the overall score in 60-99.  Values are drawn
    from a generator seeded by the prompt text, so re-evaluating an unchanged
    submission yields the same verdict.  Image analysis is not supported.

    Parameters
    ----------
    model : str
        Accepted for interface compatibility; unused.
    """

    name = "deterministic"
    supports_vision = False

    def __init__(self, model: str = "deterministic", **kwargs) -> None:
        self._model = model

    def complete(
        self,
        messages: list[Message],
        *,
        model: str | None = None,
        temperature: float = 0.0,
        max_tokens: int = 2048,
    ) -> str:
        """Return a JSON code-review answer seeded from the prompt."""
        rng = random.Random(_stable_seed(_prompt_text(messages)))
        answer = {
            "functionality": rng.randint(7, 9),
            "code_quality": rng.randint(7, 9),
            "best_practices": rng.randint(7, 9),
            "overall_score": rng.randint(60, 99),
            "feedback": CANNED_FEEDBACK,
            "strengths": list(CANNED_STRENGTHS),
            "improvements": list(CANNED_IMPROVEMENTS),
        }
        logger.debug("Deterministic answer overall=%d", answer["overall_score"])
        return json.dumps(answer)
