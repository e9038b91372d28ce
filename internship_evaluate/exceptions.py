"""Exception taxonomy for the submission evaluation pipeline.

Only :func:`internship_evaluate.api.evaluate` callers are shielded from these:
the orchestrator converts every one of them into a structured error result.
"""

from __future__ import annotations


class EvaluationError(Exception):
    """Base class for all pipeline errors."""


class InvalidRepositoryURL(EvaluationError):
    """The submitted link does not point at a ``github.com/<owner>/<repo>`` repository."""


class RepositoryAccessError(EvaluationError):
    """The hosting API refused or failed a request.

    Parameters
    ----------
    message : str
        Human-readable description.
    status_code : int | None
        HTTP status returned by the hosting API, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NoVisualContent(EvaluationError):
    """The snapshot holds no images; routing falls back to code grading."""


class VisualAnalysisError(EvaluationError):
    """Images were present but none of them could be analysed."""


class ModelResponseUnparseable(EvaluationError):
    """The generative model's answer did not contain a valid JSON payload."""


class UnknownPipelineError(EvaluationError):
    """Catch-all wrapper for unexpected failures inside the pipeline."""


class EmptyRepositoryError(RepositoryAccessError):
    """The repository was readable but held no gradeable files or images."""


class VisionUnavailable(VisualAnalysisError):
    """The configured generative backend cannot read images."""
