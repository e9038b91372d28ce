"""Package-level entry point: evaluate()."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Any

import httpx

from internship_evaluate.classify import classify, resolve_project_type
from internship_evaluate.config import EvaluatorConfig, load_config
from internship_evaluate.exceptions import (
    EmptyRepositoryError,
    EvaluationError,
    InvalidRepositoryURL,
    NoVisualContent,
    RepositoryAccessError,
    UnknownPipelineError,
    VisionUnavailable,
    VisualAnalysisError,
)
from internship_evaluate.extract import RepositoryExtractor
from internship_evaluate.grading import GradingEngine, GradingStrategy, GradingStrategyRegistry
from internship_evaluate.models import (
    AnalysisType,
    EvaluationResult,
    ProjectStructure,
    ProjectType,
    RepositorySnapshot,
    TaskContext,
)

logger = logging.getLogger(__name__)

REMEDIATION = ["Ensure repository is public and accessible", "Check GitHub URL format"]
SERVICE_REMEDIATION = ["Resubmit once design review is available", "Contact the program team if this persists"]

_SOFT_FAIL_FEEDBACK: list[tuple[type[Exception], str]] = [
    (
        InvalidRepositoryURL,
        "Evaluation failed: the submitted link is not a valid GitHub repository URL "
        "(expected https://github.com/<owner>/<repository>).",
    ),
    (
        EmptyRepositoryError,
        "Evaluation failed: the repository contains no gradeable files. "
        "Push your source code, README or design images and submit again.",
    ),
    (
        RepositoryAccessError,
        "Evaluation failed: the repository could not be read. "
        "Please check your GitHub repository URL and ensure it's publicly accessible.",
    ),
    (
        VisionUnavailable,
        "Evaluation could not be completed: design review is not available on this server right now. "
        "Your submission was not graded; please contact the program team or resubmit later.",
    ),
    (
        VisualAnalysisError,
        "Evaluation failed: the design images in the repository could not be analysed. "
        "Make sure they are valid PNG, JPG, GIF, SVG or WebP files.",
    ),
]
_GENERIC_FEEDBACK = "Evaluation failed due to an internal error. Please submit again later."


class EvaluationStage(str, Enum):
    """States of a single evaluation run."""

    EXTRACTING = "extracting"
    CLASSIFYING = "classifying"
    GRADING_CODE = "grading_code"
    GRADING_VISUAL = "grading_visual"
    DONE = "done"
    SOFT_FAIL = "soft_fail"


def soft_fail_result(error: Exception) -> EvaluationResult:
    """Build the caller-safe result for a failed evaluation.

    Feedback and remediation are chosen by error kind; the error's own
    message is never included.
    """
    feedback = _GENERIC_FEEDBACK
    for kind, text in _SOFT_FAIL_FEEDBACK:
        if isinstance(error, kind):
            feedback = text
            break
    improvements = SERVICE_REMEDIATION if isinstance(error, VisionUnavailable) else REMEDIATION
    return EvaluationResult(
        overall_score=0,
        functionality=0,
        code_quality=0,
        best_practices=0,
        feedback=feedback,
        strengths=[],
        improvements=list(improvements),
        analysis_type=AnalysisType.ERROR,
    )


class GradingRouter:
    """Select a grading strategy name for a submission.

    A recognised caller-declared domain wins over the inferred project type.
    """

    def route(self, domain: str | None, structure: ProjectStructure) -> str:
        """Return ``"visual"`` for design submissions, ``"code"`` otherwise."""
        project_type = resolve_project_type(domain, structure)
        if project_type is ProjectType.UI_UX_DESIGN:
            return "visual"
        return "code"


class Evaluator:
    """Wire extraction, classification and grading into one total call.

    Parameters
    ----------
    extractor : RepositoryExtractor
        Snapshot extractor.
    code_strategy : GradingStrategy
        Strategy for programming submissions and visual fallbacks.
    visual_strategy : GradingStrategy
        Strategy for design submissions.
    router : GradingRouter | None
        Strategy selector.
    """

    def __init__(
        self,
        extractor: RepositoryExtractor,
        code_strategy: GradingStrategy,
        visual_strategy: GradingStrategy,
        router: GradingRouter | None = None,
    ) -> None:
        self._extractor = extractor
        self._strategies = {"code": code_strategy, "visual": visual_strategy}
        self._router = router or GradingRouter()

    @classmethod
    def from_config(
        cls,
        config: EvaluatorConfig | str | Path | dict | None = None,
        *,
        client: httpx.Client | None = None,
        engine: GradingEngine | None = None,
    ) -> Evaluator:
        """Construct an Evaluator from a config object or raw source.

        Parameters
        ----------
        config : EvaluatorConfig | str | Path | dict | None
            An ``EvaluatorConfig``, a dict, a YAML file path, or ``None``
            for defaults and environment overrides.
        client : httpx.Client | None
            HTTP client for the hosting API.
        engine : GradingEngine | None
            Pre-built engine; built from ``config.backend`` when omitted.

        Returns
        -------
        Evaluator
        """
        config = load_config(config)
        engine = engine or GradingEngine.from_config(config)
        code = GradingStrategyRegistry.create("code", engine=engine, config=config.grading)
        visual = GradingStrategyRegistry.create("visual", engine=engine, config=config.grading, code_strategy=code)
        return cls(
            extractor=RepositoryExtractor(config.source, client=client),
            code_strategy=code,
            visual_strategy=visual,
        )

    def evaluate(
        self,
        repository_url: str,
        task_description: str,
        grading_criteria: str | dict[str, Any] | None,
        domain: str | None = None,
        *,
        submission_id: str | None = None,
    ) -> EvaluationResult:
        """Evaluate one submission.

        Never raises: any failure is converted into a result with
        ``analysis_type == "error"`` and remediation hints.

        Parameters
        ----------
        repository_url : str
            Submitted repository link.
        task_description : str
            Task description.
        grading_criteria : str | dict | None
            Grading rubric; mappings are serialised to JSON text.
        domain : str | None
            Caller-declared internship domain.
        submission_id : str | None
            Opaque identifier used only for logging.

        Returns
        -------
        EvaluationResult
        """
        stage = EvaluationStage.EXTRACTING
        try:
            task = TaskContext.build(task_description, grading_criteria, domain)

            self._log_stage(submission_id, stage)
            snapshot = self._extractor.extract(repository_url)
            if not snapshot.total_entries:
                msg = f"No gradeable content in {snapshot.owner}/{snapshot.repo}"
                raise EmptyRepositoryError(msg)

            stage = EvaluationStage.CLASSIFYING
            self._log_stage(submission_id, stage)
            structure = classify(snapshot)

            result = self._grade(snapshot, task, structure, submission_id)
        except EvaluationError as exc:
            logger.warning(
                "Evaluation soft-failed submission=%s stage=%s error=%s: %s",
                submission_id,
                stage.value,
                exc.__class__.__name__,
                exc,
            )
            return soft_fail_result(exc)
        except Exception as exc:
            logger.exception("Unexpected failure in submission=%s stage=%s", submission_id, stage.value)
            wrapped = UnknownPipelineError(f"{exc.__class__.__name__} during {stage.value}")
            return soft_fail_result(wrapped)

        self._log_stage(submission_id, EvaluationStage.DONE)
        logger.info(
            "Evaluated submission=%s analysis_type=%s overall=%d",
            submission_id,
            result.analysis_type.value,
            result.overall_score,
        )
        return result

    def _grade(
        self,
        snapshot: RepositorySnapshot,
        task: TaskContext,
        structure: ProjectStructure,
        submission_id: str | None,
    ) -> EvaluationResult:
        if self._router.route(task.domain, structure) == "visual":
            self._log_stage(submission_id, EvaluationStage.GRADING_VISUAL)
            try:
                return self._strategies["visual"].grade(snapshot, task, structure)
            except NoVisualContent:
                logger.info("No images in submission=%s; falling back to code grading", submission_id)
            except VisualAnalysisError:
                if not snapshot.files:
                    raise
                logger.warning("Image analysis failed for submission=%s; falling back to code grading", submission_id)

        self._log_stage(submission_id, EvaluationStage.GRADING_CODE)
        return self._strategies["code"].grade(snapshot, task, structure)

    @staticmethod
    def _log_stage(submission_id: str | None, stage: EvaluationStage) -> None:
        logger.debug("submission=%s stage=%s", submission_id, stage.value)


def evaluate(
    repository_url: str,
    task_description: str,
    grading_criteria: str | dict[str, Any] | None,
    domain: str | None = None,
    *,
    config: EvaluatorConfig | str | Path | dict | None = None,
    submission_id: str | None = None,
) -> EvaluationResult:
    """Evaluate a repository submission with a freshly configured pipeline.

    Parameters
    ----------
    repository_url : str
        Submitted repository link.
    task_description : str
        Task description.
    grading_criteria : str | dict | None
        Grading rubric.
    domain : str | None
        Caller-declared internship domain.
    config : EvaluatorConfig | str | Path | dict | None
        Pipeline configuration (path to a YAML file or an inline dict).
    submission_id : str | None
        Opaque identifier used only for logging.

    Returns
    -------
    EvaluationResult
        Always returned; failures yield ``analysis_type == "error"``.

    Examples
    --------
    >>> result = evaluate("https://github.com/octocat/hello-world", "Build a landing page", "HTML/CSS", "web_development")
    >>> result.analysis_type.value
    'code_analysis'
    """
    try:
        evaluator = Evaluator.from_config(config)
    except Exception:
        logger.exception("Could not configure evaluator for submission=%s", submission_id)
        return soft_fail_result(UnknownPipelineError("configuration failed"))
    return evaluator.evaluate(
        repository_url,
        task_description,
        grading_criteria,
        domain,
        submission_id=submission_id,
    )
