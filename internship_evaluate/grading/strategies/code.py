"""Code grading: one text review of a bounded project summary."""

from __future__ import annotations

import json
import logging

from internship_evaluate.classify import classify
from internship_evaluate.grading.models import CodeGradeResponse
from internship_evaluate.grading.parsing import Parsed, parse_model_response
from internship_evaluate.grading.prompts import render
from internship_evaluate.grading.strategies.base import GradingStrategy, GradingStrategyRegistry
from internship_evaluate.models import (
    AnalysisType,
    EvaluationResult,
    ProjectStructure,
    RepositorySnapshot,
    TaskContext,
    TextFile,
)

logger = logging.getLogger(__name__)

TRUNCATION_MARKER = "\n... [truncated]"
ENTRY_POINTS = frozenset({"index.html", "main.js", "app.py", "style.css"})
SUMMARY_EXTENSIONS = frozenset({"html", "css", "js", "py", "md"})

_FALLBACK_FEEDBACK_CHARS = 500


def _priority(item: TextFile) -> int | None:
    """Rank a file for the summary; ``None`` excludes it."""
    file_name = item.path.rsplit("/", 1)[-1].lower()
    if "readme" in file_name:
        return 0
    if file_name in ENTRY_POINTS:
        return 1
    if item.extension in SUMMARY_EXTENSIONS:
        return 2
    return None


def select_key_files(files: dict[str, TextFile], limit: int) -> list[TextFile]:
    """Pick up to *limit* files: READMEs, then entry points, then source files."""
    ranked: list[tuple[int, int, TextFile]] = []
    for index, item in enumerate(files.values()):
        rank = _priority(item)
        if rank is not None:
            ranked.append((rank, index, item))
    ranked.sort(key=lambda t: (t[0], t[1]))
    return [item for _, _, item in ranked[:limit]]


def truncate(content: str, limit: int) -> str:
    """Cut *content* to *limit* characters, marking the cut."""
    if len(content) <= limit:
        return content
    return content[:limit] + TRUNCATION_MARKER


def build_project_summary(
    snapshot: RepositorySnapshot,
    task: TaskContext,
    structure: ProjectStructure,
    *,
    max_files: int = 10,
    max_chars: int = 2000,
) -> str:
    """Render the bounded project summary sent to the model.

    Parameters
    ----------
    snapshot : RepositorySnapshot
        Extracted repository content.
    task : TaskContext
        Task being graded.
    structure : ProjectStructure
        Structural statistics for *snapshot*.
    max_files : int
        Maximum number of files whose content is included.
    max_chars : int
        Per-file character budget.

    Returns
    -------
    str
    """
    lines = [
        "PROJECT ANALYSIS:",
        f"- Task: {task.title}",
        f"- Description: {task.description}",
        f"- Domain: {task.domain}",
        f"- Grading Criteria: {task.grading_criteria}",
        "",
        "PROJECT STRUCTURE:",
        f"- Total Files: {structure.total_files}",
        f"- Total Images: {structure.total_images}",
        f"- File Types: {json.dumps(structure.file_types, sort_keys=True)}",
        f"- Has README: {structure.has_readme}",
        f"- Project Type: {structure.project_type.value}",
        "",
        "KEY FILES CONTENT:",
    ]
    for item in select_key_files(snapshot.files, max_files):
        lines.append(f"\n--- {item.path} ---")
        lines.append(truncate(item.content, max_chars))
    return "\n".join(lines)


@GradingStrategyRegistry.register("code")
class CodeGradingStrategy(GradingStrategy):
    """Judge programming submissions with one generative text review.

    Malformed answers never fail the evaluation: missing fields take
    defaults and an unparseable answer yields fixed fallback scores with the
    raw text (truncated) as feedback.
    """

    name = "code"
    prompt_name = "code_review"
    analysis_type = AnalysisType.CODE

    def grade(
        self,
        snapshot: RepositorySnapshot,
        task: TaskContext,
        structure: ProjectStructure | None = None,
    ) -> EvaluationResult:
        structure = structure or classify(snapshot)
        summary = build_project_summary(
            snapshot,
            task,
            structure,
            max_files=self._config.max_summary_files,
            max_chars=self._config.max_file_chars,
        )
        messages = render(self._prompt, {"task": task, "structure": structure, "summary": summary})
        raw_response = self._engine.complete(messages)

        parsed = parse_model_response(raw_response, CodeGradeResponse)
        if isinstance(parsed, Parsed):
            result = self._from_answer(parsed.value)
        else:
            logger.warning("Code review answer unparseable (%s); using fallback scores", parsed.reason)
            result = self._fallback(parsed.raw)

        logger.info(
            "Graded code %s/%s backend=%s overall=%d",
            snapshot.owner,
            snapshot.repo,
            self._engine.backend_name,
            result.overall_score,
        )
        return result

    def _from_answer(self, answer: CodeGradeResponse) -> EvaluationResult:
        return EvaluationResult(
            overall_score=answer.overall_score,
            functionality=answer.functionality,
            code_quality=answer.code_quality,
            best_practices=answer.best_practices,
            feedback=answer.feedback or answer.detailed_analysis or "Project evaluated successfully",
            strengths=list(answer.strengths),
            improvements=list(answer.improvements),
            analysis_type=self.analysis_type,
        )

    def _fallback(self, raw: str) -> EvaluationResult:
        feedback = raw.strip()[:_FALLBACK_FEEDBACK_CHARS] or "Project evaluated; detailed feedback unavailable."
        return EvaluationResult(
            overall_score=75,
            functionality=8,
            code_quality=7,
            best_practices=7,
            feedback=feedback,
            strengths=["Code is functional", "Good project structure"],
            improvements=["Add more documentation", "Improve error handling"],
            analysis_type=self.analysis_type,
        )
