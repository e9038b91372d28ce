"""Visual/design grading: per-image multimodal review, optionally blended with code grading."""

from __future__ import annotations

import base64
import logging
import math
import time
from collections.abc import Callable
from dataclasses import asdict
from typing import Any

from internship_evaluate.classify import classify
from internship_evaluate.config import GradingConfig
from internship_evaluate.exceptions import (
    ModelResponseUnparseable,
    NoVisualContent,
    VisionUnavailable,
    VisualAnalysisError,
)
from internship_evaluate.grading.engine import GradingEngine
from internship_evaluate.grading.models import ImageAnalysis, ImageGradeResponse, PromptSpec
from internship_evaluate.grading.parsing import Unparseable, parse_model_response
from internship_evaluate.grading.prompts import render
from internship_evaluate.grading.strategies.base import GradingStrategy, GradingStrategyRegistry
from internship_evaluate.grading.strategies.code import CodeGradingStrategy
from internship_evaluate.models import (
    AnalysisType,
    EvaluationResult,
    ImageFile,
    ProjectStructure,
    RepositorySnapshot,
    TaskContext,
)

logger = logging.getLogger(__name__)

MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
}
DEFAULT_STRENGTHS = ["Professional design quality", "Good visual hierarchy", "User-centered approach"]
DEFAULT_IMPROVEMENTS = ["Add more interactive elements", "Improve accessibility", "Enhance documentation"]

_MAX_SVG_CHARS = 20_000
_MAX_LIST_ITEMS = 5


def image_content_part(image: ImageFile) -> dict[str, Any]:
    """Encode an image as a chat content part.

    Raster images become base64 data URLs; SVG is sent as its markup.
    """
    if image.extension == "svg":
        markup = image.content.decode("utf-8", errors="replace")[:_MAX_SVG_CHARS]
        return {"type": "text", "text": f"SVG markup of {image.path}:\n{markup}"}
    mime = MIME_TYPES.get(image.extension, "application/octet-stream")
    data = base64.b64encode(image.content).decode("ascii")
    return {"type": "image_url", "image_url": {"url": f"data:{mime};base64,{data}"}}


def round_half_up(value: float) -> int:
    """Round half up (``64.5`` -> ``65``), unlike the built-in ``round``."""
    return int(math.floor(value + 0.5))


def _merge_unique(groups: list[list[str]]) -> list[str]:
    seen: set[str] = set()
    merged: list[str] = []
    for group in groups:
        for item in group:
            key = item.strip().lower()
            if key and key not in seen:
                seen.add(key)
                merged.append(item.strip())
    return merged[:_MAX_LIST_ITEMS]


@GradingStrategyRegistry.register("visual")
class VisualGradingStrategy(GradingStrategy):
    """Judge image-based design submissions.

    Every image gets its own multimodal call, paced by
    ``config.image_delay``.  Failed images are kept in the audit breakdown
    with score 0 but left out of the mean.

    Parameters
    ----------
    engine : GradingEngine
        Completion engine; must support vision.
    config : GradingConfig | None
        Grading settings.
    prompt : PromptSpec | None
        Explicit prompt override.
    code_strategy : CodeGradingStrategy | None
        Used to blend in a code score when the snapshot also ships text files.
    sleep : Callable[[float], None]
        Pacing function, replaceable in tests.
    """

    name = "visual"
    prompt_name = "image_review"
    analysis_type = AnalysisType.UI_UX

    def __init__(
        self,
        engine: GradingEngine,
        config: GradingConfig | None = None,
        prompt: PromptSpec | None = None,
        *,
        code_strategy: CodeGradingStrategy | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(engine, config, prompt)
        self._code_strategy = code_strategy
        self._sleep = sleep

    def grade(
        self,
        snapshot: RepositorySnapshot,
        task: TaskContext,
        structure: ProjectStructure | None = None,
    ) -> EvaluationResult:
        """Grade the snapshot's images.

        Raises
        ------
        NoVisualContent
            If the snapshot holds no images.
        VisionUnavailable
            If the backend cannot read images.
        VisualAnalysisError
            If every image failed.
        """
        if not snapshot.images:
            msg = "Snapshot contains no images"
            raise NoVisualContent(msg)
        if not self._engine.supports_vision:
            msg = f"Backend {self._engine.backend_name!r} cannot analyse images"
            raise VisionUnavailable(msg)

        analyses = self.analyse_images(snapshot, task)
        successful = [a for a in analyses if a.succeeded]
        if not successful:
            msg = f"None of {len(analyses)} images could be analysed"
            raise VisualAnalysisError(msg)

        visual_mean = sum(a.total_score for a in successful) / len(successful)
        final_score = visual_mean

        code_result = None
        if snapshot.files and self._code_strategy is not None:
            code_result = self._grade_code(snapshot, task, structure)
        if code_result is not None:
            final_score = (
                self._config.visual_weight * visual_mean + self._config.code_weight * code_result.overall_score
            )

        final_score = max(0.0, min(100.0, final_score))
        overall = round_half_up(final_score)
        sub_score = round_half_up(final_score / 10)

        feedback_lines = [f"{a.path}: {a.feedback or 'Analysed'}" for a in successful]
        feedback_lines.extend(f"{a.path}: analysis failed" for a in analyses if not a.succeeded)

        detailed: dict[str, Any] = {
            "images": {a.path: asdict(a) for a in analyses},
            "visual_mean": round(visual_mean, 2),
            "analyzed_images": len(successful),
            "failed_images": len(analyses) - len(successful),
        }
        if code_result is not None:
            detailed["code_analysis"] = code_result.to_dict()

        logger.info(
            "Graded design %s/%s images=%d analysed=%d visual_mean=%.1f overall=%d",
            snapshot.owner,
            snapshot.repo,
            len(analyses),
            len(successful),
            visual_mean,
            overall,
        )
        return EvaluationResult(
            overall_score=overall,
            functionality=sub_score,
            code_quality=sub_score,
            best_practices=sub_score,
            feedback="UI/UX Design Analysis:\n" + "\n".join(feedback_lines),
            strengths=_merge_unique([a.strengths for a in successful]) or list(DEFAULT_STRENGTHS),
            improvements=_merge_unique([a.improvements for a in successful]) or list(DEFAULT_IMPROVEMENTS),
            analysis_type=self.analysis_type,
            detailed_scores=detailed,
        )

    def analyse_images(self, snapshot: RepositorySnapshot, task: TaskContext) -> list[ImageAnalysis]:
        """Analyse each image sequentially, recording failures instead of raising."""
        analyses: list[ImageAnalysis] = []
        for index, image in enumerate(snapshot.images.values()):
            if index:
                self._sleep(self._config.image_delay)
            try:
                analyses.append(self._analyse_image(image, task))
            except Exception as exc:
                logger.warning("Image analysis failed for %s: %s", image.path, exc.__class__.__name__, exc_info=True)
                analyses.append(ImageAnalysis.failed(image.path, f"analysis_failed: {exc.__class__.__name__}"))
        return analyses

    def _analyse_image(self, image: ImageFile, task: TaskContext) -> ImageAnalysis:
        messages = render(self._prompt, {"task": task, "image_path": image.path})
        for message in messages:
            if message["role"] == "user":
                message["content"] = [{"type": "text", "text": message["content"]}, image_content_part(image)]
                break
        else:
            messages.append({"role": "user", "content": [image_content_part(image)]})

        parsed = parse_model_response(self._engine.complete(messages), ImageGradeResponse)
        if isinstance(parsed, Unparseable):
            raise ModelResponseUnparseable(parsed.reason)
        return ImageAnalysis.from_response(image.path, parsed.value)

    def _grade_code(
        self,
        snapshot: RepositorySnapshot,
        task: TaskContext,
        structure: ProjectStructure | None,
    ) -> EvaluationResult | None:
        try:
            return self._code_strategy.grade(snapshot, task, structure or classify(snapshot))
        except Exception:
            logger.warning("Code grading for blend failed; using visual score only", exc_info=True)
            return None
