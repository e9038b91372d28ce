"""Data models for grading: prompt specs, validated model answers, per-image records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_CODE_STRENGTHS = ["Code is functional"]
DEFAULT_CODE_IMPROVEMENTS = ["Could improve documentation"]


@dataclass
class PromptSpec:
    """Metadata and template content for a grading prompt.

    Parameters
    ----------
    name : str
        Unique prompt identifier.
    version : str
        Semver-style version string.
    description : str
        Human-readable description.
    system_template : str
        Jinja2 template for the system message.
    user_template : str
        Jinja2 template for the user message.
    """

    name: str
    version: str
    description: str
    system_template: str = ""
    user_template: str = ""


def _clamp(value: Any, upper: int) -> Any:
    """Coerce numeric answers into ``[0, upper]``; leave other types for validation."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return value
    if isinstance(value, (int, float)):
        return int(round(max(0.0, min(float(upper), float(value)))))
    return value


def _string_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return [str(v) for v in value if str(v).strip()]
    return value


class CodeGradeResponse(BaseModel):
    """Validated code review answer.

    Missing fields take the documented defaults; out-of-range scores are
    clamped rather than rejected.
    """

    functionality: int = Field(7, ge=0, le=10)
    code_quality: int = Field(7, ge=0, le=10)
    best_practices: int = Field(7, ge=0, le=10)
    overall_score: int = Field(75, ge=0, le=100)
    feedback: str = ""
    detailed_analysis: str = ""
    strengths: list[str] = Field(default_factory=lambda: list(DEFAULT_CODE_STRENGTHS))
    improvements: list[str] = Field(default_factory=lambda: list(DEFAULT_CODE_IMPROVEMENTS))

    @field_validator("functionality", "code_quality", "best_practices", mode="before")
    @classmethod
    def _clamp_sub_score(cls, value: Any) -> Any:
        return _clamp(value, 10)

    @field_validator("overall_score", mode="before")
    @classmethod
    def _clamp_overall(cls, value: Any) -> Any:
        return _clamp(value, 100)

    @field_validator("feedback", "detailed_analysis", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:
        return _string_list(value)


class ImageGradeResponse(BaseModel):
    """Validated per-image design review answer (four 0-25 dimensions)."""

    visual_design: int = Field(..., ge=0, le=25)
    user_experience: int = Field(..., ge=0, le=25)
    design_quality: int = Field(..., ge=0, le=25)
    technical_execution: int = Field(..., ge=0, le=25)
    overall_feedback: str = ""
    strengths: list[str] = Field(default_factory=list)
    improvements: list[str] = Field(default_factory=list)

    @field_validator("visual_design", "user_experience", "design_quality", "technical_execution", mode="before")
    @classmethod
    def _clamp_dimension(cls, value: Any) -> Any:
        if isinstance(value, dict):
            value = value.get("score")
        return _clamp(value, 25)

    @field_validator("overall_feedback", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("strengths", "improvements", mode="before")
    @classmethod
    def _as_list(cls, value: Any) -> Any:
        return _string_list(value)

    @property
    def total_score(self) -> int:
        return self.visual_design + self.user_experience + self.design_quality + self.technical_execution


@dataclass
class ImageAnalysis:
    """Audit record for one analysed (or failed) image.

    Parameters
    ----------
    path : str
        Repository path of the image.
    total_score : int
        Sum of the four dimensions, 0 on failure.
    error : str
        Failure marker; empty when the analysis succeeded.
    """

    path: str
    visual_design: int = 0
    user_experience: int = 0
    design_quality: int = 0
    technical_execution: int = 0
    total_score: int = 0
    feedback: str = ""
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    error: str = ""

    @property
    def succeeded(self) -> bool:
        return not self.error

    @classmethod
    def from_response(cls, path: str, response: ImageGradeResponse) -> ImageAnalysis:
        return cls(
            path=path,
            visual_design=response.visual_design,
            user_experience=response.user_experience,
            design_quality=response.design_quality,
            technical_execution=response.technical_execution,
            total_score=response.total_score,
            feedback=response.overall_feedback,
            strengths=list(response.strengths),
            improvements=list(response.improvements),
        )

    @classmethod
    def failed(cls, path: str, error: str) -> ImageAnalysis:
        return cls(path=path, total_score=0, error=error)
