"""Shared data models for the submission evaluation pipeline."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any


class ProjectType(str, Enum):
    """Artifact type inferred from a repository snapshot.

    The values double as the platform's internship domain vocabulary.
    """

    WEB_DEVELOPMENT = "web_development"
    UI_UX_DESIGN = "ui_ux_design"
    DATA_SCIENCE = "data_science"
    UNKNOWN = "unknown"

    @property
    def domain_code(self) -> str:
        """Two-letter code used in student and certificate identifiers."""
        return _DOMAIN_CODES.get(self, "")

    @property
    def label(self) -> str:
        """Human-readable domain name."""
        return _DOMAIN_LABELS.get(self, "General")

    @classmethod
    def from_domain(cls, domain: str | None) -> ProjectType:
        """Map a caller-declared domain string to a member, ``UNKNOWN`` if unrecognised."""
        if not domain:
            return cls.UNKNOWN
        normalized = domain.strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN


_DOMAIN_CODES = {
    ProjectType.WEB_DEVELOPMENT: "WD",
    ProjectType.UI_UX_DESIGN: "UD",
    ProjectType.DATA_SCIENCE: "DS",
}

_DOMAIN_LABELS = {
    ProjectType.WEB_DEVELOPMENT: "Web Development",
    ProjectType.UI_UX_DESIGN: "UI/UX Design",
    ProjectType.DATA_SCIENCE: "Data Science",
}


class AnalysisType(str, Enum):
    """Which grading path produced an :class:`EvaluationResult`."""

    CODE = "code_analysis"
    UI_UX = "ui_ux_analysis"
    ERROR = "error"


@dataclass
class TextFile:
    """A text file captured from the repository.

    Parameters
    ----------
    path : str
        Repository-relative path.
    content : str
        Decoded file content.
    extension : str
        Lower-cased extension without the dot.
    size : int
        Size in bytes as reported by the hosting API.
    """

    path: str
    content: str
    extension: str
    size: int = 0


@dataclass
class ImageFile:
    """An image captured from the repository.

    Parameters
    ----------
    path : str
        Repository-relative path.
    content : bytes
        Raw image bytes.
    extension : str
        Lower-cased extension without the dot.
    url : str
        Raw URL the bytes were fetched from.
    """

    path: str
    content: bytes
    extension: str
    url: str = ""


@dataclass
class RepositorySnapshot:
    """Bounded, per-request snapshot of a remote repository.

    Parameters
    ----------
    owner : str
        Repository owner parsed from the submitted URL.
    repo : str
        Repository name parsed from the submitted URL.
    files : dict[str, TextFile]
        Accepted text files keyed by path.
    images : dict[str, ImageFile]
        Accepted images keyed by path.
    """

    owner: str
    repo: str
    files: dict[str, TextFile] = field(default_factory=dict)
    images: dict[str, ImageFile] = field(default_factory=dict)

    @property
    def total_entries(self) -> int:
        return len(self.files) + len(self.images)


@dataclass
class ProjectStructure:
    """Structural statistics derived from a snapshot."""

    total_files: int = 0
    total_images: int = 0
    file_types: dict[str, int] = field(default_factory=dict)
    has_readme: bool = False
    has_html: bool = False
    has_css: bool = False
    has_javascript: bool = False
    has_python: bool = False
    has_images: bool = False
    project_type: ProjectType = ProjectType.UNKNOWN


@dataclass(frozen=True)
class TaskContext:
    """Caller-supplied description of the task being graded.

    Parameters
    ----------
    description : str
        Task description shown to the student.
    grading_criteria : str
        Grading rubric as text.
    domain : str
        Internship domain declared by the caller (e.g. ``"web_development"``).
    title : str
        Task title.
    max_score : int
        Maximum achievable score.
    """

    description: str
    grading_criteria: str
    domain: str = ProjectType.WEB_DEVELOPMENT.value
    title: str = "Project Evaluation"
    max_score: int = 100

    @classmethod
    def build(
        cls,
        description: str,
        grading_criteria: str | dict[str, Any] | list[Any] | None,
        domain: str | None,
        *,
        title: str = "Project Evaluation",
    ) -> TaskContext:
        """Normalise raw caller input into a task context.

        Non-string grading criteria are serialised to JSON text.
        """
        if grading_criteria is None:
            criteria = ""
        elif isinstance(grading_criteria, str):
            criteria = grading_criteria
        else:
            criteria = json.dumps(grading_criteria, ensure_ascii=False)
        return cls(
            description=description or "",
            grading_criteria=criteria,
            domain=domain or "",
            title=title,
        )

    @property
    def domain_label(self) -> str:
        """Domain phrased for prompts (``"ui_ux_design"`` -> ``"ui ux design"``)."""
        return (self.domain or "software").replace("_", " ")


@dataclass
class EvaluationResult:
    """Structured verdict returned to the calling submission workflow.

    Parameters
    ----------
    overall_score : int
        Score between 0 and 100.
    functionality : int
        Sub-score between 0 and 10.
    code_quality : int
        Sub-score between 0 and 10.
    best_practices : int
        Sub-score between 0 and 10.
    feedback : str
        Non-empty feedback text.
    strengths : list[str]
        Highlighted strengths.
    improvements : list[str]
        Suggested improvements or remediation steps.
    analysis_type : AnalysisType
        Grading path that produced the result.
    detailed_scores : dict | None
        Opaque per-image breakdown for the visual path.
    """

    overall_score: int
    functionality: int
    code_quality: int
    best_practices: int
    feedback: str
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    analysis_type: AnalysisType = AnalysisType.CODE
    detailed_scores: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serialisable dict, omitting empty ``detailed_scores``."""
        data = asdict(self)
        data["analysis_type"] = self.analysis_type.value
        if data["detailed_scores"] is None:
            del data["detailed_scores"]
        return data
