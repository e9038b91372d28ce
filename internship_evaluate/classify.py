"""Structural statistics and project type inference for repository snapshots."""

from __future__ import annotations

import logging
from collections import Counter

from internship_evaluate.models import ProjectStructure, ProjectType, RepositorySnapshot

logger = logging.getLogger(__name__)

_JAVASCRIPT = frozenset({"js", "jsx"})


def classify(snapshot: RepositorySnapshot) -> ProjectStructure:
    """Derive structural statistics and infer the artifact type.

    Inference priority: images without HTML or Python markers is a design
    submission; HTML together with CSS is web development; any Python is
    data science; everything else is unknown.

    Parameters
    ----------
    snapshot : RepositorySnapshot
        Extracted repository content.

    Returns
    -------
    ProjectStructure
    """
    file_types = Counter(f.extension for f in snapshot.files.values())

    structure = ProjectStructure(
        total_files=len(snapshot.files),
        total_images=len(snapshot.images),
        file_types=dict(file_types),
        has_readme=any("readme" in path.lower() for path in snapshot.files),
        has_html="html" in file_types,
        has_css="css" in file_types,
        has_javascript=any(ext in file_types for ext in _JAVASCRIPT),
        has_python="py" in file_types,
        has_images=bool(snapshot.images),
    )

    # Images next to HTML count as web development.
    if structure.has_images and not structure.has_html and not structure.has_python:
        structure.project_type = ProjectType.UI_UX_DESIGN
    elif structure.has_html and structure.has_css:
        structure.project_type = ProjectType.WEB_DEVELOPMENT
    elif structure.has_python:
        structure.project_type = ProjectType.DATA_SCIENCE

    logger.debug(
        "Classified %s/%s as %s (files=%d images=%d)",
        snapshot.owner,
        snapshot.repo,
        structure.project_type.value,
        structure.total_files,
        structure.total_images,
    )
    return structure


def resolve_project_type(domain: str | None, structure: ProjectStructure) -> ProjectType:
    """Pick the type that drives strategy selection.

    A recognised caller-declared *domain* wins; the inferred type is used
    only when the domain is absent or unknown.
    """
    declared = ProjectType.from_domain(domain)
    if declared is not ProjectType.UNKNOWN:
        return declared
    return structure.project_type
