"""Tests for the project structure classifier."""

from conftest import make_snapshot

from internship_evaluate.classify import classify, resolve_project_type
from internship_evaluate.models import ProjectStructure, ProjectType


def test_classify_counts_and_flags():
    snapshot = make_snapshot(
        files={"README.md": "#", "index.html": "<html>", "style.css": "a{}", "app.jsx": "x", "util.js": "y"},
        images=["shot.png"],
    )
    structure = classify(snapshot)

    assert structure.total_files == 5
    assert structure.total_images == 1
    assert structure.file_types == {"md": 1, "html": 1, "css": 1, "jsx": 1, "js": 1}
    assert structure.has_readme
    assert structure.has_html and structure.has_css and structure.has_javascript
    assert not structure.has_python
    assert structure.has_images


def test_readme_detection_is_case_insensitive_and_path_based():
    structure = classify(make_snapshot(files={"docs/ReadMe.txt": "hello"}))
    assert structure.has_readme


def test_images_without_code_is_design():
    structure = classify(make_snapshot(files={"README.md": "#"}, images=["a.png", "b.jpg"]))
    assert structure.project_type is ProjectType.UI_UX_DESIGN


def test_html_and_css_is_web_development():
    structure = classify(make_snapshot(files={"index.html": "<html>", "style.css": "a{}"}))
    assert structure.project_type is ProjectType.WEB_DEVELOPMENT


def test_html_with_images_is_web_development():
    structure = classify(make_snapshot(files={"index.html": "<html>", "style.css": "a{}"}, images=["hero.png"]))
    assert structure.project_type is ProjectType.WEB_DEVELOPMENT


def test_python_is_data_science():
    structure = classify(make_snapshot(files={"analysis.py": "import pandas", "data.csv": "a"}, images=["plot.png"]))
    assert structure.project_type is ProjectType.DATA_SCIENCE


def test_html_without_css_and_no_python_is_unknown():
    structure = classify(make_snapshot(files={"index.html": "<html>"}))
    assert structure.project_type is ProjectType.UNKNOWN


def test_empty_snapshot_is_unknown():
    structure = classify(make_snapshot())
    assert structure.project_type is ProjectType.UNKNOWN
    assert not structure.has_images


def test_declared_domain_takes_precedence():
    structure = ProjectStructure(project_type=ProjectType.UI_UX_DESIGN)
    assert resolve_project_type("web_development", structure) is ProjectType.WEB_DEVELOPMENT


def test_missing_or_unknown_domain_uses_inferred_type():
    structure = ProjectStructure(project_type=ProjectType.DATA_SCIENCE)
    assert resolve_project_type(None, structure) is ProjectType.DATA_SCIENCE
    assert resolve_project_type("pcb_design", structure) is ProjectType.DATA_SCIENCE


def test_domain_codes_match_identifier_vocabulary():
    assert ProjectType.WEB_DEVELOPMENT.domain_code == "WD"
    assert ProjectType.UI_UX_DESIGN.domain_code == "UD"
    assert ProjectType.DATA_SCIENCE.domain_code == "DS"
    assert ProjectType.UNKNOWN.domain_code == ""
    assert ProjectType.from_domain("Data-Science") is ProjectType.DATA_SCIENCE
