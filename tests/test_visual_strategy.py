"""Tests for the visual/design grading strategy."""

import pytest
from conftest import code_answer, image_answer, make_engine, make_snapshot

from internship_evaluate.config import GradingConfig
from internship_evaluate.exceptions import NoVisualContent, VisionUnavailable, VisualAnalysisError
from internship_evaluate.grading.strategies.code import CodeGradingStrategy
from internship_evaluate.grading.strategies.visual import VisualGradingStrategy, image_content_part, round_half_up
from internship_evaluate.models import AnalysisType, ImageFile, TaskContext

TASK = TaskContext.build("Design a mobile banking app", "Visual hierarchy and usability", "ui_ux_design")

IMG_79 = image_answer(20, 18, 22, 19, feedback="Strong visual appeal")
IMG_60 = image_answer(15, 15, 15, 15, feedback="Average")
IMG_85 = image_answer(22, 21, 21, 21, feedback="Polished")


def _strategy(engine, sleeps=None, with_code=True):
    code = CodeGradingStrategy(engine) if with_code else None
    sleep = sleeps.append if sleeps is not None else (lambda _: None)
    return VisualGradingStrategy(engine, GradingConfig(), code_strategy=code, sleep=sleep)


def test_three_images_mean_score():
    engine, backend = make_engine([IMG_79, IMG_60, IMG_85])
    sleeps = []
    snapshot = make_snapshot(images=["screens/home.png", "screens/login.png", "screens/profile.png"])

    result = _strategy(engine, sleeps).grade(snapshot, TASK)

    assert result.overall_score == 75
    assert result.analysis_type is AnalysisType.UI_UX
    assert (result.functionality, result.code_quality, result.best_practices) == (7, 7, 7)
    assert sleeps == [0.5, 0.5]
    assert len(backend.calls) == 3
    assert set(result.detailed_scores["images"]) == set(snapshot.images)
    assert result.detailed_scores["images"]["screens/home.png"]["total_score"] == 79
    assert result.feedback.startswith("UI/UX Design Analysis:")
    assert "screens/home.png: Strong visual appeal" in result.feedback


def test_image_is_sent_as_data_url():
    engine, backend = make_engine([IMG_79])
    _strategy(engine).grade(make_snapshot(images=["home.png"]), TASK)

    content = backend.calls[0][-1]["content"]
    assert content[0]["type"] == "text"
    assert "home.png" in content[0]["text"]
    assert content[1]["image_url"]["url"].startswith("data:image/png;base64,")


def test_svg_is_sent_as_markup():
    part = image_content_part(ImageFile(path="logo.svg", content=b"<svg><rect/></svg>", extension="svg"))
    assert part["type"] == "text"
    assert "<svg><rect/></svg>" in part["text"]


def test_failed_image_excluded_from_mean():
    engine, _ = make_engine([IMG_79, RuntimeError("provider exploded"), IMG_85])
    snapshot = make_snapshot(images=["a.png", "b.png", "c.png"])

    result = _strategy(engine).grade(snapshot, TASK)

    assert result.overall_score == 82
    failed = result.detailed_scores["images"]["b.png"]
    assert failed["total_score"] == 0
    assert failed["error"]
    assert "provider exploded" not in failed["error"]
    assert result.detailed_scores["analyzed_images"] == 2
    assert result.detailed_scores["failed_images"] == 1


def test_unparseable_image_answer_counts_as_failure():
    engine, _ = make_engine(["Looks lovely!", IMG_60])
    result = _strategy(engine).grade(make_snapshot(images=["a.png", "b.png"]), TASK)

    assert result.overall_score == 60
    assert result.detailed_scores["images"]["a.png"]["error"]


def test_blend_with_code_lies_between_scores():
    # one image scoring 80, code overall 40
    engine, backend = make_engine([image_answer(20, 20, 20, 20), code_answer(overall=40)])
    snapshot = make_snapshot(files={"index.html": "<html></html>"}, images=["home.png"])

    result = _strategy(engine).grade(snapshot, TASK)

    assert 40 < result.overall_score < 80
    assert result.overall_score == 68
    assert result.detailed_scores["code_analysis"]["overall_score"] == 40
    assert len(backend.calls) == 2


def test_blend_skipped_when_code_grading_fails():
    engine, _ = make_engine([image_answer(20, 20, 20, 20), RuntimeError("timeout")])
    snapshot = make_snapshot(files={"index.html": "<html></html>"}, images=["home.png"])

    result = _strategy(engine).grade(snapshot, TASK)

    assert result.overall_score == 80
    assert "code_analysis" not in result.detailed_scores


def test_no_images_raises_no_visual_content():
    engine, backend = make_engine([])
    with pytest.raises(NoVisualContent):
        _strategy(engine).grade(make_snapshot(files={"README.md": "#"}), TASK)
    assert backend.calls == []


def test_all_images_failing_raises():
    engine, _ = make_engine([RuntimeError("a"), RuntimeError("b")])
    with pytest.raises(VisualAnalysisError):
        _strategy(engine).grade(make_snapshot(images=["a.png", "b.png"]), TASK)


def test_backend_without_vision_raises_immediately():
    engine, backend = make_engine([], supports_vision=False)
    with pytest.raises(VisionUnavailable):
        _strategy(engine).grade(make_snapshot(images=["a.png"]), TASK)
    assert backend.calls == []


def test_strengths_are_merged_without_duplicates():
    engine, _ = make_engine([IMG_79, IMG_85])
    result = _strategy(engine).grade(make_snapshot(images=["a.png", "b.png"]), TASK)
    assert result.strengths == ["Clear hierarchy"]
    assert result.improvements == ["Improve contrast"]


def test_half_point_scores_round_up():
    engine, _ = make_engine([image_answer(17, 16, 16, 16)])
    result = _strategy(engine).grade(make_snapshot(images=["a.png"]), TASK)

    assert result.overall_score == 65
    assert (result.functionality, result.code_quality, result.best_practices) == (7, 7, 7)


def test_half_point_mean_rounds_up():
    engine, _ = make_engine([image_answer(15, 15, 15, 15), image_answer(16, 15, 15, 15)])
    result = _strategy(engine).grade(make_snapshot(images=["a.png", "b.png"]), TASK)

    assert result.detailed_scores["visual_mean"] == 60.5
    assert result.overall_score == 61
    assert result.functionality == 6


@pytest.mark.parametrize(("value", "expected"), [(64.5, 65), (6.5, 7), (7.4667, 7), (0.0, 0), (99.5, 100)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
