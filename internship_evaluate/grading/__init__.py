"""Grading strategies with pluggable generative backends."""

from internship_evaluate.grading.backends import Backend, BackendRegistry
from internship_evaluate.grading.engine import GradingEngine
from internship_evaluate.grading.models import CodeGradeResponse, ImageAnalysis, ImageGradeResponse, PromptSpec
from internship_evaluate.grading.parsing import Parsed, Unparseable, find_json_object, parse_model_response
from internship_evaluate.grading.strategies import (
    CodeGradingStrategy,
    GradingStrategy,
    GradingStrategyRegistry,
    VisualGradingStrategy,
)

__all__ = [
    "Backend",
    "BackendRegistry",
    "CodeGradeResponse",
    "CodeGradingStrategy",
    "GradingEngine",
    "GradingStrategy",
    "GradingStrategyRegistry",
    "ImageAnalysis",
    "ImageGradeResponse",
    "Parsed",
    "PromptSpec",
    "Unparseable",
    "VisualGradingStrategy",
    "find_json_object",
    "parse_model_response",
]
