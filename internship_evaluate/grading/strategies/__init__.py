"""Grading strategy registry and built-in strategies."""

from internship_evaluate.grading.strategies.base import GradingStrategy, GradingStrategyRegistry
from internship_evaluate.grading.strategies.code import CodeGradingStrategy
from internship_evaluate.grading.strategies.visual import VisualGradingStrategy

__all__ = ["CodeGradingStrategy", "GradingStrategy", "GradingStrategyRegistry", "VisualGradingStrategy"]
