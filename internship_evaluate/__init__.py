"""Submission evaluation pipeline for the internship program."""

from internship_evaluate.api import Evaluator, evaluate
from internship_evaluate.classify import classify
from internship_evaluate.config import EvaluatorConfig, load_config
from internship_evaluate.extract import RepositoryExtractor
from internship_evaluate.grading.prompts import list_prompts, register_prompt
from internship_evaluate.models import AnalysisType, EvaluationResult, ProjectStructure, ProjectType, TaskContext

__all__ = [
    "AnalysisType",
    "EvaluationResult",
    "Evaluator",
    "EvaluatorConfig",
    "ProjectStructure",
    "ProjectType",
    "RepositoryExtractor",
    "TaskContext",
    "classify",
    "evaluate",
    "list_prompts",
    "load_config",
    "register_prompt",
]
