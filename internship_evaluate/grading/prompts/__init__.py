"""Prompt templates: YAML specs rendered with Jinja2."""

from internship_evaluate.grading.prompts.registry import (
    clear_prompt_registry,
    list_prompts,
    load_prompt,
    load_prompt_spec,
    register_prompt,
)
from internship_evaluate.grading.prompts.renderer import render

__all__ = [
    "clear_prompt_registry",
    "list_prompts",
    "load_prompt",
    "load_prompt_spec",
    "register_prompt",
    "render",
]
