"""Template rendering for prompt specs."""

from __future__ import annotations

from typing import Any

import jinja2

from internship_evaluate.grading.models import PromptSpec

_ENV = jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True)


def render(spec: PromptSpec, variables: dict[str, Any]) -> list[dict[str, Any]]:
    """Render a prompt spec into chat messages.

    Parameters
    ----------
    spec : PromptSpec
        The prompt template to render.
    variables : dict[str, Any]
        Template variables (e.g. ``task``, ``summary``).

    Returns
    -------
    list[dict]
        Chat messages suitable for ``Backend.complete``.

    Raises
    ------
    jinja2.UndefinedError
        If the template references a variable missing from *variables*.
    """
    system_text = _render_template(spec.system_template, variables)
    user_text = _render_template(spec.user_template, variables)

    messages: list[dict[str, Any]] = []
    if system_text:
        messages.append({"role": "system", "content": system_text})
    if user_text:
        messages.append({"role": "user", "content": user_text})
    return messages


def _render_template(template: str, variables: dict[str, Any]) -> str:
    """Render a single template string."""
    if not template:
        return ""
    return _ENV.from_string(template).render(**variables).strip()
