"""Prompt template loading and the named prompt registry."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from internship_evaluate.grading.models import PromptSpec

logger = logging.getLogger(__name__)

BUILTIN_DIR = Path(__file__).parent / "templates"

_registry: dict[str, Path] = {}
_defaults_loaded = False


def load_prompt_spec(path: Path) -> PromptSpec:
    """Load a PromptSpec from a YAML file.

    Parameters
    ----------
    path : Path
        Path to a YAML prompt template file.

    Returns
    -------
    PromptSpec

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Prompt template not found: {path}"
        raise FileNotFoundError(msg)

    with open(path, encoding="utf-8") as fh:
        data: dict[str, Any] = yaml.safe_load(fh) or {}

    return PromptSpec(
        name=data.get("name", path.stem),
        version=str(data.get("version", "0.0")),
        description=data.get("description", ""),
        system_template=data.get("system", ""),
        user_template=data.get("user", ""),
    )


def _ensure_defaults_loaded() -> None:
    """Lazily register built-in prompt templates on first access."""
    global _defaults_loaded
    if not _defaults_loaded:
        for path in sorted(BUILTIN_DIR.glob("*.yaml")):
            _registry.setdefault(path.stem, path)
        _defaults_loaded = True


def register_prompt(name: str, path: str | Path) -> None:
    """Register a prompt template file under *name*.

    Parameters
    ----------
    name : str
        Lookup key referenced from ``grading.prompts`` in the configuration.
    path : str | Path
        Path to the YAML template.

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    """
    _ensure_defaults_loaded()
    path = Path(path)
    if not path.exists():
        msg = f"Prompt template not found: {path}"
        raise FileNotFoundError(msg)
    _registry[name] = path
    logger.debug("Registered prompt %s -> %s", name, path)


def list_prompts() -> list[str]:
    """Return sorted list of registered prompt names."""
    _ensure_defaults_loaded()
    return sorted(_registry)


def load_prompt(name: str) -> PromptSpec:
    """Load a registered prompt by name.

    Raises
    ------
    KeyError
        If *name* is not registered.
    """
    _ensure_defaults_loaded()
    if name not in _registry:
        available = ", ".join(sorted(_registry)) or "(none)"
        msg = f"Unknown prompt {name!r}. Available: {available}"
        raise KeyError(msg)
    return load_prompt_spec(_registry[name])


def clear_prompt_registry() -> None:
    """Drop user registrations; built-ins are re-registered on next access."""
    global _defaults_loaded
    _registry.clear()
    _defaults_loaded = False
