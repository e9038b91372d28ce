"""Unified configuration for the evaluation pipeline."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

DEFAULT_BACKEND = "deterministic"
DEFAULT_MODEL = "gemini/gemini-2.5-flash"


@dataclass
class BackendConfig:
    """Generative backend configuration.

    Parameters
    ----------
    type : str
        Registered backend name (``"litellm"``, ``"openai"``, ``"anthropic"``
        or ``"deterministic"``).
    model : str
        Model identifier forwarded to the backend.
    temperature : float
        Sampling temperature.
    max_tokens : int
        Maximum tokens per completion.
    extra : dict
        Additional kwargs forwarded to the backend constructor.
    """

    type: str = DEFAULT_BACKEND
    model: str = DEFAULT_MODEL
    temperature: float = 0.2
    max_tokens: int = 2048
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.type:
            msg = "type must be a non-empty string"
            raise ValueError(msg)
        if not self.model:
            msg = "model must be a non-empty string"
            raise ValueError(msg)
        if self.temperature < 0:
            msg = f"temperature must be >= 0, got {self.temperature}"
            raise ValueError(msg)
        if self.max_tokens <= 0:
            msg = f"max_tokens must be > 0, got {self.max_tokens}"
            raise ValueError(msg)


@dataclass
class SourceConfig:
    """Source-hosting read API configuration.

    Parameters
    ----------
    api_url : str
        Base URL of the REST API.
    raw_url : str
        Base URL of the raw-content endpoint.
    token : str | None
        Optional bearer credential; raises the rate limit when set.
    timeout : float
        Per-request transport timeout in seconds.
    max_entries : int
        Cap on accepted files + images per snapshot.
    max_file_size : int
        Text files at or above this size (bytes) are skipped.
    max_image_size : int
        Images larger than this size (bytes) are skipped.
    """

    api_url: str = "https://api.github.com"
    raw_url: str = "https://raw.githubusercontent.com"
    token: str | None = None
    timeout: float = 20.0
    max_entries: int = 50
    max_file_size: int = 100_000
    max_image_size: int = 5_000_000

    def __post_init__(self) -> None:
        if self.max_entries <= 0:
            msg = f"max_entries must be > 0, got {self.max_entries}"
            raise ValueError(msg)
        if self.timeout <= 0:
            msg = f"timeout must be > 0, got {self.timeout}"
            raise ValueError(msg)
        if self.max_image_size <= 0:
            msg = f"max_image_size must be > 0, got {self.max_image_size}"
            raise ValueError(msg)


@dataclass
class GradingConfig:
    """Grading strategy settings.

    Parameters
    ----------
    image_delay : float
        Pause in seconds between successive image analysis calls.
    visual_weight : float
        Weight of the visual mean when a design submission also ships code.
    code_weight : float
        Weight of the code score in that blend.
    max_summary_files : int
        Number of files included in the code review prompt.
    max_file_chars : int
        Per-file character budget in the code review prompt.
    prompts : dict[str, str]
        Per-strategy prompt overrides (``{"code": "<registered prompt>"}``).
    """

    image_delay: float = 0.5
    visual_weight: float = 0.7
    code_weight: float = 0.3
    max_summary_files: int = 10
    max_file_chars: int = 2000
    prompts: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.image_delay < 0:
            msg = f"image_delay must be >= 0, got {self.image_delay}"
            raise ValueError(msg)
        if abs(self.visual_weight + self.code_weight - 1.0) > 1e-9:
            msg = "visual_weight and code_weight must sum to 1.0"
            raise ValueError(msg)


@dataclass
class EvaluatorConfig:
    """Top-level configuration for the evaluation pipeline."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    grading: GradingConfig = field(default_factory=GradingConfig)


def load_config(source: EvaluatorConfig | str | Path | dict[str, Any] | None = None) -> EvaluatorConfig:
    """Load an EvaluatorConfig from a YAML file, dict, or environment variables.

    Environment variables take precedence over values from *source*.

    Parameters
    ----------
    source : EvaluatorConfig | str | Path | dict | None
        An existing config (returned unchanged), a path to a YAML file, a raw
        dict, or ``None`` to use only environment variable overrides on
        defaults.

    Returns
    -------
    EvaluatorConfig
    """
    if isinstance(source, EvaluatorConfig):
        return source

    raw: dict[str, Any] = {}

    if isinstance(source, dict):
        raw = source
    elif source is not None:
        path = Path(source)
        if path.is_file():
            raw = _load_yaml(path)

    backend_raw = raw.get("backend", {})
    backend = BackendConfig(
        type=os.environ.get("EVALUATOR_BACKEND_TYPE", backend_raw.get("type", DEFAULT_BACKEND)),
        model=os.environ.get("EVALUATOR_BACKEND_MODEL", backend_raw.get("model", DEFAULT_MODEL)),
        temperature=float(os.environ.get("EVALUATOR_BACKEND_TEMPERATURE", backend_raw.get("temperature", 0.2))),
        max_tokens=int(os.environ.get("EVALUATOR_BACKEND_MAX_TOKENS", backend_raw.get("max_tokens", 2048))),
        extra={k: v for k, v in backend_raw.items() if k not in {"type", "model", "temperature", "max_tokens"}},
    )

    source_raw = raw.get("source", {})
    defaults = SourceConfig()
    source_cfg = SourceConfig(
        api_url=source_raw.get("api_url", defaults.api_url),
        raw_url=source_raw.get("raw_url", defaults.raw_url),
        token=os.environ.get("GITHUB_TOKEN") or source_raw.get("token"),
        timeout=float(os.environ.get("EVALUATOR_SOURCE_TIMEOUT", source_raw.get("timeout", defaults.timeout))),
        max_entries=int(source_raw.get("max_entries", defaults.max_entries)),
        max_file_size=int(source_raw.get("max_file_size", defaults.max_file_size)),
        max_image_size=int(source_raw.get("max_image_size", defaults.max_image_size)),
    )

    grading_raw = raw.get("grading", {})
    grading = GradingConfig(
        image_delay=float(grading_raw.get("image_delay", 0.5)),
        visual_weight=float(grading_raw.get("visual_weight", 0.7)),
        code_weight=float(grading_raw.get("code_weight", 0.3)),
        max_summary_files=int(grading_raw.get("max_summary_files", 10)),
        max_file_chars=int(grading_raw.get("max_file_chars", 2000)),
        prompts=dict(grading_raw.get("prompts", {})),
    )

    return EvaluatorConfig(backend=backend, source=source_cfg, grading=grading)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file using PyYAML."""
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}
