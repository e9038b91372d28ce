"""Generative backend abstraction and registry."""

from internship_evaluate.grading.backends.base import Backend, BackendRegistry

__all__ = ["Backend", "BackendRegistry"]

# Each module registers itself via @BackendRegistry.register on import.


def _auto_register() -> None:
    """Import the built-in backends, triggering their registration decorators."""
    import importlib

    for mod in ("deterministic_backend", "litellm_backend", "openai_backend", "anthropic_backend"):
        importlib.import_module(f"internship_evaluate.grading.backends.{mod}")


_auto_register()
