"""Strict parse-then-validate step for free-form model answers."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class Parsed(Generic[ModelT]):
    """A model answer that contained a valid payload."""

    value: ModelT
    raw: str


@dataclass
class Unparseable:
    """A model answer with no usable payload.

    Parameters
    ----------
    raw : str
        The original response text.
    reason : str
        Why parsing failed.
    """

    raw: str
    reason: str


def find_json_object(text: str) -> dict[str, Any] | None:
    """Locate the first balanced ``{...}`` block that decodes to a JSON object.

    Braces inside JSON string literals are ignored while matching, so
    prose before or after the payload (and markdown fences) is tolerated.

    Parameters
    ----------
    text : str
        Free-form response text.

    Returns
    -------
    dict | None
        The decoded object, or ``None`` when no candidate decodes.
    """
    if not text:
        return None

    start = text.find("{")
    while start != -1:
        end = _matching_brace(text, start)
        if end is None:
            return None
        try:
            data = json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            data = None
        if isinstance(data, dict):
            return data
        start = text.find("{", start + 1)
    return None


def _matching_brace(text: str, start: int) -> int | None:
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def parse_model_response(text: str, schema: type[ModelT]) -> Parsed[ModelT] | Unparseable:
    """Extract and validate a JSON payload against *schema*.

    Parameters
    ----------
    text : str
        Raw model answer.
    schema : type[BaseModel]
        Pydantic model the payload must satisfy.

    Returns
    -------
    Parsed | Unparseable
    """
    data = find_json_object(text)
    if data is None:
        logger.debug("No JSON object found in model response (%d chars)", len(text or ""))
        return Unparseable(raw=text or "", reason="no JSON object found")
    try:
        return Parsed(value=schema.model_validate(data), raw=text)
    except ValidationError as exc:
        logger.debug("Model response failed validation: %s", exc)
        return Unparseable(raw=text, reason=f"invalid payload ({exc.error_count()} errors)")
