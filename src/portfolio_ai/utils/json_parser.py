"""Strict JSON parsing of model responses.

A reply is accepted when the whole text is JSON, or when it contains exactly
one fenced code block holding JSON. Nothing is extracted by brace hunting and
truncated output is never repaired: anything else is a ResponseParseError.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)

_FENCE_RE = re.compile(r"```[a-zA-Z]*\s*\n(.*?)\n?```", re.DOTALL)


class ResponseParseError(ValueError):
    """The model reply is not the structured content that was asked for."""


def extract_json(text: str) -> dict | list:
    """Parse JSON from an LLM reply, allowing one ```json fenced block."""
    if not isinstance(text, str) or not text.strip():
        raise ResponseParseError("Empty response")
    text = text.strip()

    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    blocks = _FENCE_RE.findall(text)
    if len(blocks) != 1:
        raise ResponseParseError(
            f"Expected JSON or a single fenced JSON block, found {len(blocks)} blocks"
        )
    try:
        return json.loads(blocks[0].strip())
    except json.JSONDecodeError as exc:
        raise ResponseParseError(f"Fenced block is not valid JSON: {exc.msg}") from exc


def parse_model(
    text: str,
    model: type[M],
    preprocess: Callable[[dict], Any] | None = None,
) -> M:
    """Parse text as JSON and validate it against a pydantic model.

    preprocess, if given, transforms the decoded object before validation.
    """
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")
    if preprocess is not None:
        data = preprocess(data)
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise ResponseParseError(
            f"Response does not match {model.__name__}: {exc.error_count()} errors"
        ) from exc
