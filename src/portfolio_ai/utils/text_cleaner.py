"""Remove inline markdown that models add to plain-text fields."""

from __future__ import annotations

import re
from typing import Any

_INLINE_PATTERNS = [
    (re.compile(r"\*\*(.+?)\*\*"), r"\1"),  # **bold**
    (re.compile(r"__(.+?)__"), r"\1"),  # __bold__
    (re.compile(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?![\w*])"), r"\1"),  # *italic*
    (re.compile(r"(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)"), r"\1"),  # _italic_, not snake_case
    (re.compile(r"`([^`]*)`"), r"\1"),  # `code`
    (re.compile(r"\[([^\]]*)\]\([^)]*\)"), r"\1"),  # [text](url)
]


def strip_markdown(text: str) -> str:
    """Strip inline emphasis, code spans and links, keeping their text."""
    if not text:
        return text
    for pattern, repl in _INLINE_PATTERNS:
        text = pattern.sub(repl, text)
    return text


def strip_markdown_deep(value: Any) -> Any:
    """Apply strip_markdown to every string inside nested dicts and lists."""
    if isinstance(value, str):
        return strip_markdown(value)
    if isinstance(value, list):
        return [strip_markdown_deep(v) for v in value]
    if isinstance(value, dict):
        return {k: strip_markdown_deep(v) for k, v in value.items()}
    return value
