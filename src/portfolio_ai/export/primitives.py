"""Absolutely positioned draw primitives produced by the layout engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class TextRun:
    x: float  # left edge, alignment already applied
    y: float  # baseline
    text: str
    size: float
    bold: bool = False
    color: str = "#000000"
    kind: str = "text"  # what the run belongs to, e.g. "bullet", "job_title"


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 0.2
    color: str = "#000000"


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float
    color: str = "#000000"


Element = Union[TextRun, Line, Rect]


@dataclass
class Page:
    number: int
    elements: list[Element] = field(default_factory=list)
    footer: TextRun | None = None

    def texts(self, kind: str | None = None) -> list[TextRun]:
        """Text runs on this page, optionally only those of one kind."""
        return [
            e for e in self.elements
            if isinstance(e, TextRun) and (kind is None or e.kind == kind)
        ]
