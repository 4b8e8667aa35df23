"""Text measurement and word wrapping."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from fpdf import FPDF

CORE_FONT = "Helvetica"


class TextMetrics(Protocol):
    def width(self, text: str, size: float, bold: bool = False) -> float:
        """Rendered width of text in mm."""
        ...


def core_font_text(text: str) -> str:
    """Make text encodable by the built-in PDF fonts (latin-1)."""
    try:
        text.encode("latin-1")
        return text
    except UnicodeEncodeError:
        return text.encode("latin-1", errors="replace").decode("latin-1")


class FPDFMetrics:
    """Widths from fpdf2's Helvetica tables, so layout matches the PDF output."""

    def __init__(self, family: str = CORE_FONT):
        self.family = family
        self._pdf = FPDF(unit="mm", format="A4")
        self._cache: dict[tuple[str, float, bool], float] = {}

    def width(self, text: str, size: float, bold: bool = False) -> float:
        key = (text, size, bold)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        self._pdf.set_font(self.family, "B" if bold else "", size)
        value = self._pdf.get_string_width(core_font_text(text))
        self._cache[key] = value
        return value


def wrap_text(text: str, max_width: float, measure: Callable[[str], float]) -> list[str]:
    """Greedy word wrap; words wider than max_width are broken by character.

    Explicit newlines start new lines. Blank input gives no lines.
    """
    if not text or not text.strip():
        return []

    lines: list[str] = []
    for paragraph in text.split("\n"):
        words = paragraph.split()
        if not words:
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if measure(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
                current = ""
            if measure(word) <= max_width:
                current = word
                continue
            # Hard-break a single overlong word
            chunk = ""
            for ch in word:
                if chunk and measure(chunk + ch) > max_width:
                    lines.append(chunk)
                    chunk = ch
                else:
                    chunk += ch
            current = chunk
        if current:
            lines.append(current)
    return lines
