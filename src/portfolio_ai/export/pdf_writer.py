"""Draw laid-out pages into a PDF with fpdf2 (pure Python, no system deps)."""

from __future__ import annotations

import logging

from fpdf import FPDF

from portfolio_ai.export.geometry import PageGeometry
from portfolio_ai.export.layout import ResumeLayout
from portfolio_ai.export.metrics import CORE_FONT, FPDFMetrics, TextMetrics, core_font_text
from portfolio_ai.export.primitives import Line, Page, Rect, TextRun
from portfolio_ai.models.document import ResumeDocument

logger = logging.getLogger(__name__)


def _rgb(color: str) -> tuple[int, int, int]:
    value = color.lstrip("#")
    if len(value) == 3:
        value = "".join(ch * 2 for ch in value)
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def _draw(pdf: FPDF, element) -> None:
    if isinstance(element, TextRun):
        pdf.set_font(CORE_FONT, "B" if element.bold else "", element.size)
        pdf.set_text_color(*_rgb(element.color))
        pdf.text(element.x, element.y, core_font_text(element.text))
    elif isinstance(element, Line):
        pdf.set_draw_color(*_rgb(element.color))
        pdf.set_line_width(element.width)
        pdf.line(element.x1, element.y1, element.x2, element.y2)
    elif isinstance(element, Rect):
        pdf.set_fill_color(*_rgb(element.color))
        pdf.rect(element.x, element.y, element.w, element.h, style="F")
    else:
        raise TypeError(f"Unsupported draw primitive: {type(element).__name__}")


def write_pdf(
    pages: list[Page],
    geometry: PageGeometry | None = None,
    title: str = "Resume",
) -> bytes:
    """Render pages to PDF bytes. Positions are used exactly as laid out."""
    g = geometry or PageGeometry()
    pdf = FPDF(orientation="P", unit="mm", format=(g.page_width, g.page_height))
    pdf.set_auto_page_break(auto=False)
    pdf.set_margins(g.margin, g.margin, g.margin)
    pdf.set_title(title)
    pdf.set_creator("portfolio-ai")

    for page in pages:
        pdf.add_page()
        for element in page.elements:
            _draw(pdf, element)
        if page.footer is not None:
            _draw(pdf, page.footer)

    logger.debug("Wrote PDF with %d page(s)", len(pages))
    return bytes(pdf.output())


def render_resume_pdf(
    document: ResumeDocument,
    geometry: PageGeometry | None = None,
    metrics: TextMetrics | None = None,
) -> tuple[bytes, list[Page]]:
    """Lay out a document and draw it. Returns the PDF bytes and the pages."""
    g = geometry or PageGeometry()
    layout = ResumeLayout(g, metrics or FPDFMetrics())
    pages = layout.layout(document)
    title = f"{document.header.first_name} {document.header.last_name} - Resume"
    return write_pdf(pages, g, title=title), pages
