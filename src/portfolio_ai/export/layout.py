"""Flow layout of a resume document onto fixed-size pages.

Every render_* method takes the current baseline ``y`` and returns the
cursor for the next element. The cursor only moves down within a page and
jumps back to the top margin when a page break is taken. Footers are written
last by finalize_footers(), once the page count is known.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from portfolio_ai.export.geometry import COLORS, FONTS, FontSpec, PageGeometry
from portfolio_ai.export.metrics import FPDFMetrics, TextMetrics, wrap_text
from portfolio_ai.export.primitives import Line, Page, TextRun
from portfolio_ai.models.document import (
    EducationEntry,
    ExperienceEntry,
    ResumeDocument,
    ResumeHeader,
    Section,
)

logger = logging.getLogger(__name__)

SUMMARY_TITLE = "Professional Summary"
EXPERIENCE_TITLE = "Professional Experience"
EDUCATION_TITLE = "Education"
SKILLS_TITLE = "Skills"
LANGUAGES_TITLE = "Languages"


class ResumeLayout:
    """Single-use layout state: the page list and the geometry it is laid on."""

    def __init__(
        self,
        geometry: PageGeometry | None = None,
        metrics: TextMetrics | None = None,
    ):
        self.geometry = geometry or PageGeometry()
        self.metrics = metrics or FPDFMetrics()
        self.pages: list[Page] = [Page(number=1)]
        self._finalized = False

    # -- page management -------------------------------------------------

    @property
    def page(self) -> Page:
        return self.pages[-1]

    def new_page(self) -> float:
        """Close the current page, open the next, and return the top margin."""
        self._check_open()
        self.pages.append(Page(number=len(self.pages) + 1))
        logger.debug("Page break -> page %d", len(self.pages))
        return self.geometry.top

    def _check_open(self) -> None:
        if self._finalized:
            raise RuntimeError("Layout is finalized; no more content can be added")

    # -- drawing helpers -------------------------------------------------

    def _measure(self, text: str, font: FontSpec) -> float:
        return self.metrics.width(text, font.size, font.bold)

    def _wrap(self, text: str, width: float, font: FontSpec) -> list[str]:
        return wrap_text(text, width, lambda s: self._measure(s, font))

    def _text(
        self,
        text: str,
        x: float,
        y: float,
        font: FontSpec,
        color: str,
        kind: str,
        align: str = "left",
    ) -> TextRun:
        if align == "right":
            x -= self._measure(text, font)
        elif align == "center":
            x -= self._measure(text, font) / 2
        run = TextRun(x=x, y=y, text=text, size=font.size, bold=font.bold, color=color, kind=kind)
        self._check_open()
        self.page.elements.append(run)
        return run

    def _line(self, x1: float, y1: float, x2: float, y2: float, width: float, color: str) -> None:
        self._check_open()
        self.page.elements.append(Line(x1=x1, y1=y1, x2=x2, y2=y2, width=width, color=color))

    def _flow_lines(
        self,
        lines: Sequence[str],
        x: float,
        y: float,
        font: FontSpec,
        color: str,
        kind: str,
    ) -> float:
        """Draw wrapped lines one line_height apart, continuing on a new page
        whenever a baseline would fall below the bottom margin."""
        g = self.geometry
        for line in lines:
            if y > g.bottom:
                y = self.new_page()
            self._text(line, x, y, font, color, kind)
            y += g.line_height
        return y

    def _render_bullets(self, items: Sequence[str], y: float, kind: str = "bullet") -> float:
        g = self.geometry
        font = FONTS["body"]
        wrap_width = g.content_width - g.bullet_wrap_inset
        for item in items:
            if y > g.bullet_break_y:
                y = self.new_page()
            lines = self._wrap(f"{g.bullet_symbol} {item}", wrap_width, font)
            if not lines:
                continue
            block = (len(lines) - 1) * g.line_height
            if y + block > g.bottom and y > g.top and g.top + block <= g.bottom:
                # Would cross the bottom margin here but fits whole on a fresh page
                y = self.new_page()
            y = self._flow_lines(lines, g.margin + g.bullet_indent, y, font, COLORS["secondary"], kind)
            y += g.item_spacing
        return y

    # -- sections --------------------------------------------------------

    def render_header(self, header: ResumeHeader, y: float | None = None) -> float:
        """Name, role, contact line and divider. Returns the first section's baseline."""
        g = self.geometry
        y = g.top if y is None else y

        name_font = FONTS["name"]
        self._text(header.first_name, g.margin, y, name_font, COLORS["primary"], "name")
        offset = self._measure(f"{header.first_name} ", name_font)
        self._text(header.last_name, g.margin + offset, y, name_font, COLORS["accent"], "name")
        y += name_font.line_advance + 1

        role_font = FONTS["section_title"]
        self._text(header.role.upper(), g.margin, y, role_font, COLORS["accent"], "role")
        y += role_font.line_advance + 1

        contact_text = g.contact_separator.join(c.value for c in header.contacts if c.value)
        contact_lines = self._wrap(contact_text, g.content_width, FONTS["body"])
        for i, line in enumerate(contact_lines):
            self._text(
                line, g.margin, y + i * g.line_height, FONTS["body"], COLORS["secondary"], "contact"
            )
        y += len(contact_lines) * g.line_height + 1.5

        self._line(g.margin, y, g.page_width - g.margin, y, 0.8, COLORS["accent"])
        return y + g.header_gap

    def render_section_title(self, title: str, y: float, next_break_y: float | None = None) -> float:
        """Upper-cased title with a short accent underline.

        ``next_break_y`` is the lowest cursor the block after the title may
        start at without breaking (default: ``geometry.bottom``). When the
        title would leave its block below that, the title moves to a new page
        with it.
        """
        g = self.geometry
        limit = g.bottom if next_break_y is None else next_break_y
        content_y = y + g.underline_offset + g.title_gap
        if content_y > limit and y > g.top:
            y = self.new_page()
            content_y = y + g.underline_offset + g.title_gap

        self._text(title.upper(), g.margin, y, FONTS["section_title"], COLORS["primary"], "section_title")
        underline_y = y + g.underline_offset
        self._line(g.margin, underline_y, g.margin + g.underline_length, underline_y, 0.3, COLORS["accent"])
        return content_y

    def render_summary(self, text: str, y: float) -> float:
        g = self.geometry
        lines = self._wrap(text, g.content_width, FONTS["body"])
        y = self._flow_lines(lines, g.margin, y, FONTS["body"], COLORS["secondary"], "summary")
        return y + g.section_spacing

    def render_experience_item(self, entry: ExperienceEntry, y: float) -> float:
        """Job title and period, organization, then bullets in order.

        A bullet starts on a new page when the cursor is past
        bullet_break_y, or when its wrapped lines would cross the bottom
        margin and it fits on a fresh page. Bullets taller than a page are
        split line by line.
        """
        g = self.geometry
        if y > g.bullet_break_y:
            y = self.new_page()

        self._text(entry.title, g.margin, y, FONTS["job_title"], COLORS["primary"], "job_title")
        self._text(
            entry.period,
            g.page_width - g.margin,
            y,
            FONTS["period"],
            COLORS["light_gray"],
            "period",
            align="right",
        )
        y += g.line_height + g.item_spacing

        self._text(entry.organization, g.margin, y, FONTS["organization"], COLORS["accent"], "organization")
        y += g.line_height + g.item_spacing

        y = self._render_bullets(entry.description, y)
        return y + g.section_spacing

    def render_education_item(self, entry: EducationEntry, y: float) -> float:
        g = self.geometry
        second_line = y + g.line_height + g.item_spacing
        if second_line > g.bottom and y > g.top:
            y = self.new_page()
            second_line = y + g.line_height + g.item_spacing

        self._text(entry.degree, g.margin, y, FONTS["job_title"], COLORS["primary"], "education")
        detail_font = FontSpec(FONTS["organization"].size)
        self._text(
            f"{entry.school} | {entry.year}", g.margin, second_line, detail_font, COLORS["light_gray"], "education"
        )
        return y + 2 * g.line_height + g.item_spacing + g.section_spacing

    def render_skills_section(
        self,
        categories: Mapping[str, Sequence[str]],
        y: float,
        title: str | None = None,
    ) -> float:
        """Skill categories in a fixed-column grid.

        A row never splits across pages: it moves whole to the next page
        when less than skills_slack remains. Each row advances the cursor by
        its tallest column only.
        """
        g = self.geometry
        if y > g.skills_break_y:
            y = self.new_page()
        if title:
            y = self.render_section_title(title, y)

        items = list(categories.items())
        if not items:
            return y

        label_font = FONTS["category_label"]
        body_font = FONTS["body"]
        cols = g.skill_columns
        for row_start in range(0, len(items), cols):
            if row_start > 0:
                y += g.item_spacing
                if y > g.skills_break_y:
                    y = self.new_page()
            row_height = 0.0
            for i, (category, skills) in enumerate(items[row_start:row_start + cols]):
                x = g.margin + i * (g.column_width + g.column_gap)
                self._text(category.upper(), x, y, label_font, COLORS["accent"], "skill_label")
                lines = self._wrap(", ".join(skills), g.column_width - 1, body_font)
                first = y + g.line_height + g.item_spacing
                for k, line in enumerate(lines):
                    self._text(line, x, first + k * g.line_height, body_font, COLORS["secondary"], "skill_text")
                height = g.line_height + g.item_spacing + len(lines) * g.line_height
                row_height = max(row_height, height)
            y += row_height
        return y + g.section_spacing

    def render_languages(self, languages: Sequence[str], y: float) -> float:
        g = self.geometry
        lines = self._wrap(", ".join(languages), g.content_width, FONTS["body"])
        y = self._flow_lines(lines, g.margin, y, FONTS["body"], COLORS["secondary"], "languages")
        return y + g.section_spacing

    def render_section(self, section: Section, y: float) -> float:
        """Generic titled section of paragraphs and bullet lists."""
        g = self.geometry
        first_bullets = bool(section.blocks) and section.blocks[0].kind == "bullets"
        y = self.render_section_title(
            section.title, y, next_break_y=g.bullet_break_y if first_bullets else None
        )
        for block in section.blocks:
            if block.kind == "bullets":
                y = self._render_bullets(block.items, y)
            else:
                lines = self._wrap(block.text, g.content_width, FONTS["body"])
                y = self._flow_lines(lines, g.margin, y, FONTS["body"], COLORS["secondary"], "paragraph")
                y += g.item_spacing
        return y + g.section_spacing

    # -- finishing -------------------------------------------------------

    def finalize_footers(self, total_pages: int | None = None) -> list[Page]:
        """Write "Page N of T" on every page once layout is complete.

        Single-page documents get no footer. After this call the layout
        accepts no more content.
        """
        g = self.geometry
        total = total_pages if total_pages is not None else len(self.pages)
        font = FONTS["small"]
        for page in self.pages:
            page.footer = None
            if total > 1:
                text = f"Page {page.number} of {total}"
                width = self._measure(text, font)
                page.footer = TextRun(
                    x=g.page_width / 2 - width / 2,
                    y=g.footer_y,
                    text=text,
                    size=font.size,
                    bold=False,
                    color=COLORS["light_gray"],
                    kind="footer",
                )
        self._finalized = True
        return self.pages

    def layout(self, document: ResumeDocument) -> list[Page]:
        """Lay out the whole document and finalize footers."""
        self._check_open()
        g = self.geometry
        y = self.render_header(document.header)

        if document.summary.strip():
            y = self.render_section_title(SUMMARY_TITLE, y)
            y = self.render_summary(document.summary, y)

        if document.experience:
            y = self.render_section_title(EXPERIENCE_TITLE, y, next_break_y=g.bullet_break_y)
            for entry in document.experience:
                y = self.render_experience_item(entry, y)

        if document.education:
            y = self.render_section_title(
                EDUCATION_TITLE, y, next_break_y=g.bottom - g.line_height - g.item_spacing
            )
            for entry in document.education:
                y = self.render_education_item(entry, y)

        if document.skills:
            y = self.render_skills_section(document.skills, y, title=SKILLS_TITLE)

        if document.languages:
            y = self.render_section_title(LANGUAGES_TITLE, y)
            y = self.render_languages(document.languages, y)

        for section in document.sections:
            y = self.render_section(section, y)

        pages = self.finalize_footers()
        logger.info("Laid out resume for %s %s on %d page(s)",
                    document.header.first_name, document.header.last_name, len(pages))
        return pages


def paginate(
    document: ResumeDocument,
    geometry: PageGeometry | None = None,
    metrics: TextMetrics | None = None,
) -> list[Page]:
    """Lay out document on fresh state and return its pages."""
    return ResumeLayout(geometry, metrics).layout(document)
