"""Page geometry, fonts and colors for the resume PDF (units: mm, font sizes: pt)."""

from __future__ import annotations

from dataclasses import dataclass

PT_TO_MM = 0.35  # rough baseline advance per point of font size


@dataclass(frozen=True)
class FontSpec:
    size: float
    bold: bool = False

    @property
    def line_advance(self) -> float:
        return self.size * PT_TO_MM


COLORS = {
    "primary": "#000000",
    "secondary": "#333333",
    "accent": "#4f46e5",
    "light_gray": "#666666",
    "border": "#e5e7eb",
}

FONTS = {
    "name": FontSpec(18, bold=True),
    "section_title": FontSpec(10, bold=True),
    "job_title": FontSpec(9, bold=True),
    "period": FontSpec(7, bold=True),
    "organization": FontSpec(8, bold=True),
    "body": FontSpec(8),
    "small": FontSpec(7),
    "category_label": FontSpec(7, bold=True),
}


@dataclass(frozen=True)
class PageGeometry:
    """Fixed geometry for one render.

    The flow cursor lives between ``margin`` and ``bottom``.
    Experience bullets start a new page once the cursor passes
    ``bullet_break_y``; a skills grid needs ``skills_slack`` of room.
    """

    page_width: float = 210.0
    page_height: float = 297.0
    margin: float = 12.0
    line_height: float = 3.8
    section_spacing: float = 4.0
    item_spacing: float = 2.0
    bottom_slack: float = 15.0
    skills_slack: float = 45.0
    header_gap: float = 6.5
    title_gap: float = 7.5
    underline_offset: float = 1.0
    underline_length: float = 30.0
    bullet_indent: float = 3.0
    bullet_wrap_inset: float = 5.0
    bullet_symbol: str = "-"
    skill_columns: int = 3
    column_gap: float = 3.0
    footer_offset: float = 2.0
    contact_separator: str = " | "

    @classmethod
    def from_config(cls, layout) -> PageGeometry:
        """Build geometry from a config.LayoutConfig."""
        return cls(
            page_width=layout.page_width,
            page_height=layout.page_height,
            margin=layout.margin,
            line_height=layout.line_height,
            section_spacing=layout.section_spacing,
            item_spacing=layout.item_spacing,
            bottom_slack=layout.bottom_slack,
            skills_slack=layout.skills_slack,
        )

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def top(self) -> float:
        return self.margin

    @property
    def bottom(self) -> float:
        """Lowest baseline a content line may use.

        The bottom margin, or one line above the footer baseline when that is
        higher.
        """
        return min(self.page_height - self.margin, self.footer_y - self.line_height)

    @property
    def bullet_break_y(self) -> float:
        return self.page_height - self.margin - self.bottom_slack

    @property
    def skills_break_y(self) -> float:
        return self.page_height - self.margin - self.skills_slack

    @property
    def column_width(self) -> float:
        gaps = (self.skill_columns - 1) * self.column_gap
        return (self.content_width - gaps) / self.skill_columns

    @property
    def footer_y(self) -> float:
        return self.page_height - self.margin + self.footer_offset
