"""Tests for the resume paginator."""

from __future__ import annotations

import pytest
from conftest import MonospaceMetrics, make_document

from portfolio_ai.export.geometry import PageGeometry
from portfolio_ai.export.layout import ResumeLayout, paginate
from portfolio_ai.models.document import (
    ContentBlock,
    EducationEntry,
    ExperienceEntry,
    ResumeHeader,
    Section,
)

FLOW_KINDS_EXCLUDED = {"skill_label", "skill_text"}


def _word_bullet(lines: int) -> str:
    """A bullet that wraps to exactly `lines` lines with MonospaceMetrics at 8pt."""
    # 11 nine-letter words fit on one 181 mm line (1.6 mm per character)
    return " ".join("abcdefghi" for _ in range(11 * lines))


def _bullets_on(page) -> list[list]:
    """Bullet runs on a page grouped per bullet; a bullet starts with its symbol."""
    groups: list[list] = []
    for run in page.texts("bullet"):
        if run.text.startswith("- ") or not groups:
            groups.append([run])
        else:
            groups[-1].append(run)
    return groups


@pytest.fixture
def layout(geometry, metrics) -> ResumeLayout:
    return ResumeLayout(geometry, metrics)


def _long_document():
    return make_document(experience_count=8, bullets_per_entry=6)


class TestDeterminism:
    def test_same_input_same_pages(self, geometry, metrics):
        doc = _long_document()
        assert paginate(doc, geometry, metrics) == paginate(doc, geometry, metrics)

    def test_fresh_state_per_layout(self, geometry, metrics, sample_document):
        first = ResumeLayout(geometry, metrics).layout(sample_document)
        second = ResumeLayout(geometry, metrics).layout(sample_document)
        assert len(first) == len(second) == 1


class TestNoOverlap:
    def test_baselines_stay_inside_margins(self, geometry, metrics):
        pages = paginate(_long_document(), geometry, metrics)
        assert len(pages) > 1
        for page in pages:
            for run in page.texts():
                assert geometry.top <= run.y <= geometry.bottom + 1e-9, (page.number, run)

    def test_flow_never_moves_up_within_a_page(self, geometry, metrics):
        pages = paginate(_long_document(), geometry, metrics)
        for page in pages:
            ys = [r.y for r in page.texts() if r.kind not in FLOW_KINDS_EXCLUDED]
            assert ys == sorted(ys), page.number

    def test_bullet_lines_spaced_by_line_height(self, geometry, metrics):
        pages = paginate(_long_document(), geometry, metrics)
        for page in pages:
            ys = [r.y for r in page.texts("bullet")]
            for a, b in zip(ys, ys[1:]):
                assert b - a >= geometry.line_height - 1e-9

    def test_next_bullet_clears_previous_by_item_spacing(self, geometry, metrics):
        doc = make_document(experience_count=6, bullets_per_entry=5, bullet_text=_word_bullet(2))
        pages = paginate(doc, geometry, metrics)
        checked = 0
        for page in pages:
            bullets = _bullets_on(page)
            for previous, following in zip(bullets, bullets[1:]):
                assert following[0].y > previous[-1].y + geometry.item_spacing, (page.number, following[0])
                checked += 1
        assert checked > 0
        assert any(len(lines) > 1 for page in pages for lines in _bullets_on(page))

    def test_every_bullet_rendered_once_in_order(self, geometry, metrics):
        doc = _long_document()
        pages = paginate(doc, geometry, metrics)
        rendered = [r.text for p in pages for r in p.texts("bullet")]
        expected = [f"- {b}" for e in doc.experience for b in e.description]
        assert rendered == expected


class TestHeader:
    def test_name_role_and_contacts(self, layout, sample_document):
        y = layout.render_header(sample_document.header)
        page = layout.page
        assert [r.text for r in page.texts("name")] == ["Amani", "Otieno"]
        assert page.texts("role")[0].text == "FULL-STACK DEVELOPER"
        assert page.texts("contact")[0].text == "amani@example.com | Nairobi, Kenya"
        assert page.texts("name")[0].y == layout.geometry.top
        assert y > page.texts("contact")[-1].y

    def test_no_contacts(self, layout):
        header = ResumeHeader(first_name="A", last_name="B", role="Dev")
        layout.render_header(header)
        assert layout.page.texts("contact") == []


class TestSectionTitle:
    def test_title_upper_cased_with_underline(self, layout):
        g = layout.geometry
        y = layout.render_section_title("Education", 100)
        assert layout.page.texts("section_title")[0].text == "EDUCATION"
        assert y == pytest.approx(100 + g.underline_offset + g.title_gap)
        underline = layout.page.elements[-1]
        assert underline.x2 - underline.x1 == g.underline_length
        assert underline.y1 == 100 + g.underline_offset

    def test_title_kept_with_next_line(self, layout):
        y = layout.render_section_title("Skills", 280)
        assert len(layout.pages) == 2
        assert layout.pages[1].texts("section_title")[0].y == layout.geometry.top
        assert y < 30

    def test_experience_title_moves_with_first_entry(self, layout):
        g = layout.geometry
        entry = ExperienceEntry(title="Dev", organization="Acme", period="2020", description=["One"])
        # the entry would start at 273.5, past bullet_break_y
        y = layout.render_section_title("Professional Experience", 265.0, next_break_y=g.bullet_break_y)
        layout.render_experience_item(entry, y)

        assert layout.pages[0].texts() == []
        assert layout.pages[1].texts("section_title")[0].y == g.top
        assert layout.pages[1].texts("job_title")[0].y == pytest.approx(g.top + g.underline_offset + g.title_gap)

    def test_title_stays_when_next_block_fits(self, layout):
        g = layout.geometry
        y = layout.render_section_title("Professional Experience", 260.0, next_break_y=g.bullet_break_y)
        assert len(layout.pages) == 1
        assert y == pytest.approx(268.5)

    @pytest.mark.parametrize("summary_lines", range(50, 64))
    def test_section_title_never_ends_a_page(self, geometry, metrics, summary_lines):
        # walks the experience title down the bottom of page 1
        doc = make_document().model_copy(update={"summary": _word_bullet(summary_lines)})
        pages = paginate(doc, geometry, metrics)
        for page in pages:
            assert page.texts()[-1].kind != "section_title", page.number


class TestExperiencePageBreaks:
    def test_period_right_aligned(self, layout, metrics):
        entry = ExperienceEntry(title="Dev", organization="Acme", period="2020 - 2021")
        layout.render_experience_item(entry, 50)
        period = layout.page.texts("period")[0]
        assert period.x + metrics.width(period.text, period.size, period.bold) == pytest.approx(198)
        assert period.y == layout.page.texts("job_title")[0].y

    def test_bullet_below_threshold_starts_new_page(self, layout):
        g = layout.geometry
        entry = ExperienceEntry(title="Dev", organization="Acme", period="2020", description=["One", "Two"])
        # org at 267.8, first bullet cursor at 273.6 > 270
        layout.render_experience_item(entry, 262)
        assert len(layout.pages) == 2
        assert layout.pages[0].texts("job_title")[0].y == 262
        assert layout.pages[0].texts("bullet") == []
        assert layout.pages[1].texts("bullet")[0].y == g.top

    def test_bullets_at_threshold_stay(self, layout):
        entry = ExperienceEntry(
            title="Dev", organization="Acme", period="2020", description=["One", "Two", "Three"]
        )
        # bullets at 261.6 and 267.4 stay; the third is at 273.2 > 270
        layout.render_experience_item(entry, 250)
        assert [r.text for r in layout.pages[0].texts("bullet")] == ["- One", "- Two"]
        assert [r.text for r in layout.pages[1].texts("bullet")] == ["- Three"]

    def test_entry_starting_below_threshold_moves_whole(self, layout):
        entry = ExperienceEntry(title="Dev", organization="Acme", period="2020", description=["One"])
        layout.render_experience_item(entry, 271)
        assert layout.pages[0].texts() == []
        assert layout.pages[1].texts("job_title")[0].y == layout.geometry.top

    def test_multiline_bullet_that_would_cross_margin_moves(self, layout):
        g = layout.geometry
        layout.render_experience_item(
            ExperienceEntry(title="Dev", organization="Acme", period="2020", description=["One"]),
            250,
        )
        y = layout._render_bullets([_word_bullet(6)], 267.4)
        assert len(layout.pages) == 2
        lines = layout.pages[1].texts("bullet")
        assert len(lines) == 6
        assert lines[0].y == g.top
        assert y == pytest.approx(g.top + 6 * g.line_height + g.item_spacing)

    def test_multiline_bullet_that_fits_stays(self, layout):
        layout._render_bullets([_word_bullet(3)], 267.4)
        assert len(layout.pages) == 1
        lines = layout.page.texts("bullet")
        assert len(lines) == 3
        assert lines[-1].y <= layout.geometry.bottom

    def test_bullet_taller_than_page_splits_by_line(self, layout):
        g = layout.geometry
        layout._render_bullets([_word_bullet(90)], g.top)
        assert len(layout.pages) == 2
        for page in layout.pages:
            for run in page.texts("bullet"):
                assert run.y <= g.bottom + 1e-9
        total = sum(len(p.texts("bullet")) for p in layout.pages)
        assert total == 90


class TestEducation:
    def test_degree_and_details(self, layout):
        g = layout.geometry
        y = layout.render_education_item(
            EducationEntry(degree="B.S. Computer Technology", school="JKUAT", year="2018"), 100
        )
        texts = [r.text for r in layout.page.texts("education")]
        assert texts == ["B.S. Computer Technology", "JKUAT | 2018"]
        assert y == pytest.approx(100 + 2 * g.line_height + g.item_spacing + g.section_spacing)

    def test_entry_never_split(self, layout):
        layout.render_education_item(EducationEntry(degree="D", school="S", year="Y"), 282)
        assert layout.pages[0].texts() == []
        assert len(layout.pages[1].texts("education")) == 2


class TestSkillsGrid:
    @staticmethod
    def _skills(n: int) -> list[str]:
        # Three "SkillNNNNN," tokens fit on one 59 mm column line
        return [f"Skill{i:05d}" for i in range(n)]

    def test_row_advances_by_tallest_column(self, layout):
        g = layout.geometry
        categories = {"a": self._skills(1), "b": self._skills(9), "c": self._skills(4)}
        y = layout.render_skills_section(categories, 100)
        tallest = g.line_height + g.item_spacing + 3 * g.line_height
        assert y == pytest.approx(100 + tallest + g.section_spacing)

    def test_rows_separated_by_item_spacing(self, layout):
        g = layout.geometry
        categories = {"a": self._skills(3), "b": self._skills(3), "c": self._skills(3), "d": self._skills(6)}
        y = layout.render_skills_section(categories, 100)
        first = g.line_height + g.item_spacing + g.line_height
        second = g.line_height + g.item_spacing + 2 * g.line_height
        assert y == pytest.approx(100 + first + g.item_spacing + second + g.section_spacing)

    def test_columns_share_a_baseline(self, layout):
        g = layout.geometry
        layout.render_skills_section({"a": ["x"], "b": ["y"], "c": ["z"]}, 100)
        labels = layout.page.texts("skill_label")
        assert [r.text for r in labels] == ["A", "B", "C"]
        assert {r.y for r in labels} == {100}
        assert [r.x for r in labels] == pytest.approx(
            [g.margin, g.margin + g.column_width + g.column_gap, g.margin + 2 * (g.column_width + g.column_gap)]
        )

    def test_grid_moves_when_less_than_slack_remains(self, layout):
        layout.render_skills_section({"a": ["x"]}, 241)
        assert len(layout.pages) == 2
        assert layout.pages[1].texts("skill_label")[0].y == layout.geometry.top

    def test_empty_categories(self, layout):
        assert layout.render_skills_section({}, 100) == 100


class TestLanguagesAndSections:
    def test_languages_advance(self, layout):
        g = layout.geometry
        y = layout.render_languages(["English", "Swahili"], 100)
        assert layout.page.texts("languages")[0].text == "English, Swahili"
        assert y == pytest.approx(100 + g.line_height + g.section_spacing)

    def test_generic_section(self, layout):
        section = Section(
            title="Projects",
            blocks=[
                ContentBlock(kind="paragraph", text="Selected work."),
                ContentBlock(kind="bullets", items=["GradeAssist", "Writing Service"]),
            ],
        )
        layout.render_section(section, 100)
        assert layout.page.texts("section_title")[0].text == "PROJECTS"
        assert layout.page.texts("paragraph")[0].text == "Selected work."
        assert [r.text for r in layout.page.texts("bullet")] == ["- GradeAssist", "- Writing Service"]


class TestFooters:
    def test_single_page_has_no_footer(self, geometry, metrics, sample_document):
        pages = paginate(sample_document, geometry, metrics)
        assert len(pages) == 1
        assert pages[0].footer is None

    def test_every_page_numbered(self, geometry, metrics):
        pages = paginate(_long_document(), geometry, metrics)
        total = len(pages)
        assert total > 1
        for i, page in enumerate(pages, start=1):
            assert page.number == i
            assert page.footer.text == f"Page {i} of {total}"
            assert page.footer.y == geometry.page_height - geometry.margin + 2
            width = metrics.width(page.footer.text, page.footer.size)
            assert page.footer.x + width / 2 == pytest.approx(geometry.page_width / 2)

    def test_content_after_finalize_rejected(self, layout, sample_document):
        layout.layout(sample_document)
        with pytest.raises(RuntimeError, match="finalized"):
            layout.render_languages(["English"], 100)

    def test_explicit_total(self, layout):
        layout.new_page()
        pages = layout.finalize_footers(total_pages=5)
        assert pages[1].footer.text == "Page 2 of 5"


class TestFullLayout:
    def test_section_order(self, geometry, metrics, sample_document):
        page = paginate(sample_document, geometry, metrics)[0]
        titles = [r.text for r in page.texts("section_title")]
        assert titles == [
            "PROFESSIONAL SUMMARY",
            "PROFESSIONAL EXPERIENCE",
            "EDUCATION",
            "SKILLS",
            "LANGUAGES",
        ]

    def test_empty_sections_skipped(self, geometry, metrics, sample_document):
        doc = sample_document.model_copy(update={"summary": "  ", "languages": [], "skills": {}})
        page = paginate(doc, geometry, metrics)[0]
        titles = [r.text for r in page.texts("section_title")]
        assert titles == ["PROFESSIONAL EXPERIENCE", "EDUCATION"]

    def test_custom_geometry(self, metrics, sample_document):
        small = PageGeometry(page_height=150, bottom_slack=10, skills_slack=20)
        pages = paginate(sample_document, small, MonospaceMetrics())
        assert len(pages) > 1
        for page in pages:
            for run in page.texts():
                assert run.y <= small.bottom + 1e-9


class TestBottomMargin:
    def test_lowest_baseline_sits_a_line_above_the_footer(self):
        g = PageGeometry()
        assert g.bottom == pytest.approx(g.footer_y - g.line_height)
        assert g.bottom < g.page_height - g.margin

    def test_page_margin_wins_when_footer_is_lower(self):
        g = PageGeometry(margin=20.0)
        assert g.bottom == pytest.approx(g.page_height - 20.0)

    def test_flowed_lines_clear_the_footer(self, geometry, metrics):
        pages = paginate(make_document(experience_count=8, bullet_text=_word_bullet(3)), geometry, metrics)
        assert len(pages) > 1
        for page in pages:
            for run in page.texts():
                assert run.y <= geometry.footer_y - geometry.line_height + 1e-9, run
