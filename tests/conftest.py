"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import AsyncMock, patch

import pytest

from portfolio_ai.clients.llm_client import LLMClient, LLMResponse
from portfolio_ai.export.geometry import PageGeometry
from portfolio_ai.models.document import (
    ContactField,
    EducationEntry,
    ExperienceEntry,
    ResumeDocument,
    ResumeHeader,
)
from portfolio_ai.profile.models import (
    CandidateProfile,
    Education,
    Experience,
    ProfileVariant,
    Project,
    Socials,
)


class MonospaceMetrics:
    """Every character is 0.2 mm wide per point of font size."""

    def width(self, text: str, size: float, bold: bool = False) -> float:
        return len(text) * size * 0.2


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def metrics() -> MonospaceMetrics:
    return MonospaceMetrics()


@pytest.fixture
def geometry() -> PageGeometry:
    return PageGeometry()


@pytest.fixture
def clock() -> Iterator[FakeClock]:
    """FakeClock installed as time.time, which rate limit storages read."""
    fake = FakeClock()
    with patch("time.time", fake):
        yield fake


@pytest.fixture
def sample_profile() -> CandidateProfile:
    return CandidateProfile(
        first_name="Amani",
        last_name="Otieno",
        location="Nairobi, Kenya",
        socials=Socials(
            email="amani@example.com",
            github="https://github.com/amani",
            linkedin="https://linkedin.com/in/amani/",
        ),
        variants={
            "it": ProfileVariant(role="Full-Stack Developer", summary="Builds web applications."),
            "translation": ProfileVariant(role="Technical Translator", summary="Translates software."),
        },
        education=[Education(degree="B.S. Computer Technology", school="JKUAT", year="2018")],
        experience=[
            Experience(
                id="exp-1",
                role="Linguist & Web Developer",
                company="Jambo Linguists",
                period="Jan 2023 - Present",
                description=["Translated documents for 50+ clients.", "Built the booking platform."],
                skills=["React", "TypeScript", "Translation"],
                track="both",
            ),
            Experience(
                id="exp-2",
                role="Full-Stack Consultant",
                company="Self-Employed",
                period="Jan 2020 - Present",
                description=["Delivered 25+ web applications."],
                skills=["React", "Node.js"],
                track="it",
            ),
            Experience(
                id="exp-3",
                role="IT Support Specialist",
                company="Aventus",
                period="Jan 2021 - Dec 2023",
                description=["Supported 500+ users."],
                skills=["Active Directory"],
                track="it",
            ),
            Experience(
                id="exp-4",
                role="IT Technician",
                company="Fanharm Technologies",
                period="Jan 2017 - Dec 2021",
                description=["Maintained 500 devices."],
                skills=["Windows"],
                track="it",
            ),
            Experience(
                id="exp-5",
                role="Freelance Interpreter",
                company="Self-Employed",
                period="Mar 2022 - Dec 2022",
                description=["Interpreted video calls."],
                skills=["Interpreting"],
                track="translation",
            ),
        ],
        skills={
            "it": {
                "frontend": ["React", "TypeScript"],
                "backend": ["Node.js", "PostgreSQL"],
                "infrastructure": ["Docker", "Linux"],
            },
            "translation": {"languages": ["English", "Swahili"]},
        },
        projects=[Project(title="GradeAssist", description="Grading platform.")],
        languages=["English (Fluent)", "Swahili (Native)"],
        hidden_in_pdf=["exp-2"],
    )


def make_document(
    experience_count: int = 2,
    bullets_per_entry: int = 3,
    bullet_text: str = "Delivered a measurable improvement to a production system.",
) -> ResumeDocument:
    return ResumeDocument(
        header=ResumeHeader(
            first_name="Amani",
            last_name="Otieno",
            role="Full-Stack Developer",
            contacts=[
                ContactField(label="Email", value="amani@example.com"),
                ContactField(label="Location", value="Nairobi, Kenya"),
            ],
        ),
        summary="Full-stack developer building web applications end to end.",
        experience=[
            ExperienceEntry(
                title=f"Engineer {i}",
                organization=f"Company {i}",
                period="Jan 2020 - Present",
                description=[f"{bullet_text} ({i}.{j})" for j in range(bullets_per_entry)],
            )
            for i in range(experience_count)
        ],
        education=[EducationEntry(degree="B.S. Computer Technology", school="JKUAT", year="2018")],
        skills={
            "frontend": ["React", "TypeScript"],
            "backend": ["Node.js", "PostgreSQL"],
            "infrastructure": ["Docker", "Linux"],
        },
        languages=["English", "Swahili"],
    )


@pytest.fixture
def sample_document() -> ResumeDocument:
    return make_document()


@pytest.fixture
def mock_llm() -> AsyncMock:
    """Mock LLMClient whose generate() returns a fixed reply."""
    llm = AsyncMock(spec=LLMClient)
    llm.generate.return_value = LLMResponse(text="Mock reply", input_tokens=10, output_tokens=5)
    return llm
