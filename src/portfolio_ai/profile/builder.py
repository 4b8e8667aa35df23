"""Build a resume document from the candidate profile."""

from __future__ import annotations

import re
from datetime import date

from portfolio_ai.models.document import (
    ContactField,
    EducationEntry,
    ExperienceEntry,
    ResumeDocument,
    ResumeHeader,
)
from portfolio_ai.models.optimizer import OptimizedResume
from portfolio_ai.profile.models import CandidateProfile, Experience

RECENCY_YEARS = 5

_MONTHS = {
    name: i
    for i, name in enumerate(
        ["jan", "feb", "mar", "apr", "may", "jun", "jul", "aug", "sep", "oct", "nov", "dec"],
        start=1,
    )
}
_PERIOD_SPLIT = re.compile(r"\s+[-–—]\s+")


def _parse_period_start(period: str) -> date | None:
    """First day of the start month of "Jan 2017 - Dec 2021", or None."""
    parts = _PERIOD_SPLIT.split(period.strip())
    if len(parts) != 2:
        return None
    tokens = parts[0].split()
    if len(tokens) != 2:
        return None
    month = _MONTHS.get(tokens[0][:3].lower())
    if month is None or not tokens[1].isdigit():
        return None
    return date(int(tokens[1]), month, 1)


def _years_before(today: date, years: int) -> date:
    try:
        return today.replace(year=today.year - years)
    except ValueError:  # Feb 29
        return today.replace(year=today.year - years, day=28)


def filter_experience(
    profile: CandidateProfile,
    track: str = "both",
    today: date | None = None,
) -> list[Experience]:
    """Experience entries that belong on a PDF for this track.

    Drops other-track roles, ids listed in hidden_in_pdf, and roles that
    started more than five years ago unless they are still ongoing.
    Periods that cannot be parsed are kept.
    """
    today = today or date.today()
    cutoff = _years_before(today, RECENCY_YEARS)
    hidden = set(profile.hidden_in_pdf)

    kept = []
    for exp in profile.experience:
        if track != "both" and exp.track not in (track, "both"):
            continue
        if exp.id and exp.id in hidden:
            continue
        if "present" not in exp.period.lower():
            start = _parse_period_start(exp.period)
            if start is not None and start < cutoff:
                continue
        kept.append(exp)
    return kept


def _contact_fields(profile: CandidateProfile) -> list[ContactField]:
    def bare(url: str | None) -> str | None:
        if not url:
            return None
        return re.sub(r"^https?://", "", url)

    candidates = [
        ("Email", profile.socials.email),
        ("Location", profile.location),
        ("GitHub", bare(profile.socials.github)),
        ("LinkedIn", bare(profile.socials.linkedin)),
    ]
    return [ContactField(label=label, value=value) for label, value in candidates if value]


def build_resume_document(
    profile: CandidateProfile,
    track: str = "both",
    today: date | None = None,
) -> ResumeDocument:
    """Assemble the document for one career track."""
    variant = profile.variant(track)
    return ResumeDocument(
        header=ResumeHeader(
            first_name=profile.first_name,
            last_name=profile.last_name,
            role=variant.role,
            contacts=_contact_fields(profile),
        ),
        summary=variant.summary,
        experience=[
            ExperienceEntry(
                title=exp.role,
                organization=exp.company,
                period=exp.period,
                description=list(exp.description),
            )
            for exp in filter_experience(profile, track, today)
        ],
        education=[
            EducationEntry(degree=e.degree, school=e.school, year=e.year)
            for e in profile.education
        ],
        skills=profile.skills_for(track),
        languages=list(profile.languages),
    )


def apply_optimization(document: ResumeDocument, optimized: OptimizedResume) -> ResumeDocument:
    """Return a copy of document using the optimizer's summary, experience and skills."""
    update: dict = {}
    if optimized.summary.strip():
        update["summary"] = optimized.summary
    if optimized.experience:
        update["experience"] = [
            ExperienceEntry(
                title=exp.role,
                organization=exp.company,
                period=exp.period,
                description=list(exp.description),
            )
            for exp in optimized.experience
        ]
    skills = {k: v for k, v in optimized.skills.items() if v}
    if skills:
        update["skills"] = skills
    return document.model_copy(update=update)


def resume_filename(profile: CandidateProfile, track: str = "both", job_title: str | None = None) -> str:
    """Download filename for a rendered resume."""
    base = f"{profile.first_name}_{profile.last_name}"
    if job_title is not None:
        slug = re.sub(r"[^a-z0-9]", "_", job_title.lower())
        return f"{base}_Optimized_{slug}.pdf"
    suffix = "" if track == "both" else f"_{track}"
    return f"{base}_Resume{suffix}.pdf"
