"""Read-only candidate profile models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Track = Literal["it", "translation", "both"]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ProfileVariant(_Frozen):
    role: str
    summary: str


class Socials(_Frozen):
    email: str | None = None
    github: str | None = None
    linkedin: str | None = None


class Education(_Frozen):
    degree: str
    school: str
    year: str


class Experience(_Frozen):
    id: str = ""
    role: str
    company: str
    period: str  # "Jan 2021 - Present"
    description: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    track: Track = "both"


class Project(_Frozen):
    title: str
    description: str


class CandidateProfile(_Frozen):
    first_name: str
    last_name: str
    location: str | None = None
    socials: Socials = Field(default_factory=Socials)
    variants: dict[str, ProfileVariant]  # keyed by track: "it", "translation"
    education: list[Education] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    skills: dict[str, dict[str, list[str]]] = Field(default_factory=dict)  # track -> category -> skills
    projects: list[Project] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    hidden_in_pdf: list[str] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def variant(self, track: str) -> ProfileVariant:
        """Role and summary for a track; "both" uses the IT variant."""
        key = "it" if track == "both" else track
        if key in self.variants:
            return self.variants[key]
        return next(iter(self.variants.values()))

    def skills_for(self, track: str) -> dict[str, list[str]]:
        key = "it" if track == "both" else track
        return dict(self.skills.get(key, {}))


class CandidateSnapshot(BaseModel):
    """Candidate data posted to the optimizer, shaped like the profile store."""

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    role: str
    education: str = ""
    experience: list[Experience] = Field(default_factory=list)
    skills: dict[str, list[str]] = Field(default_factory=dict)
    projects: list[Project] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_profile(cls, profile: CandidateProfile, track: str = "it") -> CandidateSnapshot:
        variant = profile.variant(track)
        education = profile.education[0].degree if profile.education else ""
        return cls(
            first_name=profile.first_name,
            last_name=profile.last_name,
            role=variant.role,
            education=education,
            experience=list(profile.experience),
            skills=profile.skills_for(track),
            projects=list(profile.projects),
        )
