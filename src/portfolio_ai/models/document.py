"""Pydantic models for the resume document handed to the paginator."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ContactField(BaseModel):
    label: str
    value: str


class ResumeHeader(BaseModel):
    first_name: str
    last_name: str
    role: str
    contacts: list[ContactField] = Field(default_factory=list)


class ContentBlock(BaseModel):
    kind: Literal["paragraph", "bullets"] = "paragraph"
    text: str = ""
    items: list[str] = Field(default_factory=list)


class Section(BaseModel):
    """Free-form titled section rendered after the standard ones."""

    title: str
    blocks: list[ContentBlock] = Field(default_factory=list)


class ExperienceEntry(BaseModel):
    title: str
    organization: str
    period: str
    description: list[str] = Field(default_factory=list)


class EducationEntry(BaseModel):
    degree: str
    school: str
    year: str


class ResumeDocument(BaseModel):
    header: ResumeHeader
    summary: str = ""
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: dict[str, list[str]] = Field(default_factory=dict)  # category -> skills, ordered
    languages: list[str] = Field(default_factory=list)
    sections: list[Section] = Field(default_factory=list)
