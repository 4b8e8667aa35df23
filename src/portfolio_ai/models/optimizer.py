"""Pydantic models for the resume optimizer's structured output."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


class OptimizedExperience(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = ""
    role: str
    company: str
    period: str = ""
    description: list[str] = Field(default_factory=list)
    skills: list[str] = Field(default_factory=list)
    relevance_score: int = Field(default=0, ge=0, le=100, alias="relevanceScore")

    @field_validator("description", "skills", mode="before")
    @classmethod
    def _listify(cls, value: Any) -> list:
        return [v for v in _as_list(value) if v]


class OptimizedResume(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    summary: str = ""
    experience: list[OptimizedExperience] = Field(default_factory=list)
    skills: dict[str, list[str]] = Field(default_factory=dict)
    relevant_projects: list[str] = Field(default_factory=list, alias="relevantProjects")
    keyword_matches: list[str] = Field(default_factory=list, alias="keywordMatches")
    match_score: int = Field(default=0, ge=0, le=100, alias="matchScore")

    def to_response(self) -> dict:
        """Serialize with the camelCase keys the frontend expects."""
        return self.model_dump(by_alias=True)
