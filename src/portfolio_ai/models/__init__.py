"""Data models for resume rendering and optimization."""

from portfolio_ai.models.document import (
    ContactField,
    ContentBlock,
    EducationEntry,
    ExperienceEntry,
    ResumeDocument,
    ResumeHeader,
    Section,
)
from portfolio_ai.models.optimizer import OptimizedExperience, OptimizedResume

__all__ = [
    "ContactField",
    "ContentBlock",
    "EducationEntry",
    "ExperienceEntry",
    "OptimizedExperience",
    "OptimizedResume",
    "ResumeDocument",
    "ResumeHeader",
    "Section",
]
