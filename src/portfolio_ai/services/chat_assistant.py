"""Portfolio assistant - answers questions about the candidate's documented work."""

from __future__ import annotations

from portfolio_ai.clients.llm_client import DEFAULT_MODEL, LLMClient
from portfolio_ai.profile.models import CandidateProfile

DISCLAIMER = (
    "This is an AI summary of documented portfolio content. "
    "For career advice, contact the portfolio owner directly."
)

SYSTEM_PROMPT = """\
You are the assistant on {name}'s portfolio website. Answer visitors' questions
about {name}'s experience, skills and projects using ONLY the profile below.

Rules:
- If the profile does not cover the question, say so plainly.
- Never invent employers, dates, skills or results.
- Keep answers under {max_chars} characters, in plain text without markdown.

PROFILE
{profile}"""


def _profile_digest(profile: CandidateProfile) -> str:
    lines = [f"Name: {profile.full_name}"]
    if profile.location:
        lines.append(f"Location: {profile.location}")
    for track, variant in profile.variants.items():
        lines.append(f"Role ({track}): {variant.role}")
        lines.append(f"Summary ({track}): {variant.summary}")
    for exp in profile.experience:
        lines.append(f"- {exp.role} at {exp.company} ({exp.period}): {'; '.join(exp.description)}")
    for track, categories in profile.skills.items():
        for category, skills in categories.items():
            lines.append(f"Skills [{track}/{category}]: {', '.join(skills)}")
    for project in profile.projects:
        lines.append(f"Project {project.title}: {project.description}")
    if profile.languages:
        lines.append(f"Languages: {', '.join(profile.languages)}")
    return "\n".join(lines)


class ChatAssistant:
    def __init__(
        self,
        llm: LLMClient,
        profile: CandidateProfile,
        model: str = DEFAULT_MODEL,
        max_response_chars: int = 800,
    ):
        self.llm = llm
        self.profile = profile
        self.model = model
        self.max_response_chars = max_response_chars
        self._system = SYSTEM_PROMPT.format(
            name=profile.full_name,
            max_chars=max_response_chars,
            profile=_profile_digest(profile),
        )

    async def reply(self, message: str) -> str:
        """Answer one visitor message, capped at max_response_chars."""
        response = await self.llm.generate(
            prompt=message,
            system=self._system,
            model=self.model,
            temperature=0.3,
            max_tokens=512,
        )
        return self._truncate(response.text.strip())

    def _truncate(self, text: str) -> str:
        if len(text) <= self.max_response_chars:
            return text
        cut = text[: self.max_response_chars - 3]
        # Prefer ending on a word boundary
        if " " in cut:
            cut = cut.rsplit(" ", 1)[0]
        return cut.rstrip() + "..."
