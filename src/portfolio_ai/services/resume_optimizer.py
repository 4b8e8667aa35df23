"""Resume optimizer - matches documented candidate data against a job description.

The model may only reorder and emphasize what the candidate already
documented. Its JSON reply is validated against OptimizedResume; anything
that does not match is a parse failure, never a best-effort guess.
"""

from __future__ import annotations

import logging

from portfolio_ai.clients.llm_client import LLMClient
from portfolio_ai.models.optimizer import OptimizedResume
from portfolio_ai.profile.models import CandidateSnapshot
from portfolio_ai.utils.json_parser import parse_model
from portfolio_ai.utils.text_cleaner import strip_markdown_deep

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """\
You are a resume optimization assistant with strict truthfulness constraints.

Rules:
1. Never invent skills, projects or experience the candidate does not have.
2. Never exaggerate accomplishments.
3. Only reorder and emphasize documented experience and skills.
4. Acknowledge skill gaps honestly; the match score reflects actual fit.

Respond with a single JSON object and nothing else:
{
  "summary": "Professional summary emphasizing the strongest documented matches",
  "experience": [
    {
      "id": "original id",
      "role": "Job title",
      "company": "Company",
      "period": "Date range",
      "description": ["original bullet with job context emphasized"],
      "skills": ["skills actually used in this role"],
      "relevanceScore": 0
    }
  ],
  "skills": {"category": ["skill"]},
  "relevantProjects": ["project title"],
  "keywordMatches": ["keyword"],
  "matchScore": 0
}
Scores are integers from 0 to 100."""


def build_prompt(job_description: str, candidate: CandidateSnapshot) -> str:
    experience = "\n".join(
        f"- [{exp.id}] {exp.role} at {exp.company} ({exp.period}): {'; '.join(exp.description)}"
        for exp in candidate.experience
    )
    skills = "\n".join(
        f"{category}: {', '.join(items)}" for category, items in candidate.skills.items()
    )
    projects = "\n".join(f"- {p.title}: {p.description}" for p in candidate.projects)
    return f"""JOB DESCRIPTION:
{job_description}

CANDIDATE DOCUMENTED DATA (never modify):
Name: {candidate.first_name} {candidate.last_name}
Current Role: {candidate.role}
Education: {candidate.education}

DOCUMENTED EXPERIENCE:
{experience or "(none)"}

DOCUMENTED SKILLS (only these exist):
{skills or "(none)"}

DOCUMENTED PROJECTS:
{projects or "(none)"}

Analyze the fit and return the JSON object."""


def default_summary(result: OptimizedResume, candidate: CandidateSnapshot) -> str:
    """Summary used when the model leaves it empty."""
    if result.experience and result.experience[0].skills:
        top = result.experience[0].skills[:3]
    else:
        first_category = next(iter(candidate.skills.values()), [])
        top = first_category[:2]
    expertise = ", ".join(top) if top else "software delivery"
    return (
        f"Experienced {candidate.role} with demonstrated expertise in {expertise}. "
        "Proven track record of delivering high-quality solutions with strong focus "
        "on code quality and system design."
    )


class ResumeOptimizer:
    def __init__(self, llm: LLMClient, model: str = "claude-sonnet-4-5-20250929"):
        self.llm = llm
        self.model = model

    async def optimize(self, job_description: str, candidate: CandidateSnapshot) -> OptimizedResume:
        """Ask the model for an emphasis-only rewrite and validate the reply.

        Raises:
            ResponseParseError: the reply is not a valid OptimizedResume.
        """
        response = await self.llm.generate(
            prompt=build_prompt(job_description, candidate),
            system=SYSTEM_PROMPT,
            model=self.model,
            temperature=0.2,
            max_tokens=4096,
        )
        result = parse_model(response.text, OptimizedResume, preprocess=strip_markdown_deep)
        if not result.summary.strip():
            logger.info("Optimizer returned no summary; using default")
            result = result.model_copy(update={"summary": default_summary(result, candidate)})
        return result
