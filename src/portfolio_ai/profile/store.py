"""Load the candidate profile from a YAML file."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from portfolio_ai.profile.models import CandidateProfile

logger = logging.getLogger(__name__)


class ProfileNotFoundError(FileNotFoundError):
    pass


def load_profile(path: str | Path) -> CandidateProfile:
    """Read and validate a candidate profile.

    Raises:
        ProfileNotFoundError: the file does not exist.
        ValueError: the YAML does not describe a valid profile.
    """
    p = Path(path).expanduser()
    if not p.is_absolute() and not p.exists():
        # Relative paths fall back to the project root
        candidate = Path(__file__).resolve().parent.parent.parent.parent / p
        if candidate.exists():
            p = candidate
    if not p.exists():
        raise ProfileNotFoundError(f"Profile file not found: {path}")

    raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    try:
        profile = CandidateProfile.model_validate(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid profile {p}: {exc}") from exc
    logger.info("Loaded profile for %s from %s", profile.full_name, p)
    return profile
