"""Per-feature rate limit policies for the AI-backed endpoints."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WINDOW_SECONDS = 60


@dataclass(frozen=True)
class RateLimitPolicy:
    """Quota, payload and deadline limits for one AI feature."""

    name: str
    max_requests_per_window: int
    max_payload_chars: int
    timeout_seconds: float
    window_seconds: int = DEFAULT_WINDOW_SECONDS


CHAT = RateLimitPolicy(
    name="chat",
    max_requests_per_window=10,  # conversational, more generous
    max_payload_chars=5000,
    timeout_seconds=15,
)

OPTIMIZER = RateLimitPolicy(
    name="optimizer",
    max_requests_per_window=5,  # one long generation per request
    max_payload_chars=10000,
    timeout_seconds=30,
)

TRANSLATE = RateLimitPolicy(
    name="translate",
    max_requests_per_window=20,
    max_payload_chars=5000,
    timeout_seconds=15,
)

DEFAULT_POLICIES: dict[str, RateLimitPolicy] = {
    p.name: p for p in (CHAT, OPTIMIZER, TRANSLATE)
}
