"""Request guard: quota, payload and deadline checks in front of AI calls."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TypeVar

from portfolio_ai.safety.caller import identify_caller
from portfolio_ai.safety.deadline import with_deadline
from portfolio_ai.safety.errors import (
    DownstreamFailure,
    DownstreamParseFailure,
    GuardError,
    QuotaExceeded,
)
from portfolio_ai.safety.policies import RateLimitPolicy
from portfolio_ai.safety.store import RateLimitEntry, RateLimitStore
from portfolio_ai.utils.json_parser import ResponseParseError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class QuotaDecision:
    allowed: bool
    remaining: int
    window_reset_at: float  # epoch seconds

    def headers(self) -> dict[str, str]:
        return rate_limit_headers(self.remaining, self.window_reset_at)


def format_reset_time(epoch_seconds: float) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    dt = datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def rate_limit_headers(remaining: int, window_reset_at: float) -> dict[str, str]:
    return {
        "X-RateLimit-Remaining": str(remaining),
        "X-RateLimit-Reset": format_reset_time(window_reset_at),
    }


class RequestGuard:
    """Gate for AI-backed operations.

    Args:
        store: Where quota counters live. Defaults to a process-local store.
        key_scope: "feature" keeps a separate counter per (policy, caller);
            "caller" shares one counter across every feature.
    """

    def __init__(
        self,
        store: RateLimitStore | None = None,
        *,
        key_scope: str = "feature",
    ):
        if key_scope not in ("feature", "caller"):
            raise ValueError(f"Unknown key_scope: {key_scope!r}")
        self.store = store if store is not None else RateLimitStore()
        self.key_scope = key_scope

    def bucket_key(self, caller_id: str, policy: RateLimitPolicy) -> str:
        if self.key_scope == "caller":
            return caller_id
        return f"{policy.name}:{caller_id}"

    def check_quota(self, caller_id: str, policy: RateLimitPolicy) -> QuotaDecision:
        """Charge one request to the caller, then decide.

        The request is counted even when it ends up rejected.
        """
        entry = self.store.hit(self.bucket_key(caller_id, policy), policy.window_seconds)
        limit = policy.max_requests_per_window
        decision = QuotaDecision(
            allowed=entry.request_count <= limit,
            remaining=max(0, limit - entry.request_count),
            window_reset_at=entry.window_reset_at,
        )
        logger.debug(
            "Quota %s for %s: %d/%d", policy.name, caller_id, entry.request_count, limit
        )
        return decision

    def admit(
        self,
        headers: Mapping[str, str],
        policy: RateLimitPolicy,
        peer: str | None = None,
    ) -> QuotaDecision:
        """Identify the caller and charge its quota; raise QuotaExceeded when over."""
        caller_id = identify_caller(headers, peer)
        decision = self.check_quota(caller_id, policy)
        if not decision.allowed:
            reset = datetime.fromtimestamp(decision.window_reset_at, tz=timezone.utc)
            logger.warning("Rate limit exceeded: policy=%s caller=%s", policy.name, caller_id)
            raise QuotaExceeded(
                policy.max_requests_per_window,
                decision.window_reset_at,
                f"Rate limit exceeded. Maximum {policy.max_requests_per_window} requests "
                f"per minute. Reset at {reset.strftime('%H:%M:%S')} UTC",
            )
        return decision

    async def call(
        self,
        operation: Awaitable[T],
        policy: RateLimitPolicy,
        *,
        timeout_message: str | None = None,
        failure_message: str | None = None,
    ) -> T:
        """Run the downstream operation under the policy deadline.

        Failures come back as GuardError subclasses; no retry is attempted.
        """
        try:
            return await with_deadline(operation, policy.timeout_seconds, timeout_message)
        except GuardError:
            raise
        except ResponseParseError as exc:
            logger.warning("%s: could not parse model response: %s", policy.name, exc)
            raise DownstreamParseFailure() from exc
        except Exception as exc:
            logger.error("%s: downstream call failed", policy.name, exc_info=True)
            raise DownstreamFailure(failure_message) from exc

    def status(self, caller_id: str, policy: RateLimitPolicy) -> RateLimitEntry | None:
        return self.store.get(self.bucket_key(caller_id, policy))

    def reset(self, caller_id: str, policy: RateLimitPolicy) -> None:
        self.store.delete(self.bucket_key(caller_id, policy))

    def check_storage(self) -> bool:
        healthy = self.store.check()
        if not healthy:
            logger.warning("Rate limit storage is unreachable")
        return healthy
