"""Request safety: rate limiting, payload validation and deadlines."""

from portfolio_ai.safety.caller import identify_caller
from portfolio_ai.safety.deadline import with_deadline
from portfolio_ai.safety.errors import (
    DeadlineExceeded,
    DownstreamFailure,
    DownstreamParseFailure,
    GuardError,
    InvalidPayload,
    MissingField,
    PayloadTooLong,
    QuotaExceeded,
)
from portfolio_ai.safety.guard import QuotaDecision, RequestGuard, rate_limit_headers
from portfolio_ai.safety.policies import DEFAULT_POLICIES, RateLimitPolicy
from portfolio_ai.safety.store import RateLimitEntry, RateLimitStore
from portfolio_ai.safety.validation import ValidationResult, require_payload, validate_payload_size

__all__ = [
    "DEFAULT_POLICIES",
    "DeadlineExceeded",
    "DownstreamFailure",
    "DownstreamParseFailure",
    "GuardError",
    "InvalidPayload",
    "MissingField",
    "PayloadTooLong",
    "QuotaDecision",
    "QuotaExceeded",
    "RateLimitEntry",
    "RateLimitPolicy",
    "RateLimitStore",
    "RequestGuard",
    "ValidationResult",
    "identify_caller",
    "rate_limit_headers",
    "require_payload",
    "validate_payload_size",
    "with_deadline",
]
