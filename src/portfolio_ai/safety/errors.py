"""Error taxonomy surfaced by the request guard.

Every error carries the HTTP status it maps to and a public message that is
safe to return to the caller. Internal details stay in the logs.
"""

from __future__ import annotations


class GuardError(Exception):
    """Base class for errors the HTTP boundary turns into JSON responses."""

    status_code: int = 500
    default_message = "Failed to process request. Please try again later."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class QuotaExceeded(GuardError):
    status_code = 429

    def __init__(self, limit: int, reset_at: float, message: str | None = None):
        self.limit = limit
        self.reset_at = reset_at
        super().__init__(message or f"Rate limit exceeded. Maximum {limit} requests per minute.")


class InvalidPayload(GuardError):
    status_code = 400
    default_message = "Invalid request payload."

    def __init__(self, field_name: str, message: str | None = None):
        self.field_name = field_name
        super().__init__(message)


class MissingField(InvalidPayload):
    def __init__(self, field_name: str):
        super().__init__(field_name, f"Missing required field: {field_name}")


class PayloadTooLong(InvalidPayload):
    def __init__(self, field_name: str, max_chars: int, actual: int):
        self.max_chars = max_chars
        self.actual = actual
        super().__init__(
            field_name,
            f"{field_name} exceeds maximum length of {max_chars} characters. Current: {actual}",
        )


class DeadlineExceeded(GuardError, TimeoutError):
    status_code = 504
    default_message = "Request took too long. Please try again."

    def __init__(self, timeout_seconds: float, message: str | None = None):
        self.timeout_seconds = timeout_seconds
        super().__init__(message)


class DownstreamParseFailure(GuardError):
    status_code = 502
    default_message = "AI response parsing failed. Please try again."


class DownstreamFailure(GuardError):
    status_code = 500
