"""Payload size validation for AI-bound text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from portfolio_ai.safety.errors import InvalidPayload, MissingField, PayloadTooLong


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


def validate_payload_size(payload: Any, max_chars: int, field_name: str = "request") -> ValidationResult:
    """Check that payload is a non-empty string of at most max_chars characters."""
    try:
        require_payload(payload, max_chars, field_name)
    except InvalidPayload as exc:
        return ValidationResult(valid=False, error=exc.message)
    return ValidationResult(valid=True)


def require_payload(payload: Any, max_chars: int, field_name: str = "request") -> str:
    """Return payload unchanged, or raise the matching InvalidPayload error."""
    if payload is None or payload == "":
        raise MissingField(field_name)
    if not isinstance(payload, str):
        raise InvalidPayload(field_name, f"{field_name} must be a string")
    if not payload.strip():
        raise MissingField(field_name)
    if len(payload) > max_chars:
        raise PayloadTooLong(field_name, max_chars, len(payload))
    return payload
