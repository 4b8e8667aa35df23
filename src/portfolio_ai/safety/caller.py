"""Caller identification from proxy headers."""

from __future__ import annotations

from collections.abc import Mapping

UNKNOWN_CALLER = "unknown"

# Checked in order: multi-hop forwarding list first, then single-hop proxies
FORWARDING_HEADERS = ("x-forwarded-for", "x-real-ip", "cf-connecting-ip")


def identify_caller(headers: Mapping[str, str], peer: str | None = None) -> str:
    """Return the bucketing key for a request.

    The value is only used to group requests; it is not validated as a
    network address.
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    for name in FORWARDING_HEADERS:
        value = lowered.get(name, "")
        first = value.split(",")[0].strip()
        if first:
            return first
    if peer:
        return peer
    return UNKNOWN_CALLER
