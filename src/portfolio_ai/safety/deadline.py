"""Deadline enforcement for downstream calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from portfolio_ai.safety.errors import DeadlineExceeded

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def with_deadline(
    operation: Awaitable[T],
    timeout_seconds: float,
    message: str | None = None,
) -> T:
    """Await operation, raising DeadlineExceeded if it runs past timeout_seconds.

    On expiry the awaited task is cancelled. Coroutine clients (the async
    anthropic SDK) abort their HTTP request; work already handed to a thread
    keeps running and its result is discarded.
    """
    try:
        return await asyncio.wait_for(operation, timeout=timeout_seconds)
    except asyncio.TimeoutError:
        logger.warning("Downstream call exceeded %.1fs deadline", timeout_seconds)
        raise DeadlineExceeded(timeout_seconds, message) from None
