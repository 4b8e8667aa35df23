"""Fixed-window rate limit counters kept in a ``limits`` storage.

``memory://`` keeps counters in the process; ``redis://host:port`` shares
them between workers and instances. The storage starts a window's expiry
with the first charge to a key and drops the key when the window ends.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from limits.storage import MemoryStorage, Storage, storage_from_string

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_URI = "memory://"
KEY_PREFIX = "portfolio-ai/quota/"


def display_uri(uri: str) -> str:
    """Storage URI with any credentials removed."""
    scheme, sep, rest = uri.partition("://")
    return f"{scheme}{sep}{rest.rsplit('@', 1)[-1]}"


@dataclass(frozen=True)
class RateLimitEntry:
    """Request count inside one fixed accounting window."""

    request_count: int
    window_reset_at: float  # epoch seconds


class RateLimitStore:
    """Charges and inspects fixed-window counters.

    Args:
        storage: Any synchronous ``limits`` storage. Defaults to a fresh
            MemoryStorage.
    """

    def __init__(self, storage: Storage | None = None):
        self.storage = storage if storage is not None else MemoryStorage()

    @classmethod
    def from_uri(cls, uri: str = DEFAULT_STORAGE_URI) -> RateLimitStore:
        logger.info("Rate limit storage: %s", display_uri(uri))
        return cls(storage_from_string(uri))

    def hit(self, key: str, window_seconds: int) -> RateLimitEntry:
        """Charge one request to key and return the updated entry.

        The increment is atomic in the storage, so concurrent charges to the
        same key each see a distinct count.
        """
        count = self.storage.incr(KEY_PREFIX + key, window_seconds)
        return RateLimitEntry(
            request_count=count,
            window_reset_at=float(self.storage.get_expiry(KEY_PREFIX + key)),
        )

    def get(self, key: str) -> RateLimitEntry | None:
        count = self.storage.get(KEY_PREFIX + key)
        if not count:
            return None
        return RateLimitEntry(
            request_count=count,
            window_reset_at=float(self.storage.get_expiry(KEY_PREFIX + key)),
        )

    def delete(self, key: str) -> None:
        self.storage.clear(KEY_PREFIX + key)

    def check(self) -> bool:
        """True when the backing storage is reachable."""
        return self.storage.check()
