"""
Cache Store

Process-wide key/value store shared by the source fetchers and the stream
verifier. Passed explicitly to every component that needs it.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable


logger = logging.getLogger(__name__)

CHANNELS_KEY = "channels"
STREAMS_KEY = "streams"
PLAYLIST_KEY = "playlist"
COLLECTION_KEYS = (CHANNELS_KEY, STREAMS_KEY, PLAYLIST_KEY)

VERDICT_KEY_PREFIX = "verdict:"


def verdict_key(url: str) -> str:
    return f"{VERDICT_KEY_PREFIX}{url}"


@dataclass(slots=True)
class CacheEntry:
    value: Any
    expires_at: float | None = None  # None never expires

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


class CacheStore:
    """
    TTL-aware in-memory cache.

    A TTL of 0 (the default) keeps the entry until it is deleted or the
    process exits. Expired entries are evicted lazily when read. There is no
    locking: concurrent writers to the same key are last-write-wins.
    """

    def __init__(self, default_ttl: float = 0, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            default_ttl: TTL in seconds applied when set() gets no ttl (0 = never expire)
            clock: Monotonic time source, replaceable in tests
        """
        if default_ttl < 0:
            raise ValueError("default_ttl must be >= 0")
        self._entries: dict[str, CacheEntry] = {}
        self._default_ttl = default_ttl
        self._clock = clock

    def _live_entry(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        return entry

    def has(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._live_entry(key)
        return default if entry is None else entry.value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """
        Store a value.

        Args:
            key: Cache key
            value: Any payload
            ttl: Seconds until expiry; None uses the store default, 0 never expires
        """
        effective_ttl = self._default_ttl if ttl is None else ttl
        if effective_ttl < 0:
            raise ValueError("ttl must be >= 0")
        expires_at = self._clock() + effective_ttl if effective_ttl else None
        self._entries[key] = CacheEntry(value=value, expires_at=expires_at)

    def delete(self, *keys: str) -> int:
        """Remove keys, returning how many were present."""
        removed = 0
        for key in keys:
            if self._entries.pop(key, None) is not None:
                removed += 1
        return removed

    def flush(self) -> None:
        self._entries.clear()

    def keys(self) -> list[str]:
        now = self._clock()
        return [key for key, entry in self._entries.items() if not entry.is_expired(now)]

    def __len__(self) -> int:
        return len(self.keys())
