import threading
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Optional, Tuple

from github_portfolio.domain.interfaces import ICacheStore


class InMemoryCacheStore(ICacheStore):
    """
    Process-local cache with absolute per-entry expiry.

    Entries are evicted lazily when looked up after they expire, or explicitly via remove().
    There is no size bound and no LRU policy: every distinct key stays in memory until it
    expires and is read again. Use a bounded or external store if the key space grows.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def try_get(self, key: str) -> Tuple[Optional[Any], bool]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None, False

            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None, False

            return value, True

    def set(self, key: str, value: Any, ttl: timedelta) -> None:
        expires_at = self._clock() + ttl.total_seconds()
        with self._lock:
            self._entries[key] = (value, expires_at)

    def remove(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
