"""Size- and time-bounded cache for per-invocation context strings."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from threading import Lock
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class ContextCache:
    """LRU cache whose entries expire a fixed time after their last access.

    Reads and writes both refresh an entry's access time, so contexts that are
    looked up regularly stay alive. When more than ``max_size`` entries are
    held, the least recently used ones are evicted first. Expired entries are
    dropped lazily on access and proactively by :meth:`cleanup`.

    Internal failures are logged and treated as a miss so callers on the
    invocation path never see an exception from the cache.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 300.0,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self._max_size = int(max_size)
        self._ttl = float(ttl_seconds)
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[str, float]]" = OrderedDict()
        self._lock = Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0
        self._expirations = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def _is_expired(self, last_access: float, now: float) -> bool:
        return now - last_access > self._ttl

    def _purge_expired(self, now: float) -> int:
        expired = [key for key, (_, accessed) in self._entries.items() if self._is_expired(accessed, now)]
        for key in expired:
            del self._entries[key]
        self._expirations += len(expired)
        return len(expired)

    def put(self, key: str, value: Optional[str]) -> None:
        try:
            with self._lock:
                now = self._clock()
                self._entries[key] = (value if value is not None else "", now)
                self._entries.move_to_end(key)
                if len(self._entries) > self._max_size:
                    self._purge_expired(now)
                while len(self._entries) > self._max_size:
                    self._entries.popitem(last=False)
                    self._evictions += 1
        except Exception as exc:
            logger.debug("Context cache put failed for %s: %s", key, exc)

    def get(self, key: str) -> Optional[str]:
        try:
            with self._lock:
                item = self._entries.get(key)
                if item is None:
                    self._misses += 1
                    return None
                value, accessed = item
                now = self._clock()
                if self._is_expired(accessed, now):
                    del self._entries[key]
                    self._expirations += 1
                    self._misses += 1
                    return None
                self._entries[key] = (value, now)
                self._entries.move_to_end(key)
                self._hits += 1
                return value
        except Exception as exc:
            logger.debug("Context cache get failed for %s: %s", key, exc)
            return None

    def invalidate(self, key: str) -> None:
        try:
            with self._lock:
                self._entries.pop(key, None)
        except Exception as exc:
            logger.debug("Context cache invalidate failed for %s: %s", key, exc)

    def invalidate_all(self) -> None:
        try:
            with self._lock:
                self._entries.clear()
        except Exception as exc:
            logger.debug("Context cache invalidate_all failed: %s", exc)

    def cleanup(self) -> int:
        try:
            with self._lock:
                return self._purge_expired(self._clock())
        except Exception as exc:
            logger.debug("Context cache cleanup failed: %s", exc)
            return 0

    def approximate_size(self) -> int:
        return len(self._entries)

    def stats(self) -> Dict[str, float]:
        with self._lock:
            return {
                "size": len(self._entries),
                "max_size": self._max_size,
                "ttl_seconds": self._ttl,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "expirations": self._expirations,
            }

    def __len__(self) -> int:
        return len(self._entries)
