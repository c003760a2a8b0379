# ============================================================================
# QUERY CACHE
# ============================================================================
# STATUS: Repository - Time-boxed memoization of query results
# PURPOSE: Per-entry TTL cache injected into QueryRunner
# CREATED: 10 OCT 2026
# EXPORTS: QueryCache
# ============================================================================
"""
Query Cache

In-memory map of key -> (value, expires_at). Entries expire after their
TTL and are evicted on the read that finds them stale.

Values are pure functions of the SQL and its bind values, so two callers
racing on the same key may both compute and both store; the last write
wins. The lock only protects the dictionary itself.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from core.config import get_defaults

logger = logging.getLogger(__name__)


class QueryCache:
    """
    Thread-safe TTL cache.

    Args:
        default_ttl: Seconds an entry lives when put() names no TTL
            (default: QUERY_CACHE_TTL_SECONDS via get_defaults())
        clock: Monotonic seconds source (injectable for tests)
    """

    def __init__(self, default_ttl: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = get_defaults().cache.ttl_seconds if default_ttl is None else default_ttl
        self._clock = clock
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Tuple[bool, Any]:
        """Return (True, value) for a live entry, else (False, None)."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return False, None
            value, expires_at = entry
            if self._clock() > expires_at:
                del self._entries[key]
                return False, None
            return True, value

    def put(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """Store value for ttl seconds (default_ttl when None). A TTL <= 0 stores nothing."""
        ttl = self.default_ttl if ttl is None else ttl
        if ttl <= 0:
            return
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def invalidate(self, key: Hashable) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug(f"Query cache cleared ({count} entries)")

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = ["QueryCache"]
