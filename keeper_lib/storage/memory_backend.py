"""Simple memory-backed key-value engine

Stores bytes in a dict as `{key: (value, expires_at)}`. Expired entries are
dropped lazily when they are next touched. Used by the development server
and by tests in place of Redis.
"""
import time
from threading import RLock
from typing import Callable, Dict, Optional, Tuple

from .base import KeyValueEngine


class MemoryEngine(KeyValueEngine):
    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._lock = RLock()
        self._store: Dict[str, Tuple[bytes, Optional[float]]] = {}
        self._clock = clock or time.monotonic

    def _live(self, key: str) -> Optional[Tuple[bytes, Optional[float]]]:
        entry = self._store.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._store[key]
            return None
        return entry

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            entry = self._live(key)
            return entry[0] if entry else None

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        with self._lock:
            self._store[key] = (bytes(value), self._clock() + ttl_seconds)

    def delete(self, key: str) -> int:
        with self._lock:
            if self._live(key) is None:
                return 0
            del self._store[key]
            return 1

    def ttl(self, key: str) -> Optional[float]:
        """Seconds until `key` expires, or None if it is absent."""
        with self._lock:
            entry = self._live(key)
            if entry is None or entry[1] is None:
                return None
            return entry[1] - self._clock()

    def keys(self):
        with self._lock:
            return [k for k in list(self._store) if self._live(k) is not None]

    def ping(self) -> bool:
        return True
