"""Key-value engine interface definitions.

Defines the KeyValueEngine abstract class the document store uses to talk
to its backing engine. Implementations translate their native failures to
`keeper_lib.errors.BackendError`.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional


class KeyValueEngine(ABC):
    """Abstract key-value engine.

    Implementations must be thread-safe: a single instance is shared by
    every request for the lifetime of the process.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Return the bytes stored under `key`, or None if absent or expired."""

    @abstractmethod
    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Atomically replace `key` with `value`, expiring after `ttl_seconds`."""

    @abstractmethod
    def delete(self, key: str) -> int:
        """Remove `key`. Return the number of entries removed (0 or 1)."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True if the engine is reachable."""

    def close(self) -> None:
        """Release any connections held by the engine."""
