"""Redis-backed key-value engine.

Wraps a synchronous redis-py client. Values are stored as raw bytes with a
server-side expiry (`SET key value EX ttl`), which replaces the previous
value and its TTL in a single atomic command.
"""
from __future__ import annotations
import logging
from typing import Any, Optional

import redis
from redis.exceptions import RedisError

from keeper_lib.errors import BackendError, ConfigurationError
from .base import KeyValueEngine

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class RedisEngine(KeyValueEngine):
    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_url(cls, url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> "RedisEngine":
        """Build an engine from a `redis://` or `rediss://` connection string."""
        if not url:
            raise ConfigurationError("redis connection string is empty")
        try:
            client = redis.Redis.from_url(
                url,
                socket_timeout=timeout,
                socket_connect_timeout=timeout,
            )
        except ValueError as e:
            raise ConfigurationError(f"failed to parse redis url: {e}") from e
        return cls(client)

    def get(self, key: str) -> Optional[bytes]:
        try:
            value = self._client.get(key)
        except RedisError as e:
            logger.warning("Redis GET failed for %s: %s", key, e)
            raise BackendError(f"failed to load data: {e}") from e
        if isinstance(value, str):
            value = value.encode("utf-8")
        return value

    def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        try:
            self._client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            logger.warning("Redis SET failed for %s: %s", key, e)
            raise BackendError(f"failed to save data: {e}") from e

    def delete(self, key: str) -> int:
        try:
            return int(self._client.delete(key))
        except RedisError as e:
            logger.warning("Redis DEL failed for %s: %s", key, e)
            raise BackendError(f"failed to delete data: {e}") from e

    def ping(self) -> bool:
        try:
            return bool(self._client.ping())
        except RedisError as e:
            logger.debug("Redis PING failed: %s", e)
            return False

    def close(self) -> None:
        try:
            self._client.close()
        except RedisError:
            logger.debug("Ignoring error while closing redis client", exc_info=True)
